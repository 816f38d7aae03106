from common import get_logger
from encoder.Frame import Frame
from encoder.params import MatcherConfig, BlockGeometry, DimensionMismatch

logger = get_logger()


def check_dimensions(frame: Frame, config: MatcherConfig):
    # width first, then height
    if frame.cols % config.block_width != 0:
        raise DimensionMismatch(f"frame width [{frame.cols}] is not a multiple of block width [{config.block_width}]")
    if frame.rows % config.block_height != 0:
        raise DimensionMismatch(f"frame height [{frame.rows}] is not a multiple of block height [{config.block_height}]")


def check_frames_compatible(reference: Frame, target: Frame):
    if not reference.same_extent(target):
        raise DimensionMismatch(f"reference {reference.shape} and target {target.shape} frames differ in extent")


def segment_macroblocks(frame: Frame, config: MatcherConfig):
    """Split the frame into row-major block anchors. Raises DimensionMismatch before producing any block."""
    check_dimensions(frame, config)
    blocks = []
    for row in range(0, frame.rows, config.block_height):
        for col in range(0, frame.cols, config.block_width):
            blocks.append(BlockGeometry(row, col, config.block_height, config.block_width))
    logger.debug(f"segmented {frame.shape} into {len(blocks)} blocks of {config.block_width}x{config.block_height}")
    return blocks
