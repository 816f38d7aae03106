from common import logger
from encoder.Frame import Frame
from encoder.params import BlockGeometry, MotionVector, MatchedBlock


def check_index_out_of_bounds(geometry: BlockGeometry, motion_vector: MotionVector, reference: Frame):
    x, y = geometry.col, geometry.row
    if x + motion_vector.dx < 0 or y + motion_vector.dy < 0:
        logger.error(f" mv [{tuple(motion_vector)}] for [{x}, {y}] referencing small value "
                     f"[{x + motion_vector.dx}] or [{y + motion_vector.dy}]")
        return True
    if x + motion_vector.dx + geometry.width > reference.cols or y + motion_vector.dy + geometry.height > reference.rows:
        logger.error(f" mv [{tuple(motion_vector)}] for [{x}, {y}] referencing large value "
                     f"[{x + motion_vector.dx + geometry.width}] or [{y + motion_vector.dy + geometry.height}]")
        return True
    return False


def reconstruct_block(reference: Frame, matched: MatchedBlock, output: Frame):
    """Copy the matched reference region into the output at the block's own anchor, all channels."""
    geometry = matched.geometry
    assert not check_index_out_of_bounds(geometry, matched.motion_vector, reference), \
        f"motion vector {tuple(matched.motion_vector)} at ({geometry.col}, {geometry.row}) leaves the reference frame"

    src_row, src_col = matched.source_row, matched.source_col
    predicted_block = reference.get_region(src_row, src_row + geometry.height, src_col, src_col + geometry.width)
    output.set_region(geometry.row, geometry.col, predicted_block)


def reconstruct_frame(reference: Frame, matched_blocks, output: Frame):
    for matched in matched_blocks:
        reconstruct_block(reference, matched, output)
    return output
