import csv
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack

import numpy as np
from skimage.metrics import peak_signal_noise_ratio

from common import get_logger
from encoder.Frame import Frame
from encoder.FrameMetrics import FrameMetrics
from encoder.block_predictor import get_block_matcher
from encoder.params import MatcherConfig
from encoder.reconstructor import reconstruct_block, reconstruct_frame
from encoder.segmenter import segment_macroblocks, check_frames_compatible
from file_io import FileIOHelper, load_frame, save_frame, write_mv_to_file
from input_parameters import InputParameters
from metrics.metrics import plot_motion_field

logger = get_logger()


class BlockMatchResult:
    def __init__(self, matched_blocks, reconstructed_frame: Frame, segmentation_time=0.0, matching_time=0.0,
                 reconstruction_time=0.0):
        self.matched_blocks = matched_blocks
        self.reconstructed_frame = reconstructed_frame
        self.segmentation_time = segmentation_time
        self.matching_time = matching_time
        self.reconstruction_time = reconstruction_time

    @property
    def motion_vectors(self):
        return [m.motion_vector for m in self.matched_blocks]

    @property
    def avg_mse(self):
        if not self.matched_blocks:
            return 0.0
        return sum(m.distortion for m in self.matched_blocks) / len(self.matched_blocks)

    @property
    def total_comparisons(self):
        return sum(m.comparisons for m in self.matched_blocks)


def match_blocks(reference: Frame, target: Frame, blocks, config: MatcherConfig):
    """Find the motion vector of every block; the result list is in the same order as ``blocks``."""
    matcher = get_block_matcher(config)

    def process_block(geometry):
        return matcher(reference, target, geometry, config)

    if not config.parallel:
        return [process_block(b) for b in blocks]

    with ThreadPoolExecutor(max_workers=config.num_workers) as executor:
        return list(executor.map(process_block, blocks))


def reconstruct_blocks(reference: Frame, matched_blocks, output: Frame, config: MatcherConfig):
    # every block writes a disjoint region of the output
    if not config.parallel:
        return reconstruct_frame(reference, matched_blocks, output)

    with ThreadPoolExecutor(max_workers=config.num_workers) as executor:
        list(executor.map(lambda m: reconstruct_block(reference, m, output), matched_blocks))
    return output


def block_match(reference: Frame, target: Frame, config: MatcherConfig) -> BlockMatchResult:
    check_frames_compatible(reference, target)

    logger.debug("Segmenting Macroblocks")
    t = time.time()
    blocks = segment_macroblocks(target, config)
    segmentation_time = time.time() - t
    logger.info(f"Time taken for segmentation: {segmentation_time:.4f}s [{len(blocks)} blocks]")

    logger.debug(f"Starting Block Matching {config}")
    t = time.time()
    matched_blocks = match_blocks(reference, target, blocks, config)
    matching_time = time.time() - t
    logger.info(f"Time taken for block matching: {matching_time:.4f}s")

    logger.debug("Reconstructing Frame")
    t = time.time()
    reconstructed = reconstruct_blocks(reference, matched_blocks, Frame.blank_like(target), config)
    reconstruction_time = time.time() - t
    logger.info(f"Time taken for reconstruction: {reconstruction_time:.4f}s")

    return BlockMatchResult(matched_blocks, reconstructed, segmentation_time, matching_time, reconstruction_time)


def frame_psnr(target: Frame, reconstructed: Frame):
    if target == reconstructed:
        return float('inf')
    return peak_signal_noise_ratio(target.pixels.astype(np.float64), reconstructed.pixels.astype(np.float64),
                                   data_range=target.max_value)


def encode_frames(params: InputParameters) -> FrameMetrics:
    file_io = FileIOHelper(params)
    config = params.matcher_config

    reference = load_frame(file_io.get_reference_file_name())
    target = load_frame(file_io.get_target_file_name())
    logger.info(f"Loaded reference {reference} and target {target}")

    result = block_match(reference, target, config)
    psnr = frame_psnr(target, result.reconstructed_frame)

    file_io.make_output_dir()
    metrics = FrameMetrics(len(result.matched_blocks), result.avg_mse, psnr, result.total_comparisons,
                           result.segmentation_time, result.matching_time, result.reconstruction_time)

    with ExitStack() as stack:
        mv_fh = stack.enter_context(open(file_io.get_mv_file_name(), 'wt'))
        metrics_csv_fh = stack.enter_context(open(file_io.get_metrics_csv_file_name(), 'wt', newline=''))
        metrics_csv_writer = csv.writer(metrics_csv_fh)
        metrics_csv_writer.writerow(FrameMetrics.get_header())
        metrics_csv_writer.writerow(metrics.to_csv_row())

        write_mv_to_file(mv_fh, result.matched_blocks)

    save_frame(file_io.get_reconstructed_file_name(), result.reconstructed_frame)
    logger.info(f"{config} mse [{round(metrics.avg_mse, 2):7.2f}] psnr [{round(psnr, 2):6.2f}] "
                f"comparisons [{metrics.comparisons}] total [{metrics.total_time:.3f}s]")

    if params.plot_motion_field:
        plot_motion_field(result.matched_blocks, target.shape, file_io.get_motion_field_png_file_name())

    return metrics
