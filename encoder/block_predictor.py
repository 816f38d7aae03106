import math

from common import mse, logger
from encoder.Frame import Frame
from encoder.params import MatcherConfig, BlockGeometry, MotionVector, MatchedBlock, SearchWindow
from encoder.search_window import get_search_window

STEPS = 3


def next_step_distance(search_dist):
    # fast ceil, radii are not guaranteed to halve exactly
    half = search_dist // 2
    if half == 0:
        return 1
    return (search_dist + half - 1) // half


def candidate_offsets(search_dist):
    if search_dist == 0:
        return (0,)
    return (-search_dist, 0, search_dist)


def get_ref_block(reference: Frame, row, col, geometry: BlockGeometry):
    return reference.get_region(row, row + geometry.height, col, col + geometry.width)


def is_out_of_window(row, col, geometry: BlockGeometry, window: SearchWindow):
    return not window.contains(row, col, geometry.height, geometry.width)


def three_step_search(reference: Frame, target: Frame, geometry: BlockGeometry, config: MatcherConfig) -> MatchedBlock:
    """
    Coarse-to-fine search for the reference-frame block closest (by MSE) to the target block.

    The running best location starts at the block's own anchor. Each of the
    three steps compares the 3x3 grid of candidates around it and moves to the
    strictly better one; candidates whose block leaves the current window are
    skipped. Steps with no candidate in the window leave the best location
    where it is and still advance.
    """
    curr_block = target.get_region(geometry.row, geometry.row_stop, geometry.col, geometry.col_stop)

    window = get_search_window(reference.rows, reference.cols, geometry.row, geometry.col,
                               geometry.height, geometry.width, config.search_horizontal, config.search_vertical)

    best_row, best_col = geometry.row, geometry.col
    min_mse = mse(curr_block, get_ref_block(reference, best_row, best_col, geometry))
    comparisons = 1

    search_dist_x = config.search_horizontal // 2
    search_dist_y = config.search_vertical // 2

    for step in range(STEPS):
        # candidates are laid out around the best location at the start of the step
        new_best_row, new_best_col = best_row, best_col
        evaluated = 0
        for x in candidate_offsets(search_dist_x):
            for y in candidate_offsets(search_dist_y):
                row, col = best_row + y, best_col + x
                if is_out_of_window(row, col, geometry, window):
                    continue
                error = mse(curr_block, get_ref_block(reference, row, col, geometry))
                evaluated += 1
                if error < min_mse:
                    min_mse = error
                    new_best_row, new_best_col = row, col

        if evaluated == 0:
            reason = "empty window" if window.is_empty() else f"no candidate inside {window}"
            logger.debug(f"b ({geometry.col:3} {geometry.row:3}) step {step}: {reason}")
        best_row, best_col = new_best_row, new_best_col
        comparisons += evaluated

        if step == STEPS - 2:
            search_dist_x = 1
            search_dist_y = 1
        elif step != STEPS - 1:
            search_dist_x = next_step_distance(search_dist_x)
            search_dist_y = next_step_distance(search_dist_y)

        if step != STEPS - 1:
            window = get_search_window(reference.rows, reference.cols, best_row, best_col,
                                       geometry.height, geometry.width, search_dist_x, search_dist_y)

    mv = MotionVector(best_col - geometry.col, best_row - geometry.row)
    logger.debug(f"b ({geometry.col:3} {geometry.row:3}) mse [{min_mse:>8.2f}] mv:{tuple(mv)}")
    return MatchedBlock(geometry, mv, min_mse, comparisons)


def full_search(reference: Frame, target: Frame, geometry: BlockGeometry, config: MatcherConfig) -> MatchedBlock:
    """Exhaustive search of the initial window; ties go to the vector with the smaller |dx| + |dy|."""
    curr_block = target.get_region(geometry.row, geometry.row_stop, geometry.col, geometry.col_stop)
    window = get_search_window(reference.rows, reference.cols, geometry.row, geometry.col,
                               geometry.height, geometry.width, config.search_horizontal, config.search_vertical)

    min_mse = math.inf
    best_mv = MotionVector(0, 0)
    comparisons = 0
    for mv_y in range(-config.search_vertical, config.search_vertical + 1):
        for mv_x in range(-config.search_horizontal, config.search_horizontal + 1):
            row, col = geometry.row + mv_y, geometry.col + mv_x
            if is_out_of_window(row, col, geometry, window):
                continue
            comparisons += 1
            error = mse(curr_block, get_ref_block(reference, row, col, geometry))
            if error < min_mse or (error == min_mse and abs(mv_x) + abs(mv_y) < abs(best_mv.dx) + abs(best_mv.dy)):
                min_mse = error
                best_mv = MotionVector(mv_x, mv_y)

    return MatchedBlock(geometry, best_mv, min_mse, comparisons)


def get_block_matcher(config: MatcherConfig):
    if config.search_method == 'full':
        return full_search
    return three_step_search
