from encoder.params import SearchWindow


def get_search_area_start(search_dist, centre_coordinate):
    return max(centre_coordinate - search_dist, 0)


def get_search_area_stop(max_value, search_dist, centre_coordinate, block_distance):
    return min(centre_coordinate + block_distance + search_dist, max_value)


def get_search_window(max_rows, max_cols, centre_row, centre_col, block_height, block_width,
                      search_horizontal, search_vertical) -> SearchWindow:
    """
    Window around a block anchored at (centre_row, centre_col), widened by the search radii.

    Clamped silently to [0, max_rows] x [0, max_cols]; blocks near an edge get
    a smaller window instead of an error.
    """
    return SearchWindow(
        row_start=get_search_area_start(search_vertical, centre_row),
        row_stop=get_search_area_stop(max_rows, search_vertical, centre_row, block_height),
        col_start=get_search_area_start(search_horizontal, centre_col),
        col_stop=get_search_area_stop(max_cols, search_horizontal, centre_col, block_width),
    )
