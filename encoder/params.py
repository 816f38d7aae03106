from typing import NamedTuple

from common import get_logger

logger = get_logger()

SEARCH_METHODS = ('three_step', 'full')


class DimensionMismatch(ValueError):
    """Frame extents are not exact multiples of the block size, or the two frames differ in extent."""


class MatcherConfig:
    def __init__(self, block_width, block_height, search_horizontal, search_vertical,
                 search_method='three_step', num_workers=1):
        self.block_width = block_width
        self.block_height = block_height
        self.search_horizontal = search_horizontal
        self.search_vertical = search_vertical
        self.search_method = search_method
        self.num_workers = num_workers
        self.validate()
        self._frozen = True

    def __setattr__(self, key, value):
        if getattr(self, '_frozen', False):
            raise AttributeError(f"MatcherConfig is immutable, cannot set [{key}]")
        super().__setattr__(key, value)

    def validate(self):
        for name in ('block_width', 'block_height', 'search_horizontal', 'search_vertical'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} [{value}] must be a positive integer")
        if self.search_method not in SEARCH_METHODS:
            raise ValueError(f"search_method [{self.search_method}] not one of {SEARCH_METHODS}")
        if self.num_workers < 1:
            raise ValueError(f"num_workers [{self.num_workers}] must be >= 1")
        return self

    @property
    def parallel(self):
        return self.num_workers > 1

    def __repr__(self):
        return (f"MatcherConfig(block={self.block_width}x{self.block_height}, "
                f"search=h{self.search_horizontal}/v{self.search_vertical}, "
                f"method={self.search_method}, workers={self.num_workers})")


class BlockGeometry(NamedTuple):
    """Top-left anchor and size of a macroblock in target-frame coordinates."""
    row: int
    col: int
    height: int
    width: int

    @property
    def row_stop(self):
        return self.row + self.height

    @property
    def col_stop(self):
        return self.col + self.width


class SearchWindow(NamedTuple):
    """Half-open rectangle [row_start, row_stop) x [col_start, col_stop) of the reference frame."""
    row_start: int
    row_stop: int
    col_start: int
    col_stop: int

    def contains(self, row, col, height, width):
        return (row >= self.row_start and col >= self.col_start
                and row + height <= self.row_stop and col + width <= self.col_stop)

    def is_empty(self):
        return self.row_stop <= self.row_start or self.col_stop <= self.col_start


class MotionVector(NamedTuple):
    dx: int
    dy: int


class MatchedBlock:
    def __init__(self, geometry: BlockGeometry, motion_vector: MotionVector, distortion, comparisons):
        self.geometry = geometry
        self.motion_vector = motion_vector
        self.distortion = distortion
        self.comparisons = comparisons

    @property
    def source_row(self):
        return self.geometry.row + self.motion_vector.dy

    @property
    def source_col(self):
        return self.geometry.col + self.motion_vector.dx

    def __repr__(self):
        return (f"MatchedBlock(({self.geometry.col}, {self.geometry.row}) mv={tuple(self.motion_vector)} "
                f"mse={self.distortion:.2f} comps={self.comparisons})")
