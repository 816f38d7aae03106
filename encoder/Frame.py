import numpy as np

from common import get_logger

logger = get_logger()


class Frame:
    """
    Multi-channel pixel grid stored as a (rows, cols, channels) array.

    All channels share the same row/column extent. Samples are non-negative
    integers no larger than ``max_value``.
    """

    def __init__(self, pixels, max_value=255):
        pixels = np.asarray(pixels)
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]
        if pixels.ndim != 3:
            raise ValueError(f"frame must be 2D or 3D, got shape {pixels.shape}")
        if pixels.size and (pixels.min() < 0 or pixels.max() > max_value):
            raise ValueError(f"samples outside [0, {max_value}]: [{pixels.min()}, {pixels.max()}]")
        self.pixels = pixels.astype(np.int32)
        self.max_value = max_value

    @classmethod
    def blank_like(cls, other: 'Frame'):
        return cls(np.zeros(other.shape, dtype=np.int32), max_value=other.max_value)

    @property
    def rows(self):
        return self.pixels.shape[0]

    @property
    def cols(self):
        return self.pixels.shape[1]

    @property
    def channels(self):
        return self.pixels.shape[2]

    @property
    def shape(self):
        return self.pixels.shape

    def same_extent(self, other: 'Frame'):
        return self.shape == other.shape

    def _check_index(self, channel, row, col):
        if not (0 <= channel < self.channels and 0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"pixel (c={channel}, r={row}, c={col}) outside frame {self.shape}")

    def get(self, channel, row, col):
        self._check_index(channel, row, col)
        return int(self.pixels[row, col, channel])

    def set(self, channel, row, col, value):
        self._check_index(channel, row, col)
        if value < 0 or value > self.max_value:
            raise ValueError(f"sample [{value}] outside [0, {self.max_value}]")
        self.pixels[row, col, channel] = value

    def get_region(self, row_start, row_stop, col_start, col_stop):
        """Read-only view of rows [row_start, row_stop) and cols [col_start, col_stop), all channels."""
        if row_start < 0 or col_start < 0 or row_stop > self.rows or col_stop > self.cols \
                or row_stop < row_start or col_stop < col_start:
            raise IndexError(f"region [{row_start}:{row_stop}, {col_start}:{col_stop}] outside frame {self.shape}")
        region = self.pixels[row_start:row_stop, col_start:col_stop]
        region.flags.writeable = False
        return region

    def set_region(self, row, col, block):
        height, width = block.shape[0], block.shape[1]
        if row < 0 or col < 0 or row + height > self.rows or col + width > self.cols:
            raise IndexError(f"block of {block.shape} at ({row}, {col}) outside frame {self.shape}")
        if block.ndim == 2:
            block = block[:, :, np.newaxis]
        self.pixels[row:row + height, col:col + width] = block

    def __eq__(self, other):
        if not isinstance(other, Frame):
            return NotImplemented
        return self.same_extent(other) and np.array_equal(self.pixels, other.pixels)

    def __repr__(self):
        return f"Frame(rows={self.rows}, cols={self.cols}, channels={self.channels}, max={self.max_value})"
