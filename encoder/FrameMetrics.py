from typing import List


class FrameMetrics:
    def __init__(self, block_count: int, avg_mse: float, psnr: float, comparisons: int,
                 segmentation_time: float, matching_time: float, reconstruction_time: float):
        self.block_count = block_count
        self.avg_mse = avg_mse
        self.psnr = psnr
        self.comparisons = comparisons
        self.segmentation_time = segmentation_time
        self.matching_time = matching_time
        self.reconstruction_time = reconstruction_time

    @property
    def total_time(self):
        return self.segmentation_time + self.matching_time + self.reconstruction_time

    def to_csv_row(self) -> List:
        """Convert the metrics to a list suitable for writing to a CSV row."""
        return [
            self.block_count,
            f"{self.avg_mse:.4f}",
            f"{self.psnr:.2f}",
            self.comparisons,
            f"{self.segmentation_time:.4f}",
            f"{self.matching_time:.4f}",
            f"{self.reconstruction_time:.4f}",
        ]

    @staticmethod
    def from_csv_row(row: List) -> 'FrameMetrics':
        """Create a FrameMetrics instance from a CSV row."""
        return FrameMetrics(
            block_count=int(row[0]),
            avg_mse=float(row[1]),
            psnr=float(row[2]),
            comparisons=int(row[3]),
            segmentation_time=float(row[4]),
            matching_time=float(row[5]),
            reconstruction_time=float(row[6])
        )

    @staticmethod
    def get_header():
        return ["blocks", "avg_MSE", "PSNR", "mse_comps", "seg_time", "match_time", "recon_time"]

    def __repr__(self):
        return (f"FrameMetrics(blocks={self.block_count}, avg_mse={self.avg_mse:.2f}, psnr={self.psnr:.2f}, "
                f"comparisons={self.comparisons}, segmentation_time={self.segmentation_time:.4f}, "
                f"matching_time={self.matching_time:.4f}, reconstruction_time={self.reconstruction_time:.4f})")
