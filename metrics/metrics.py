import csv

import matplotlib
import numpy as np
from matplotlib import pyplot as plt
from prettytable import PrettyTable

from common import get_logger
from encoder.FrameMetrics import FrameMetrics

matplotlib.use('Agg')

logger = get_logger()


def read_metrics_from_csv(csv_file_name: str):
    rows = []
    with open(csv_file_name, 'r') as f:
        csv_reader = csv.reader(f)
        next(csv_reader)  # Skip the header row

        for row in csv_reader:
            rows.append(FrameMetrics.from_csv_row(row))
    return rows


def plot_motion_field(matched_blocks, frame_shape, png_file_name):
    """Draw one arrow per block, from its anchor centre along the motion vector."""
    rows, cols = frame_shape[0], frame_shape[1]
    fig, ax1 = plt.subplots(figsize=(6, 6 * rows / max(cols, 1)))

    x = np.array([m.geometry.col + m.geometry.width / 2 for m in matched_blocks])
    y = np.array([m.geometry.row + m.geometry.height / 2 for m in matched_blocks])
    u = np.array([m.motion_vector.dx for m in matched_blocks])
    v = np.array([m.motion_vector.dy for m in matched_blocks])

    ax1.quiver(x, y, u, v, angles='xy', scale_units='xy', scale=1, color='red', width=0.003)
    ax1.set_xlim(0, cols)
    ax1.set_ylim(rows, 0)
    ax1.set_aspect('equal')

    plt.title("Motion Field")
    plt.xlabel("column")
    plt.ylabel("row")
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(png_file_name)
    plt.close('all')
    logger.info(f"motion field saved to {png_file_name}")


def print_summary(metrics_list, labels=None):
    table = PrettyTable()
    table.field_names = ["Run"] + FrameMetrics.get_header()

    for idx, metrics in enumerate(metrics_list):
        label = labels[idx] if labels else str(idx)
        table.add_row([label] + metrics.to_csv_row())

    logger.info(f"\n{table}")
    return table
