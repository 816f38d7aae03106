import logging

import numpy as np



def get_logger():
    logging.basicConfig(format='%(asctime)s.%(msecs)03d %(levelname)-7s [%(filename)s:%(lineno)-3d] %(message)s',
                        datefmt='%H:%M:%S', )
    logger = logging.getLogger()
    logger.setLevel(logging.INFO)
    return logger

logger = get_logger()


def mse(block1, block2):
    """Compute Mean Squared Error between two blocks over every (row, col, channel) sample."""
    if block1.shape != block2.shape:
        raise ValueError(f"block shapes differ: {block1.shape} != {block2.shape}")
    diff = block1.astype(np.int64) - block2.astype(np.int64)
    return float(np.mean(diff * diff))
