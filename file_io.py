import os

import numpy as np
from PIL import Image

from encoder.Frame import Frame
from input_parameters import InputParameters


class FileIOHelper:
    def __init__(self, params: InputParameters):

        self.frames_dir = params.frames_dir
        self.reference_name = params.reference_name
        self.target_name = params.target_name
        config = params.matcher_config

        self.file_identifier = (f'{config.block_width}x{config.block_height}_'
                                f'{config.search_horizontal}x{config.search_vertical}_{config.search_method}')

    def make_output_dir(self):
        os.makedirs(self.get_file_name(suffix=''), exist_ok=True)

    def get_file_name(self, suffix):
        return os.path.join(self.frames_dir, self.file_identifier, suffix)

    def get_reference_file_name(self):
        return os.path.join(self.frames_dir, self.reference_name)

    def get_target_file_name(self):
        return os.path.join(self.frames_dir, self.target_name)

    def get_reconstructed_file_name(self):
        return os.path.join(self.frames_dir, 'Reconstructed_Frame.ppm')

    def get_mv_file_name(self):
        return self.get_file_name('mv.txt')

    def get_metrics_csv_file_name(self):
        return self.get_file_name('metrics.csv')

    def get_motion_field_png_file_name(self):
        return self.get_file_name('motion_field.png')


def load_frame(path) -> Frame:
    """Read a netpbm (PBM/PGM/PPM) file; grayscale images become single channel frames."""
    with Image.open(path) as img:
        if img.mode == '1':
            return Frame(np.asarray(img, dtype=np.uint8), max_value=1)
        if img.mode in ('I;16', 'I;16B', 'I'):
            return Frame(np.asarray(img, dtype=np.int32), max_value=65535)
        if img.mode not in ('L', 'RGB'):
            img = img.convert('RGB')
        return Frame(np.asarray(img), max_value=255)


def save_frame(path, frame: Frame):
    # netpbm files written by Pillow carry a maxval of 255 (L, RGB) or 65535 (I)
    if frame.channels == 1 and frame.max_value == 65535:
        img = Image.fromarray(frame.pixels[:, :, 0].astype(np.int32))
    elif frame.channels in (1, 3) and frame.max_value == 255:
        pixels = frame.pixels[:, :, 0] if frame.channels == 1 else frame.pixels
        img = Image.fromarray(pixels.astype(np.uint8))
    else:
        raise ValueError(f"cannot write {frame} as netpbm")
    img.save(path, format='PPM')


def write_mv_to_file(file_handle, matched_blocks, new_line_per_block=False):
    new_line_char = f'\n' if new_line_per_block else ''
    for m in sorted(matched_blocks, key=lambda b: (b.geometry.row, b.geometry.col)):
        file_handle.write(f'{new_line_char}{m.geometry.col},{m.geometry.row}:{m.motion_vector.dx},{m.motion_vector.dy}|')
    file_handle.write('\n')
