import io
import math
import os
import tempfile
from unittest import TestCase

import numpy as np

from encoder.Frame import Frame
from encoder.encoder import encode_frames
from encoder.params import MatcherConfig, MotionVector, MatchedBlock, BlockGeometry
from file_io import load_frame, save_frame, write_mv_to_file, FileIOHelper
from input_parameters import InputParameters
from main import main
from metrics.metrics import read_metrics_from_csv
from motion_vector import parse_mv, get_mv_extremes
from tests.frame_generator import generate_noise_frame, translate_frame


class TestFrameFiles(TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)

    def test_grayscale_frame_file(self):
        frame = generate_noise_frame(8, 16, seed=21)
        path = os.path.join(self.tmp_dir.name, 'gray.ppm')
        save_frame(path, frame)

        loaded = load_frame(path)
        self.assertEqual((8, 16, 1), loaded.shape)
        self.assertEqual(frame, loaded)

    def test_colour_frame_file(self):
        frame = generate_noise_frame(16, 8, channels=3, seed=22)
        path = os.path.join(self.tmp_dir.name, 'colour.ppm')
        save_frame(path, frame)

        with open(path, 'rb') as f:
            self.assertEqual(b'P6', f.read(2))
        self.assertEqual(frame, load_frame(path))

    def test_unsupported_channel_count(self):
        with self.assertRaises(ValueError):
            save_frame(os.path.join(self.tmp_dir.name, 'x.ppm'), Frame(np.zeros((4, 4, 2))))

    def test_sixteen_bit_grayscale_frame_file(self):
        frame = generate_noise_frame(8, 8, seed=28, max_value=65535)
        path = os.path.join(self.tmp_dir.name, 'deep.pgm')
        save_frame(path, frame)

        loaded = load_frame(path)
        self.assertEqual(65535, loaded.max_value)
        self.assertEqual(frame, loaded)

    def test_refuses_max_value_without_native_storage(self):
        for channels in (1, 3):
            frame = generate_noise_frame(4, 4, channels=channels, seed=29, max_value=100)
            path = os.path.join(self.tmp_dir.name, f'scaled_{channels}.ppm')
            with self.assertRaises(ValueError):
                save_frame(path, frame)
            self.assertFalse(os.path.exists(path))


class TestMotionVectorFile(TestCase):
    def test_write_and_parse(self):
        blocks = [
            MatchedBlock(BlockGeometry(8, 0, 8, 8), MotionVector(-1, 0), 0.0, 1),
            MatchedBlock(BlockGeometry(0, 0, 8, 8), MotionVector(0, 1), 0.0, 1),
            MatchedBlock(BlockGeometry(0, 8, 8, 8), MotionVector(2, -3), 0.0, 1),
        ]
        fh = io.StringIO()
        write_mv_to_file(fh, blocks)

        self.assertEqual('0,0:0,1|8,0:2,-3|0,8:-1,0|\n', fh.getvalue())
        mv_field = parse_mv(fh.getvalue())
        self.assertEqual({(0, 0): (0, 1), (8, 0): (2, -3), (0, 8): (-1, 0)}, mv_field)
        self.assertEqual(([-1, -3], [2, 1]), get_mv_extremes(mv_field))

    def test_one_block_per_line(self):
        fh = io.StringIO()
        write_mv_to_file(fh, [MatchedBlock(BlockGeometry(0, 0, 4, 4), MotionVector(1, 1), 0.0, 1)],
                         new_line_per_block=True)
        self.assertEqual({(0, 0): (1, 1)}, parse_mv(fh.getvalue()))


class TestEncodeFrames(TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.frames_dir = self.tmp_dir.name

    def write_frames(self, reference, target):
        save_frame(os.path.join(self.frames_dir, 'frame1.ppm'), reference)
        save_frame(os.path.join(self.frames_dir, 'frame2.ppm'), target)

    def test_identical_frames_end_to_end(self):
        reference = generate_noise_frame(16, 16, channels=3, seed=23)
        self.write_frames(reference, reference)
        params = InputParameters(self.frames_dir, MatcherConfig(8, 8, 4, 4), plot_motion_field=True)

        metrics = encode_frames(params)

        file_io = FileIOHelper(params)
        self.assertEqual(reference, load_frame(file_io.get_reconstructed_file_name()))
        self.assertEqual(4, metrics.block_count)
        self.assertEqual(0.0, metrics.avg_mse)
        self.assertTrue(math.isinf(metrics.psnr))
        self.assertTrue(os.path.exists(file_io.get_motion_field_png_file_name()))

        with open(file_io.get_mv_file_name()) as f:
            mv_field = parse_mv(f.read())
        self.assertEqual(4, len(mv_field))
        self.assertTrue(all(mv == (0, 0) for mv in mv_field.values()))

        rows = read_metrics_from_csv(file_io.get_metrics_csv_file_name())
        self.assertEqual(1, len(rows))
        self.assertEqual(metrics.comparisons, rows[0].comparisons)

    def test_translated_frames_end_to_end(self):
        reference = generate_noise_frame(32, 32, seed=24)
        self.write_frames(reference, translate_frame(reference, 2, 2))
        params = InputParameters(self.frames_dir, MatcherConfig(8, 8, 4, 4, num_workers=2))

        metrics = encode_frames(params)

        with open(FileIOHelper(params).get_mv_file_name()) as f:
            mv_field = parse_mv(f.read())
        self.assertEqual((2, 2), mv_field[(8, 8)])
        self.assertEqual(16, metrics.block_count)
        self.assertGreater(metrics.avg_mse, 0)


class TestMain(TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.frames_dir = self.tmp_dir.name

    def test_main_writes_reconstructed_frame(self):
        frame = generate_noise_frame(16, 16, channels=3, seed=25)
        save_frame(os.path.join(self.frames_dir, 'frame1.ppm'), frame)
        save_frame(os.path.join(self.frames_dir, 'frame2.ppm'), frame)

        self.assertEqual(0, main(['8', '8', '4', '4', self.frames_dir]))
        self.assertEqual(frame, load_frame(os.path.join(self.frames_dir, 'Reconstructed_Frame.ppm')))

    def test_main_dimension_mismatch(self):
        frame = generate_noise_frame(15, 16, seed=26)
        save_frame(os.path.join(self.frames_dir, 'frame1.ppm'), frame)
        save_frame(os.path.join(self.frames_dir, 'frame2.ppm'), frame)

        self.assertEqual(1, main(['8', '8', '4', '4', self.frames_dir]))
        self.assertFalse(os.path.exists(os.path.join(self.frames_dir, 'Reconstructed_Frame.ppm')))
        self.assertEqual(['frame1.ppm', 'frame2.ppm'], sorted(os.listdir(self.frames_dir)))

    def test_main_missing_frames(self):
        self.assertEqual(1, main(['8', '8', '4', '4', '--method', 'full', self.frames_dir]))

    def test_main_rejects_zero_parameters(self):
        self.assertEqual(1, main(['0', '8', '4', '4', self.frames_dir]))
