import argparse
import sys

from common import get_logger
from encoder.encoder import encode_frames
from encoder.params import MatcherConfig, SEARCH_METHODS
from input_parameters import InputParameters
from metrics.metrics import print_summary

logger = get_logger()


def build_arg_parser():
    parser = argparse.ArgumentParser(
        description="Block matching motion estimation between PATH/frame1.ppm and PATH/frame2.ppm")
    parser.add_argument('block_width', type=int)
    parser.add_argument('block_height', type=int)
    parser.add_argument('search_vertical', type=int)
    parser.add_argument('search_horizontal', type=int)
    parser.add_argument('path', help="directory holding frame1.ppm and frame2.ppm")
    parser.add_argument('--method', choices=SEARCH_METHODS, default='three_step')
    parser.add_argument('--workers', type=int, default=1, help="block matching threads, 1 runs serially")
    parser.add_argument('--plot', action='store_true', help="save a motion field plot")
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    try:
        matcher_config = MatcherConfig(
            block_width=args.block_width,
            block_height=args.block_height,
            search_horizontal=args.search_horizontal,
            search_vertical=args.search_vertical,
            search_method=args.method,
            num_workers=args.workers,
        )

        input_params = InputParameters(
            frames_dir=args.path,
            matcher_config=matcher_config,
            plot_motion_field=args.plot,
        )

        metrics = encode_frames(input_params)
    except (ValueError, OSError) as e:
        logger.error(f"block matching failed: {e}")
        return 1

    print_summary([metrics], [args.method])
    return 0


if __name__ == "__main__":
    sys.exit(main())
