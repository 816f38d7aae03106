from encoder.params import MatcherConfig


class InputParameters:
    def __init__(self, frames_dir, matcher_config: MatcherConfig, reference_name='frame1.ppm',
                 target_name='frame2.ppm', plot_motion_field=False):
        self.frames_dir = frames_dir
        self.reference_name = reference_name
        self.target_name = target_name
        self.matcher_config = matcher_config
        self.plot_motion_field = plot_motion_field
