from clip_reader                                import ModuleLogger, Utils
from clip_reader.core.preprocessor.clip         import Clip
from clip_reader.core.preprocessor.filters      import (
    apply_averaging_filter,
    apply_global_thresholding,
    apply_template_filter
)
from clip_reader.core.preprocessor.pattern      import Pattern
from clip_reader.core.preprocessor.segmentation import (
    ACCENT_BAND_RATIO,
    ACCENT_OVERLAP_RATIO,
    SPACE_WIDTH_RATIO,
    segment_clip
)
from clip_reader.core.preprocessor.skeleton     import skeletonize
from clip_reader.core.preprocessor.slant        import MAX_SHEAR_ANGLE, correct_slant
from clip_reader.core.preprocessor.statistics   import PreprocessorStatistics
from clip_reader.core.utils                     import ConfigState
from pathlib                                    import Path

logger = ModuleLogger('preprocessor')()

class Preprocessor:
    """
    Turns a gray-level clip into character patterns and word-break positions.

    Steps can be called one by one, or chained by run() following preprocessor.yml:
    averaging filter, global thresholding, template filter, region isolation,
    slant correction, pattern building and skeletonization.
    """

    # -------------------- Class Constants --------------------

    PROJECT_ROOT = Utils.find_root('pyproject.toml')
    PARAMS_FILE  = PROJECT_ROOT / 'clip_reader' / 'config' / 'preprocessor.yml'

    # -------------------- Initialization --------------------

    def __init__(
        self,
        clip            : Clip | None = None,
        config_file     : Path | None = None,
        config_override : dict | None = None
    ):
        """
        Initializes the Preprocessor instance.

        Args:
            clip            : Optional clip to load right away
            config_file     : Optional custom path to preprocessor.yml
            config_override : Optional nested overrides merged over the file
        """
        self.config_file     = config_file or self.PARAMS_FILE
        self.config          = ConfigState.load(self.config_file, config_override)
        self.statistics      = PreprocessorStatistics()
        self.clip            = None
        self.regions         = []
        self.space_locations = []
        self.patterns        = []
        self.slant_angles    = []

        if clip is not None:
            self.load_clip(clip)

    def load_clip(self, clip: Clip):
        """
        Loads a new clip, discarding results and statistics of the previous one.
        """
        self.clip            = clip.copy()
        self.regions         = []
        self.space_locations = []
        self.patterns        = []
        self.slant_angles    = []
        self.statistics.clear()
        self.statistics.record('clip_size', clip.size)

    def require_clip(self) -> Clip:
        if self.clip is None:
            raise ValueError("No clip has been loaded")
        return self.clip

    # -------------------- Noise Removal and Thresholding --------------------

    def remove_noise_by_linear_filtering(self, passes: int = 1):
        clip = self.require_clip()
        with self.statistics.timed('averaging_filtering_time'):
            for _ in range(passes):
                clip = apply_averaging_filter(clip)
        self.clip = clip

    def apply_global_thresholding(self) -> int | None:
        """
        Binarizes the loaded clip.

        Returns:
            int | None: Threshold used, or None when the clip was already binary
        """
        with self.statistics.timed('global_thresholding_time'):
            self.clip, threshold = apply_global_thresholding(self.require_clip())

        if threshold is not None:
            self.statistics.record('optimal_threshold', threshold)
            logger.info(f"Clip thresholded at gray level {threshold}")
        return threshold

    def remove_noise_by_template_matching(self, passes: int = 1):
        clip = self.require_clip()
        with self.statistics.timed('template_filtering_time'):
            for _ in range(passes):
                clip = apply_template_filter(clip)
        self.clip = clip

    # -------------------- Segmentation --------------------

    def isolate_regions(self) -> list[int]:
        """
        Extracts the character regions of the thresholded clip in reading order.

        Returns:
            list: Word-break positions, each the number of regions preceding the break
        """
        heuristics = self.config.section('segmentation')

        with self.statistics.timed('regions_extraction_time'):
            result = segment_clip(
                self.require_clip(),
                accent_band_ratio    = heuristics.get('accent_band_ratio', ACCENT_BAND_RATIO),
                accent_overlap_ratio = heuristics.get('accent_overlap_ratio', ACCENT_OVERLAP_RATIO),
                space_width_ratio    = heuristics.get('space_width_ratio', SPACE_WIDTH_RATIO)
            )

        self.regions         = result.regions
        self.space_locations = result.space_locations

        self.statistics.record('regions_before_merging', result.regions_before_merging)
        self.statistics.record('regions_after_merging', len(result.regions))
        self.statistics.record('line_delimiters', len(result.line_bands))
        self.statistics.record('spaces_between_words', len(result.space_locations))
        self.statistics.record('mean_inter_region_space', result.mean_gap)
        self.statistics.record('average_character_height', lambda: self.average_character_height)
        self.statistics.record('average_character_width', lambda: self.average_character_width)

        logger.info(
            f"Isolated {len(self.regions)} regions in {len(result.line_bands)} lines "
            f"with {len(self.space_locations)} word breaks"
        )
        return self.space_locations

    def correct_slanting(self, max_angle: int = MAX_SHEAR_ANGLE):
        """
        Shears every region by its estimated slant angle index.
        """
        with self.statistics.timed('slanting_correction_time'):
            corrected = [correct_slant(region, max_angle) for region in self.regions]

        self.regions      = [region for region, _ in corrected]
        self.slant_angles = [angle for _, angle in corrected]
        self.statistics.record('slant_angle_estimation', lambda: sum(self.slant_angles) / len(self.slant_angles))

    @property
    def average_character_height(self) -> float:
        return sum(region.height for region in self.regions) / len(self.regions) if self.regions else 0.0

    @property
    def average_character_width(self) -> float:
        return sum(region.width for region in self.regions) / len(self.regions) if self.regions else 0.0

    # -------------------- Patterns --------------------

    def build_patterns(self) -> list[Pattern]:
        with self.statistics.timed('patterns_building_time'):
            self.patterns = [Pattern.from_region(region) for region in self.regions]
        return self.patterns

    def skeletonize_patterns(self) -> list[Pattern]:
        with self.statistics.timed('skeletonization_time'):
            thinned = [skeletonize(pattern.pixels) for pattern in self.patterns]

        self.patterns = [Pattern(pixels) for pixels, _ in thinned]
        self.statistics.record('skeletonization_sweeps', sum(sweeps for _, sweeps in thinned))
        return self.patterns

    # -------------------- Pipeline --------------------

    def run(self, clip: Clip | None = None) -> tuple[list[Pattern], list[int]]:
        """
        Runs every enabled preprocessing step on the given (or already loaded) clip.

        Args:
            clip : Optional clip replacing the loaded one

        Returns:
            tuple: (patterns in reading order, word-break positions)
        """
        if clip is not None:
            self.load_clip(clip)

        if self.config.step_enabled('averaging_filter') and not self.require_clip().binary:
            self.remove_noise_by_linear_filtering(passes = self.config.parameter('averaging_filter', 'passes', 1))

        self.apply_global_thresholding()

        if self.config.step_enabled('template_filter'):
            self.remove_noise_by_template_matching(passes = self.config.parameter('template_filter', 'passes', 1))

        self.isolate_regions()

        if self.config.step_enabled('slant_correction'):
            self.correct_slanting(max_angle = self.config.parameter('slant_correction', 'max_angle', MAX_SHEAR_ANGLE))

        self.build_patterns()

        if self.config.step_enabled('skeletonization'):
            self.skeletonize_patterns()

        return self.patterns, self.space_locations

    def write_clip_image(self, output_path: Path, scaling_factor: float = 1.0):
        self.require_clip().write_image(output_path, scaling_factor = scaling_factor)
