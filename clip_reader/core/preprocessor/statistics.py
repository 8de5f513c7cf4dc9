from clip_reader.core.statistics import Statistics, stat
from dataclasses                 import dataclass

@dataclass
class PreprocessorStatistics(Statistics):
    """
    Measurements gathered while preprocessing one clip.
    """
    clip_size                : int | None   = stat('Clip size (pixels)')
    optimal_threshold        : int | None   = stat('Optimal threshold')
    averaging_filtering_time : float | None = stat('Averaging filtering time', timing = True)
    global_thresholding_time : float | None = stat('Global thresholding time', timing = True)
    template_filtering_time  : float | None = stat('Template filtering time', timing = True)
    regions_before_merging   : int | None   = stat('Regions before merging')
    line_delimiters          : int | None   = stat('Line delimiters')
    regions_after_merging    : int | None   = stat('Regions after merging')
    regions_extraction_time  : float | None = stat('Regions extraction time', timing = True)
    slant_angle_estimation   : float | None = stat('Mean slant angle index')
    slanting_correction_time : float | None = stat('Slanting correction time', timing = True)
    spaces_between_words     : int | None   = stat('Spaces between words')
    mean_inter_region_space  : float | None = stat('Mean inter-region space')
    average_character_height : float | None = stat('Average character height')
    average_character_width  : float | None = stat('Average character width')
    patterns_building_time   : float | None = stat('Patterns building time', timing = True)
    skeletonization_sweeps   : int | None   = stat('Skeletonization sweeps')
    skeletonization_time     : float | None = stat('Skeletonization time', timing = True)
