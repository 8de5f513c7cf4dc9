"""Unit tests for the preprocessing pipeline."""

import numpy as np
import pytest

from clip_reader                   import Clip, Preprocessor
from clip_reader.core.preprocessor import PLANE_SIZE

def test_raw_pipeline_finds_two_words(gray_clip, raw_preprocessing):
    """Thresholding and segmentation alone isolate both blocks."""
    preprocessor      = Preprocessor(config_override = raw_preprocessing)
    patterns, spaces  = preprocessor.run(gray_clip(15, 40, [(5, 5, 5, 5), (5, 30, 5, 5)]))

    assert len(patterns) == 2
    assert spaces == [1]
    assert all(pattern.area() == PLANE_SIZE * PLANE_SIZE for pattern in patterns)


def test_statistics_are_collected(gray_clip, raw_preprocessing):
    """Every step run leaves its measurements behind."""
    preprocessor = Preprocessor(config_override = raw_preprocessing)
    preprocessor.run(gray_clip(15, 40, [(5, 5, 5, 5), (5, 30, 5, 5)]))
    statistics   = preprocessor.statistics

    assert statistics.clip_size == 600
    assert statistics.optimal_threshold is not None
    assert statistics.regions_before_merging == 2
    assert statistics.regions_after_merging == 2
    assert statistics.line_delimiters == 1
    assert statistics.spaces_between_words == 1
    assert statistics.average_character_width == 5.0
    assert statistics.averaging_filtering_time is None
    assert any(line.startswith('Total time') for line in statistics.report())


def test_default_pipeline_runs_every_enabled_step(gray_clip):
    """Filtering and skeletonization keep both characters."""
    preprocessor     = Preprocessor()
    patterns, spaces = preprocessor.run(gray_clip(20, 50, [(6, 5, 8, 8), (6, 35, 8, 8)]))

    assert len(patterns) == 2
    assert spaces == [1]
    assert all(0 < pattern.area() < PLANE_SIZE * PLANE_SIZE for pattern in patterns)
    assert preprocessor.statistics.averaging_filtering_time is not None
    assert preprocessor.statistics.skeletonization_sweeps is not None


def test_binary_clip_skips_averaging(binary_clip):
    """An already thresholded clip goes straight to segmentation."""
    preprocessor = Preprocessor()
    patterns, _  = preprocessor.run(binary_clip(20, 20, [(5, 5, 8, 8)]))

    assert len(patterns) == 1
    assert preprocessor.statistics.optimal_threshold is None
    assert preprocessor.statistics.averaging_filtering_time is None


def test_segmentation_heuristics_come_from_configuration(gray_clip, raw_preprocessing):
    """A large space ratio leaves only the mean-gap rule, which a single gap never passes."""
    override                 = dict(raw_preprocessing)
    override['segmentation'] = {'space_width_ratio': 100.0}

    _, spaces = Preprocessor(config_override = override).run(gray_clip(15, 40, [(5, 5, 5, 5), (5, 30, 5, 5)]))

    assert spaces == []


def test_slant_correction_step(binary_clip, raw_preprocessing):
    """Enabling slant correction records one angle per region."""
    override                              = dict(raw_preprocessing)
    override['steps']                     = dict(raw_preprocessing['steps'])
    override['steps']['slant_correction'] = {'enabled': True}

    pixels = np.zeros((25, 25), dtype = np.uint8)
    for index in range(20):
        pixels[index + 2, index + 2] = 1

    preprocessor = Preprocessor(config_override = override)
    preprocessor.run(Clip(pixels, binary = True))

    assert len(preprocessor.slant_angles) == 1
    assert preprocessor.slant_angles[0] > 0
    assert preprocessor.statistics.slant_angle_estimation is not None


def test_steps_require_a_clip():
    """Steps cannot run before a clip is loaded."""
    with pytest.raises(ValueError):
        Preprocessor().apply_global_thresholding()


def test_loaded_clip_is_copied(gray_clip, raw_preprocessing):
    """Preprocessing never alters the caller's clip."""
    clip     = gray_clip(15, 40, [(5, 5, 5, 5)])
    original = clip.copy()

    Preprocessor(clip = clip, config_override = raw_preprocessing).run()

    assert clip == original


def test_write_clip_image(tmp_path, binary_clip):
    """The current clip can be written for inspection."""
    preprocessor = Preprocessor(clip = binary_clip(5, 5, [(1, 1, 2, 2)]))
    preprocessor.write_clip_image(tmp_path / 'clip.png', scaling_factor = 2.0)

    assert (tmp_path / 'clip.png').is_file()
