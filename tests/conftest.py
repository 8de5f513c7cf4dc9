"""Shared fixtures for the clip_reader test suite."""

import numpy as np
import pytest

from clip_reader import Clip, Dataset, FeatureVector, Sample

def _draw(height: int, width: int, blocks: list[tuple[int, int, int, int]], ink: int, background: int) -> np.ndarray:
    pixels = np.full((height, width), background, dtype = np.uint8)
    for top, left, block_height, block_width in blocks:
        pixels[top:top + block_height, left:left + block_width] = ink
    return pixels

@pytest.fixture
def gray_clip():
    """Factory for white clips with black rectangles given as (top, left, height, width)."""
    def build(height: int, width: int, blocks: list[tuple[int, int, int, int]]) -> Clip:
        return Clip(_draw(height, width, blocks, ink = 0, background = 255))
    return build

@pytest.fixture
def binary_clip():
    """Factory for thresholded clips with ink rectangles given as (top, left, height, width)."""
    def build(height: int, width: int, blocks: list[tuple[int, int, int, int]]) -> Clip:
        return Clip(_draw(height, width, blocks, ink = 1, background = 0), binary = True)
    return build

@pytest.fixture
def make_dataset():
    """Factory for in-memory datasets of 2-feature samples given as ((x, y), code)."""
    def build(samples: list[tuple[tuple[float, float], int]] = ()) -> Dataset:
        return Dataset(2, [Sample(FeatureVector(values), code) for values, code in samples])
    return build

@pytest.fixture
def raw_preprocessing():
    """Configuration override keeping only thresholding, segmentation and pattern building."""
    return {
        'steps': {
            'averaging_filter' : {'enabled': False},
            'template_filter'  : {'enabled': False},
            'slant_correction' : {'enabled': False},
            'skeletonization'  : {'enabled': False}
        }
    }
