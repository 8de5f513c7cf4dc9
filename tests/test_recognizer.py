"""End-to-end tests for ClipReader recognition and training."""

import logging
import numpy as np
import pytest

from clip_reader                        import Classifier, ClipReader, Dataset, Text
from clip_reader.core.feature_extractor import FEATURES

@pytest.fixture
def two_glyph_clip(gray_clip):
    """A square and a tall bar, far enough apart to be two words."""
    return gray_clip(20, 40, [(5, 5, 5, 5), (3, 25, 10, 3)])


@pytest.fixture
def reader(raw_preprocessing):
    return ClipReader(config_override = raw_preprocessing)


def test_untrained_dataset_recognizes_nothing(reader, two_glyph_clip):
    """Without samples every character is blank and only the break remains."""
    text = reader.recognize(two_glyph_clip, Classifier(Dataset(FEATURES)))

    assert isinstance(text, Text)
    assert str(text).strip() == ''
    assert len(reader.patterns) == 2
    assert reader.space_locations == [1]


def test_training_then_recognizing(reader, two_glyph_clip):
    """After one training pass the clip is read back as its reference text."""
    dataset    = Dataset(FEATURES)
    classifier = Classifier(dataset)

    hit_rate = reader.train(two_glyph_clip, classifier, "A B")

    assert hit_rate == 0.0
    assert dataset.size() == 2
    assert reader.recognize(two_glyph_clip, classifier) == 'A B'
    assert reader.train(two_glyph_clip, classifier, "A B") == 100.0


def test_training_skipped_on_length_mismatch(reader, two_glyph_clip):
    """A reference with another number of characters trains nothing."""
    dataset = Dataset(FEATURES)

    assert reader.train(two_glyph_clip, Classifier(dataset), "ABC") is None
    assert dataset.size() == 0


def test_train_pattern_learns_single_character(reader):
    """A synthetic character is missed once, then recognized."""
    image              = np.full((35, 35), 255, dtype = np.uint8)
    image[5:30, 10:20] = 0
    classifier         = Classifier(Dataset(FEATURES))

    assert reader.train_pattern(image, 65, classifier) == 0.0
    assert reader.train_pattern(image, 65, classifier) == 100.0
    assert reader.characters == ['A']


def test_export_pattern_images(reader, two_glyph_clip, tmp_path):
    """Patterns of the last clip are written as numbered bitmaps."""
    reader.recognize(two_glyph_clip, Classifier(Dataset(FEATURES)))

    written = reader.export_pattern_images(tmp_path / 'patterns')

    assert [path.name for path in written] == ['pattern1.bmp', 'pattern2.bmp']
    assert all(path.is_file() for path in written)


def test_statistics_report_has_a_section_per_stage(reader, two_glyph_clip):
    """Each stage that ran contributes a titled section."""
    reader.recognize(two_glyph_clip, Classifier(Dataset(FEATURES)))
    report = reader.statistics_report()

    assert '[Preprocessing]' in report
    assert '[Feature extraction]' in report
    assert '[Classification]' in report


def test_log_statistics_writes_the_report(reader, two_glyph_clip):
    """The statistics report goes to the recognizer's log."""
    records = []
    handler = logging.Handler()
    handler.emit = records.append
    logger  = logging.getLogger('clip_reader.recognizer')
    logger.addHandler(handler)

    try:
        reader.recognize(two_glyph_clip, Classifier(Dataset(FEATURES)))
        reader.log_statistics()
    finally:
        logger.removeHandler(handler)

    messages = [record.getMessage() for record in records]
    assert '[Preprocessing]' in messages
    assert messages[-len(reader.statistics_report()):] == reader.statistics_report()
