"""Unit tests for the statistics base class."""

import pytest

from clip_reader.core.statistics import Statistics, stat
from dataclasses                 import dataclass

@dataclass
class SampleStatistics(Statistics):
    items      : int | None   = stat('Items')
    ratio      : float | None = stat('Ratio')
    step_time  : float | None = stat('Step time', timing = True)


def test_unmeasured_fields_are_skipped():
    """Nothing is reported before anything is recorded."""
    assert SampleStatistics().report() == []


def test_record_evaluates_callables():
    """A callable is evaluated when recorded."""
    statistics = SampleStatistics()
    statistics.record('items', lambda: 3)

    assert statistics.items == 3


def test_record_never_raises():
    """Failing or unknown statistics are dropped."""
    statistics = SampleStatistics()
    statistics.record('ratio', lambda: 1 / 0)
    statistics.record('missing', 5)

    assert statistics.ratio is None
    assert not hasattr(statistics, 'missing')


def test_timed_block_records_duration():
    """Timing a block stores a non-negative duration."""
    statistics = SampleStatistics()
    with statistics.timed('step_time'):
        sum(range(1000))

    assert statistics.step_time >= 0.0
    assert statistics.total_time == statistics.step_time


def test_timed_block_propagates_errors():
    """Errors inside a timed block reach the caller."""
    statistics = SampleStatistics()
    with pytest.raises(RuntimeError):
        with statistics.timed('step_time'):
            raise RuntimeError("boom")


def test_report_formats_values():
    """Counts, ratios and timings are rendered with their labels, followed by the total time."""
    statistics = SampleStatistics(items = 2, ratio = 0.5, step_time = 0.25)

    assert statistics.report() == [
        'Items: 2',
        'Ratio: 0.5000',
        'Step time: 0.250000 s',
        'Total time: 0.250000 s'
    ]


def test_clear_resets_every_field():
    """Clearing forgets all measurements."""
    statistics = SampleStatistics(items = 2)
    statistics.clear()

    assert statistics.items is None
