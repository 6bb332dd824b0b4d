import math
import pytest

from datetime import timedelta

from speeddecor.constants import Unit, ONE_MEBIBYTE, ONE_MEGABYTE
from speeddecor.decorator import Statistics, WC, DIDENT_RIGHT
from speeddecor.speed import moving_average_speed, ewma_speed, MovingAverageSpeed
from tests.helpers import RecordingAverage


def test_next_amount_feeds_scaled_speed():
    average = RecordingAverage()
    d = moving_average_speed(Unit.NONE, "%.1f", average)

    d.next_amount(2_000_000, 1.0)
    d.next_amount(1000, timedelta(seconds=2))

    assert average.added == [pytest.approx(2000.0), pytest.approx(0.5)]

def test_decor_reflects_estimator_value():
    average = RecordingAverage()
    d = moving_average_speed(Unit.NONE, "%.1f", average)
    d.next_amount(3_000_000, 2.0)

    assert d.decor(Statistics()) == "1500.0"

def test_empty_format_defaults_to_no_decimals():
    d = moving_average_speed(Unit.NONE, "", RecordingAverage(12.6))
    assert d.fmt == "%.0f"
    assert d.decor(Statistics()) == "13"

@pytest.mark.parametrize("duration", [None, 0, 0.0, timedelta(0)])
def test_missing_or_zero_duration_is_dropped(duration):
    average = RecordingAverage(42.0)
    d = moving_average_speed(Unit.NONE, "%.1f", average)

    d.next_amount(1000, duration)

    assert average.added == []
    assert average.value() == 42.0

def test_next_amount_without_duration_argument_is_dropped():
    average = RecordingAverage(7.0)
    d = moving_average_speed(Unit.NONE, "%.1f", average)
    d.next_amount(1000)
    assert average.added == []
    assert average.value() == 7.0

def test_non_finite_speed_is_dropped():
    average = RecordingAverage(1.0)
    d = moving_average_speed(Unit.NONE, "%.1f", average)

    d.next_amount(math.inf, 1.0)
    d.next_amount(1000, math.nan)

    assert average.added == []

def test_zero_amount_is_a_valid_observation():
    average = RecordingAverage(5.0)
    d = moving_average_speed(Unit.NONE, "%.1f", average)
    d.next_amount(0, 1.0)
    assert average.added == [0.0]

@pytest.mark.parametrize("unit, fmt, value, expected", [
    (Unit.KIB, "%.1f", ONE_MEBIBYTE, "1.0MiB/s"),
    (Unit.KIB, "% .1f", ONE_MEBIBYTE, "1.0 MiB/s"),
    (Unit.KB, "%.1f", ONE_MEGABYTE, "1.0MB/s"),
    (Unit.KB, "% .1f", ONE_MEGABYTE, "1.0 MB/s"),
    (Unit.KIB, "%.1f", 1024, "1.0KiB/s"),
    (Unit.KIB, "%.1f", 2000, "2.0KiB/s"),
    (Unit.KIB, "%.0f", 0.5, "1b/s"),
    (Unit.KIB, "%.1f", 1023.4, "1023.0b/s"),
    (Unit.KIB, "%.1f", 1023.5, "1.0KiB/s"),
    (Unit.NONE, "%.2f", 1023.5, "1023.50"),
])
def test_unit_rendering(unit, fmt, value, expected):
    d = moving_average_speed(unit, fmt, RecordingAverage(value))
    assert d.decor(Statistics()) == expected

def test_completed_returns_last_message():
    average = RecordingAverage()
    d = moving_average_speed(Unit.KIB, "% .1f", average)
    d.next_amount(2 * ONE_MEBIBYTE * 1000, 2.0)

    running = d.decor(Statistics(current=10))
    assert running == "1.0 MiB/s"

    d.next_amount(10 * ONE_MEBIBYTE * 1000, 1.0)
    assert d.decor(Statistics(current=20, completed=True)) == running

def test_complete_message_overrides_and_persists():
    d = moving_average_speed(Unit.NONE, "%.0f", RecordingAverage(), WC(width=6))
    d.next_amount(5000, 1.0)
    assert d.decor(Statistics()) == "     5"

    d.on_complete_message("done")
    d.next_amount(9000, 1.0)

    assert d.decor(Statistics(completed=True)) == "  done"
    assert d.decor(Statistics(completed=True)) == "  done"

def test_empty_complete_message_is_distinct_from_unset():
    d = moving_average_speed(Unit.NONE, "%.0f", RecordingAverage(3.0))
    d.decor(Statistics())
    assert d.complete_msg is None
    assert d.decor(Statistics(completed=True)) == "3"

    d.on_complete_message("")
    assert d.decor(Statistics(completed=True)) == ""

def test_completed_before_any_render_is_empty():
    d = moving_average_speed(Unit.NONE, "%.0f", RecordingAverage(3.0), WC(width=4, conf=DIDENT_RIGHT))
    assert d.decor(Statistics(completed=True)) == "    "

def test_ewma_speed_smooths_observations():
    d = ewma_speed(Unit.NONE, "%.1f", None)
    assert isinstance(d, MovingAverageSpeed)

    d.next_amount(5000, 1.0)
    assert d.decor(Statistics()) == "5.0"

    # 36 * 2/31 + 5 * 29/31 == 7
    d.next_amount(36000, 1.0)
    assert d.decor(Statistics()) == "7.0"

def test_ewma_speed_estimators_are_not_shared():
    first = ewma_speed(Unit.NONE, "%.1f", 30)
    second = ewma_speed(Unit.NONE, "%.1f", 30)

    first.next_amount(5000, 1.0)

    assert first.average is not second.average
    assert second.decor(Statistics()) == "0.0"

@pytest.mark.parametrize("unit, expected", [
    (Unit.KIB, "0.0b/s"),
    (Unit.KB, "0.0b/s"),
])
@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_estimator_value_renders_zero_in_unit_modes(unit, expected, value):
    d = moving_average_speed(unit, "%.1f", RecordingAverage(value))
    assert d.decor(Statistics()) == expected

@pytest.mark.parametrize("value, expected", [
    (math.nan, "nan"),
    (math.inf, "inf"),
])
def test_non_finite_estimator_value_in_raw_mode(value, expected):
    d = moving_average_speed(Unit.NONE, "%.1f", RecordingAverage(value))
    assert d.decor(Statistics()) == expected
