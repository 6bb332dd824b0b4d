import logging
import math
import time

from datetime import timedelta
from typing import Optional, Union

from .constants import Unit, DEFAULT_FORMAT
from .decorator import Decorator, Statistics, WC
from .ewma import MovingAverage, new_moving_average
from .formatting import sprintf
from .sizes import SizeB1024, SizeB1000, size_per_second

Duration = Union[float, timedelta]


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class _SpeedDecorator(Decorator):
    """
    Shared render cache of the speed decorators.

    msg holds the last rendered speed; complete_msg is None until
    on_complete_message() is called, an empty string is a valid override.
    """

    def __init__(self, unit: Unit, fmt: str, wc: Optional[WC] = None):
        super().__init__(wc)
        self.unit = unit
        self.fmt = fmt or DEFAULT_FORMAT
        self.msg = ""
        self.complete_msg: Optional[str] = None

    def _format_speed(self, speed: float) -> str:
        if self.unit != Unit.NONE and not math.isfinite(speed):
            logging.debug(f"Rendering non finite speed as zero, {speed=}")
            speed = 0.0
        if self.unit == Unit.KIB:
            return sprintf(self.fmt, size_per_second(SizeB1024(_round_half_away(speed))))
        if self.unit == Unit.KB:
            return sprintf(self.fmt, size_per_second(SizeB1000(_round_half_away(speed))))
        return sprintf(self.fmt, speed)

    def _current_speed(self, stats: Statistics) -> float:
        raise NotImplementedError

    def decor(self, stats: Statistics) -> str:
        if stats.completed:
            if self.complete_msg is not None:
                return self.wc.format_msg(self.complete_msg)
            return self.wc.format_msg(self.msg)

        self.msg = self._format_speed(self._current_speed(stats))
        return self.wc.format_msg(self.msg)

    def on_complete_message(self, msg: str) -> None:
        self.complete_msg = msg


class MovingAverageSpeed(_SpeedDecorator):
    """
    Speed decorator backed by a MovingAverage estimator.

    The estimator is fed through next_amount() with the duration each
    increment of work took, and is owned by this decorator.
    """

    def __init__(self, unit: Unit, fmt: str, average: MovingAverage, wc: Optional[WC] = None):
        super().__init__(unit, fmt, wc)
        self.average = average

    def _current_speed(self, stats: Statistics) -> float:
        return self.average.value()

    def next_amount(self, n: int, duration: Optional[Duration] = None) -> None:
        """
        Feed n units of work completed in duration (seconds or timedelta).
        Observations without a usable duration or with a non finite speed are dropped.
        """
        if isinstance(duration, timedelta):
            duration = duration.total_seconds()
        if not duration:
            logging.debug(f"Dropping speed observation without duration, {n=}")
            return

        # Scaled down by 1000 before it reaches the estimator, AverageSpeed is not.
        speed = n / duration / 1000
        if math.isinf(speed) or math.isnan(speed):
            logging.debug(f"Dropping non finite speed observation, {n=}, {duration=}")
            return
        self.average.add(speed)


class AverageSpeed(_SpeedDecorator):
    """
    Speed decorator computing current / elapsed seconds since start_time.

    start_time is a time.monotonic() reading and can be moved with
    average_adjust(), e.g. after a pause.
    """

    def __init__(self, unit: Unit, fmt: str, start_time: float, wc: Optional[WC] = None):
        super().__init__(unit, fmt, wc)
        self.start_time = start_time

    def _current_speed(self, stats: Statistics) -> float:
        elapsed = time.monotonic() - self.start_time
        if elapsed <= 0:
            return 0.0
        return stats.current / elapsed

    def average_adjust(self, start_time: float) -> None:
        self.start_time = start_time


def moving_average_speed(unit: Unit, fmt: str, average: MovingAverage, wc: Optional[WC] = None) -> MovingAverageSpeed:
    """
    Args:
        unit (Unit): NONE, KIB or KB.
        fmt (str): printf verb for the value, like "%.1f" or "% .1f". Empty means "%.0f".
        average (MovingAverage): Estimator, not shared with other decorators.
        wc (WC | None): Width config.

    Examples:
        unit=Unit.KIB, fmt="%.1f"  -> "1.0MiB/s"
        unit=Unit.KIB, fmt="% .1f" -> "1.0 MiB/s"
        unit=Unit.KB,  fmt="%.1f"  -> "1.0MB/s"
        unit=Unit.KB,  fmt="% .1f" -> "1.0 MB/s"
    """
    return MovingAverageSpeed(unit, fmt, average, wc)


def ewma_speed(unit: Unit, fmt: str, age: Optional[float], wc: Optional[WC] = None) -> MovingAverageSpeed:
    """
    Exponentially weighted moving average speed decorator.
    Progress updates must supply the work duration for it to move.
    """
    return moving_average_speed(unit, fmt, new_moving_average(age), wc)


def new_average_speed(unit: Unit, fmt: str, start_time: float, wc: Optional[WC] = None) -> AverageSpeed:
    return AverageSpeed(unit, fmt, start_time, wc)


def average_speed(unit: Unit, fmt: str, wc: Optional[WC] = None) -> AverageSpeed:
    return new_average_speed(unit, fmt, time.monotonic(), wc)


__all__ = [
    "MovingAverageSpeed",
    "AverageSpeed",
    "moving_average_speed",
    "ewma_speed",
    "new_average_speed",
    "average_speed",
]
