"""
Exponentially weighted moving averages used as speed estimators.

The decay factor is derived from the average age of the samples:
decay = 2 / (age + 1). A higher age gives a smoother, slower estimate.
"""
from typing import Optional, Protocol

AVG_METRIC_AGE = 30.0
DECAY = 2 / (AVG_METRIC_AGE + 1)
WARMUP_SAMPLES = 10


class MovingAverage(Protocol):
    def add(self, value: float) -> None: ...

    def value(self) -> float: ...

    def set(self, value: float) -> None: ...


class SimpleEWMA:
    """
    EWMA with a fixed age of 30 samples.
    The first non-zero sample seeds the average.
    """

    def __init__(self):
        self._value = 0.0

    def add(self, value: float) -> None:
        if self._value == 0:
            self._value = value
        else:
            self._value = (value * DECAY) + (self._value * (1 - DECAY))

    def value(self) -> float:
        return self._value

    def set(self, value: float) -> None:
        self._value = value


class VariableEWMA:
    """
    EWMA with a custom age.

    The first WARMUP_SAMPLES samples are averaged to seed the value,
    value() returns 0.0 until the warm-up is over.
    """

    def __init__(self, age: float):
        if age < 0:
            raise ValueError("age must be non-negative")
        self._decay = 2 / (age + 1)
        self._value = 0.0
        self._count = 0

    def add(self, value: float) -> None:
        if self._count < WARMUP_SAMPLES:
            self._count += 1
            self._value += value
        elif self._count == WARMUP_SAMPLES:
            self._count += 1
            self._value = self._value / WARMUP_SAMPLES
            self._value = (value * self._decay) + (self._value * (1 - self._decay))
        else:
            self._value = (value * self._decay) + (self._value * (1 - self._decay))

    def value(self) -> float:
        if self._count <= WARMUP_SAMPLES:
            return 0.0
        return self._value

    def set(self, value: float) -> None:
        self._value = value
        if self._count <= WARMUP_SAMPLES:
            self._count = WARMUP_SAMPLES + 1


def new_moving_average(age: Optional[float] = None) -> MovingAverage:
    """
    SimpleEWMA for the default age of 30, VariableEWMA(age) otherwise.

    An age of 0 also gives SimpleEWMA: its VariableEWMA decay of 2 would
    overshoot every sample instead of smoothing.
    """
    if age is None or age == 0 or age == AVG_METRIC_AGE:
        return SimpleEWMA()
    return VariableEWMA(age)


__all__ = ["MovingAverage", "SimpleEWMA", "VariableEWMA", "new_moving_average"]
