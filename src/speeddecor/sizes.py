from decimal import Decimal
from typing import List, Tuple

from .constants import (
    PER_SECOND,
    ONE_KIBIBYTE, ONE_MEBIBYTE, ONE_GIBIBYTE, ONE_TEBIBYTE,
    ONE_KILOBYTE, ONE_MEGABYTE, ONE_GIGABYTE, ONE_TERABYTE,
)
from .formatting import FormatSpec


def _format_float(value: float, verb: str, precision) -> str:
    if verb == "d":
        return f"{value:.0f}"
    if verb == "s":
        # shortest repr that round-trips, without exponent
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    if precision is None:
        precision = 6
    return f"{value:.{precision}f}"


class _Size(int):
    # (size of unit, unit name), largest last
    units: List[Tuple[int, str]] = []

    def _unit(self) -> Tuple[int, str]:
        chosen = self.units[0]
        for unit in self.units:
            if abs(self) >= unit[0]:
                chosen = unit
        return chosen

    def format_printf(self, spec: FormatSpec) -> str:
        unit_size, unit_name = self._unit()
        res = _format_float(int(self) / unit_size, spec.verb, spec.precision)
        if spec.has_flag(" "):
            res += " "
        res += unit_name
        return spec.pad(res)

    def __str__(self) -> str:
        return self.format_printf(FormatSpec(verb="s"))


class SizeB1024(_Size):
    """Byte count rendered with binary units (KiB, MiB, ...)."""
    units = [
        (1, "b"),
        (ONE_KIBIBYTE, "KiB"),
        (ONE_MEBIBYTE, "MiB"),
        (ONE_GIBIBYTE, "GiB"),
        (ONE_TEBIBYTE, "TiB"),
    ]


class SizeB1000(_Size):
    """Byte count rendered with decimal units (KB, MB, ...)."""
    units = [
        (1, "b"),
        (ONE_KILOBYTE, "KB"),
        (ONE_MEGABYTE, "MB"),
        (ONE_GIGABYTE, "GB"),
        (ONE_TERABYTE, "TB"),
    ]


class SizePerSecond:
    """
    Wraps a size so the outer format directive applies to the size and a
    per second suffix follows it, e.g. "% .1f" -> "1.0 MiB/s".
    """

    def __init__(self, size: _Size, per_second: str = PER_SECOND):
        self.size = size
        self.per_second = per_second

    def format_printf(self, spec: FormatSpec) -> str:
        return self.size.format_printf(spec) + self.per_second

    def __str__(self) -> str:
        return str(self.size) + self.per_second


def size_per_second(size: _Size) -> SizePerSecond:
    return SizePerSecond(size, PER_SECOND)


__all__ = ["SizeB1024", "SizeB1000", "SizePerSecond", "size_per_second"]
