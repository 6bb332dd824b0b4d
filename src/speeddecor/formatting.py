import re

from dataclasses import dataclass
from typing import Any, Optional

_DIRECTIVE = re.compile(r"%(?P<flags>[-+ #0]*)(?P<width>\d+)?(?:\.(?P<precision>\d*))?(?P<verb>[a-zA-Z%])")


@dataclass
class FormatSpec:
    flags: str = ""
    width: Optional[int] = None
    precision: Optional[int] = None
    verb: str = "v"

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    def pad(self, text: str) -> str:
        if self.width is None or len(text) >= self.width:
            return text
        if self.has_flag("-"):
            return text.ljust(self.width)
        return text.rjust(self.width)


def sprintf(fmt: str, value: Any) -> str:
    """
    Format a single value with a printf style format string.

    Values exposing format_printf(spec) render themselves from the parsed
    directive, everything else goes through the % operator.
    """
    if not hasattr(value, "format_printf"):
        return fmt % value

    out = []
    pos = 0
    used = False
    for match in _DIRECTIVE.finditer(fmt):
        out.append(fmt[pos:match.start()])
        pos = match.end()
        if match.group("verb") == "%":
            out.append("%")
            continue
        if used:
            raise TypeError("not enough arguments for format string")
        precision = match.group("precision")
        spec = FormatSpec(
            flags=match.group("flags"),
            width=int(match.group("width")) if match.group("width") else None,
            precision=int(precision or 0) if precision is not None else None,
            verb=match.group("verb"),
        )
        out.append(value.format_printf(spec))
        used = True
    out.append(fmt[pos:])

    if not used:
        raise TypeError("not all arguments converted during string formatting")
    return "".join(out)


__all__ = ["FormatSpec", "sprintf"]
