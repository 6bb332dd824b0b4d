from dataclasses import dataclass
from typing import Optional

# WC.conf flags
DIDENT_RIGHT = 1 << 0
DEXTRA_SPACE = 1 << 1


@dataclass
class Statistics:
    """
    Snapshot of a bar handed to every decorator on each render.
    """
    total: int = 0
    current: int = 0
    completed: bool = False


@dataclass
class WC:
    """
    Width config for a decorator's rendered text.

    Attributes:
        width (int): Minimum width, 0 disables padding.
        conf (int): Bit set of DIDENT_RIGHT and DEXTRA_SPACE.
    """
    width: int = 0
    conf: int = 0

    def format_msg(self, msg: str) -> str:
        if self.conf & DEXTRA_SPACE:
            msg = " " + msg
        if self.conf & DIDENT_RIGHT:
            return msg.ljust(self.width)
        return msg.rjust(self.width)


class Decorator:
    def __init__(self, wc: Optional[WC] = None):
        self.wc = wc if wc is not None else WC()

    def decor(self, stats: Statistics) -> str:
        raise NotImplementedError


__all__ = ["Statistics", "WC", "Decorator", "DIDENT_RIGHT", "DEXTRA_SPACE"]
