import logging

from typing import List

from speeddecor.monitor import SpeedMonitor, SpeedEvent


class RecordingAverage:
    """MovingAverage stub: value() returns whatever was set or last added."""

    def __init__(self, value=0.0):
        self.added: List[float] = []
        self._value = value

    def add(self, value: float) -> None:
        self.added.append(value)
        self._value = value

    def value(self) -> float:
        return self._value

    def set(self, value: float) -> None:
        self._value = value


async def drain_events(monitor: SpeedMonitor) -> List[SpeedEvent]:
    events = []
    while True:
        event = await monitor.get_oldest_event()
        if event is None:
            return events
        logging.debug(f"Event received: {event}")
        events.append(event)


def verify_file(file_name, expected_bytes):
    with open(file_name, "rb") as f:
        file_bytes = f.read()
    assert file_bytes == expected_bytes, f"Downloaded file did not match expected.\n{len(file_bytes)=}\n{len(expected_bytes)=}"
