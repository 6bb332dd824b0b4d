from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

import queue
import logging
import asyncio
import aiohttp
import aiofiles
import traceback
import time

from .constants import CHUNK_SIZE
from .decorator import Decorator, Statistics
from .exceptions import UnexpectedStatusException, IncompleteTransferError

EVENTS_QUEUE_SIZE = 1000
EVENTS_QUEUE_DROP = 250


class TransferState(Enum):
    RUNNING = 1
    COMPLETED = 2
    ERROR = 3


@dataclass
class SpeedEvent:
    url: str
    output_file: str
    state: TransferState
    columns: Dict[str, str] = field(default_factory=dict)
    downloaded_bytes: int = 0
    size_bytes: Optional[int] = None
    error_string: Optional[str] = ""
    time: Optional[datetime] = None

    def __post_init__(self):
        self.time = datetime.now()


class SpeedMonitor:
    """
    Streams an HTTP resource to disk and renders speed decorators for it.

    Every chunk is reported to the decorators that accept next_amount()
    together with the time it took to arrive; rendered columns are published
    as SpeedEvents on events_queue.
    """

    def __init__(
            self,
            decorators: Dict[str, Decorator],
            update_rate_seconds: float = 1,
            request_timeout: int = 300,
            complete_message: Optional[str] = None
        ) -> None:
        self.decorators = decorators
        self.events_queue: queue.Queue[SpeedEvent] = queue.Queue(maxsize=EVENTS_QUEUE_SIZE)
        self._session: Optional[aiohttp.ClientSession] = None

        self._update_rate_seconds = update_rate_seconds
        self._request_timeout = request_timeout
        self._complete_message = complete_message

    def _add_event_to_queue(self, event: SpeedEvent):
        if self.events_queue.full():
            logging.error(f"Events queue is FULL! Make sure events are consumed or reduce the update rate!\nRemoving the first {EVENTS_QUEUE_DROP} items.")
            for _ in range(EVENTS_QUEUE_DROP):
                self.events_queue.get_nowait()
        self.events_queue.put_nowait(event)

    def _render(self, stats: Statistics) -> Dict[str, str]:
        return {name: decorator.decor(stats) for name, decorator in self.decorators.items()}

    def _next_amount(self, n: int, duration: float):
        for decorator in self.decorators.values():
            if hasattr(decorator, "next_amount"):
                decorator.next_amount(n, duration)

    async def get_oldest_event(self) -> Optional[SpeedEvent]:
        """
        Retrieve and remove the oldest event from the event queue.
        If the queue is empty, this method returns None.
        """
        if self.events_queue.empty():
            return None
        return self.events_queue.get_nowait()

    async def shutdown(self):
        if self._session is not None:
            try:
                await self._session.close()
            except asyncio.CancelledError:
                pass
            self._session = None

    async def download(self, url: str, output_file: str) -> int:
        """
        Download url into output_file while feeding the decorators.

        Returns:
            int: number of bytes written.
        """
        stats = Statistics()
        try:
            if self._session is None:
                self._session = aiohttp.ClientSession()

            last_update = time.monotonic() - self._update_rate_seconds

            async with aiofiles.open(output_file, "wb") as f:
                async with self._session.get(url, timeout=aiohttp.ClientTimeout(total=self._request_timeout)) as resp:
                    if resp.status not in (200, 206):
                        raise UnexpectedStatusException(resp.status, expected=(200, 206), url=url)

                    content_length = resp.headers.get("Content-Length") if resp.headers else None
                    if content_length is not None:
                        stats.total = int(content_length)

                    last_chunk = time.monotonic()
                    async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                        now = time.monotonic()
                        await f.write(chunk)
                        stats.current += len(chunk)
                        self._next_amount(len(chunk), now - last_chunk)
                        last_chunk = now

                        if (now - last_update) >= self._update_rate_seconds:
                            last_update = now
                            self._add_event_to_queue(SpeedEvent(
                                url=url,
                                output_file=output_file,
                                state=TransferState.RUNNING,
                                columns=self._render(stats),
                                downloaded_bytes=stats.current,
                                size_bytes=stats.total or None
                            ))

                    if stats.total and stats.current < stats.total:
                        raise IncompleteTransferError(stats.current, stats.total, url=url)

            # Last running render before completion freezes the messages.
            self._render(stats)
            if self._complete_message is not None:
                for decorator in self.decorators.values():
                    if hasattr(decorator, "on_complete_message"):
                        decorator.on_complete_message(self._complete_message)

            stats.completed = True
            self._add_event_to_queue(SpeedEvent(
                url=url,
                output_file=output_file,
                state=TransferState.COMPLETED,
                columns=self._render(stats),
                downloaded_bytes=stats.current,
                size_bytes=stats.total or None
            ))
            logging.debug(f"Download complete: {url=}, {output_file=}, {stats.current} bytes")
        except asyncio.CancelledError:
            logging.debug(f"Download cancelled: {url=}")
            raise
        except Exception as err:
            tb = traceback.format_exc()
            logging.error(f"Traceback: {tb}")
            logging.error(f"{repr(err)}, {err}")
            self._add_event_to_queue(SpeedEvent(
                url=url,
                output_file=output_file,
                state=TransferState.ERROR,
                downloaded_bytes=stats.current,
                error_string=f"{repr(err)}, {err}"
            ))
        return stats.current


__all__ = ["SpeedMonitor", "SpeedEvent", "TransferState"]
