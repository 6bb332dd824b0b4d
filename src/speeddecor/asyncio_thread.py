import asyncio
import logging
import threading

from concurrent.futures import Future
from typing import Optional


class EventLoopThread:
    """
    Runs an asyncio loop on a daemon thread so a synchronous caller
    (the CLI render loop) can submit transfer coroutines to it.
    """

    def __init__(self, join_timeout: float = 30.0):
        self.join_timeout = join_timeout
        self.loop = asyncio.new_event_loop()
        self.thread = threading.Thread(
            target=self._run_loop,
            name="speeddecor-loop",
            daemon=True
        )
        self.thread.start()

    def _run_loop(self):
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    async def _cancel_pending(self) -> int:
        tasks = [task for task in asyncio.all_tasks() if task is not asyncio.current_task()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        return len(tasks)

    def submit(self, coro) -> Future:
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def run(self, coro, timeout: Optional[float] = None):
        """
        Submit coro and block until its result, raising whatever it raised.
        """
        return self.submit(coro).result(timeout)

    def shutdown(self):
        """
        Cancel transfers still running on the loop, then stop and close it.
        Calling it again is a no-op.
        """
        if self.loop.is_closed():
            return
        cancelled = self.run(self._cancel_pending(), self.join_timeout)
        logging.debug(f"Stopping event loop thread, cancelled {cancelled} pending tasks")
        self.loop.call_soon_threadsafe(self.loop.stop)
        self.thread.join(self.join_timeout)
        if self.thread.is_alive():
            raise RuntimeError(f"Failed to join event loop thread after {self.join_timeout}s")
        self.loop.close()


__all__ = ["EventLoopThread"]
