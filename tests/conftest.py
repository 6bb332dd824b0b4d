import pytest
import logging

from speeddecor.asyncio_thread import EventLoopThread


class MockResponse:
    def __init__(self, status, headers=None, chunks=None):
        self.status = status
        self.headers = headers
        self.content = self
        self.chunks = list(chunks or [])
        self.exception = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def iter_chunked(self, chunk_size_limit):
        for chunk in self.chunks:
            if self.exception is not None:
                raise self.exception
            yield chunk

    def set_exception(self, exception: Exception):
        self.exception = exception


class MockSession:
    def __init__(self, responses):
        self._responses = responses
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        return self._responses[url]

    async def close(self):
        self.closed = True


class FakeTime:
    """Stands in for the time module, every monotonic() call advances by step."""

    def __init__(self, start=0.0, step=1.0):
        self.now = start
        self.step = step

    def monotonic(self):
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def fake_monotonic(monkeypatch):
    fake_time = [1000.0]

    def fake():
        return fake_time[0]

    monkeypatch.setattr("time.monotonic", fake)
    return fake_time


@pytest.fixture
def event_loop_thread(request):
    runner = EventLoopThread()

    def cleanup():
        logging.debug("Event loop thread fixture shutting down.")
        runner.shutdown()

    request.addfinalizer(cleanup)
    return runner


@pytest.fixture
def create_mock_response_and_set_mock_session(monkeypatch):

    def factory(return_status, headers, mock_url, chunks):
        mock_res = MockResponse(return_status, headers, chunks)
        monkeypatch.setattr("aiohttp.ClientSession", lambda: MockSession({mock_url: mock_res}))
        return mock_res

    return factory


@pytest.fixture
def fake_monitor_clock(monkeypatch):

    def factory(start=0.0, step=1.0):
        clock = FakeTime(start, step)
        monkeypatch.setattr("speeddecor.monitor.time", clock)
        return clock

    return factory
