

class TransferError(Exception):
    """
    Base error of a monitored transfer.

    Attributes:
        url (str | None): Request URL.
        message (str): Human-readable error message.
    """

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        self.message = f"{message}, url={url}" if url else message
        super().__init__(self.message)


class UnexpectedStatusException(TransferError):
    """
    Raised when the server answers with a status outside expected.
    """

    def __init__(
        self,
        status: int,
        expected: tuple[int, ...] | None = None,
        url: str | None = None,
        message: str | None = None,
    ):
        self.status = status
        self.expected = expected

        text = f"Unexpected HTTP status: {status}"
        if expected:
            text += f", expected={expected}"
        if message:
            text += f", {message=}"
        super().__init__(text, url)


class IncompleteTransferError(TransferError):
    """
    Raised when the stream ends before Content-Length bytes arrived.
    """

    def __init__(self, received: int, expected: int, url: str | None = None):
        self.received = received
        self.expected = expected
        super().__init__(f"Transfer ended after {received} of {expected} bytes", url)


__all__ = ["TransferError", "UnexpectedStatusException", "IncompleteTransferError"]
