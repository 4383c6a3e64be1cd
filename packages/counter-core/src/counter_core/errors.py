from typing import Optional

__all__ = [
    "CounterError",
    "TransportError",
    "ProtocolError",
    "ConfirmationError",
    "OperationInProgressError",
]


class CounterError(Exception):
    """Base class for every failure talking to a counter device."""


class TransportError(CounterError):
    """The device could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ProtocolError(CounterError):
    """The device answered, but the payload is not what was expected."""


class ConfirmationError(CounterError):
    """
    A mutation was applied but the confirmation read failed.

    The counter on the device is ahead of the displayed value until the
    next successful refresh.
    """

    def __init__(self, message: str, cause: CounterError):
        super().__init__(message)
        self.cause = cause


class OperationInProgressError(CounterError):
    """Raised for an invocation rejected because another one is in flight."""
