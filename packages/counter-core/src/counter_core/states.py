import re
from enum import Enum
from typing import Optional

from .errors import ProtocolError

__all__ = ["Endpoint", "OperationPhase", "parse_count"]

_DECIMAL = re.compile(r"-?[0-9]+")


class Endpoint(Enum):
    """Enumeration of the HTTP endpoints exposed by a counter device."""
    COUNT = ("GET", "/count")
    ADD = ("POST", "/add")
    SUB = ("POST", "/sub")

    @property
    def method(self) -> str:
        return self.value[0]

    @property
    def path(self) -> str:
        return self.value[1]


class OperationPhase(Enum):
    """Enumeration of the phases a single operation goes through."""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def parse_count(text: Optional[str]) -> int:
    """Parse the body of a /count response into an integer."""
    if text is None:
        raise ProtocolError("No counter value has been read yet")
    stripped = text.strip()
    if not stripped:
        raise ProtocolError("Empty counter value")
    if not _DECIMAL.fullmatch(stripped):
        raise ProtocolError(f"Counter value is not a decimal integer: {stripped[:40]!r}")
    return int(stripped)
