"""Counter Remote Core - HTTP transport and shared utilities."""

from .client import CounterHttpClient, DEFAULT_TIMEOUT, build_url
from .errors import *
from .states import *

__version__ = "0.1.0"
__all__ = ["CounterHttpClient", "DEFAULT_TIMEOUT", "build_url"]
