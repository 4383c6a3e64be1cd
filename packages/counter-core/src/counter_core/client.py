import logging
import requests
from typing import Optional

from .errors import TransportError
from .states import Endpoint

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


def build_url(address: str, endpoint: Endpoint) -> str:
    """Combine a device address (host, optionally with port) with an endpoint path."""
    host = address.strip().rstrip("/")
    return f"http://{host}{endpoint.path}"


class CounterHttpClient:
    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def request(self, address: str, endpoint: Endpoint) -> requests.Response:
        """
        Send the request for an endpoint to the device at the given address.

        No body and no extra headers are sent. Any failure to get a 2xx
        response is raised as a TransportError.

        Returns:
            requests.Response: The successful response
        """
        url = build_url(address, endpoint)
        logger.debug(f"{endpoint.method} {url}")

        try:
            response = self.session.request(endpoint.method, url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"{endpoint.method} {url} failed: {e}")
            raise TransportError(str(e), url=url) from e

        if not 200 <= response.status_code < 300:
            message = f"{response.status_code} {response.reason}".strip()
            logger.error(f"{endpoint.method} {url} returned {message}")
            raise TransportError(message, url=url, status_code=response.status_code)

        logger.debug(f"{endpoint.method} {url} -> {response.status_code} {response.text[:80]!r}")
        return response

    def get(self, address: str, endpoint: Endpoint = Endpoint.COUNT) -> requests.Response:
        """Make a GET request to a read endpoint."""
        if endpoint.method != "GET":
            raise ValueError(f"{endpoint.name} is not a GET endpoint")
        return self.request(address, endpoint)

    def post(self, address: str, endpoint: Endpoint) -> requests.Response:
        """Make a POST request to a mutating endpoint."""
        if endpoint.method != "POST":
            raise ValueError(f"{endpoint.name} is not a POST endpoint")
        return self.request(address, endpoint)

    def get_text(self, address: str, endpoint: Endpoint = Endpoint.COUNT) -> str:
        """Make a GET request and return the response body as text."""
        return self.get(address, endpoint).text

    def post_text(self, address: str, endpoint: Endpoint) -> str:
        """Make a POST request and return the response body as text."""
        return self.post(address, endpoint).text

    def close(self) -> None:
        self.session.close()
