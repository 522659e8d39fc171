import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from keydelivery.exceptions import ConfigurationError, NetworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPResponse:
    status: int
    body: Any  # decoded JSON, or the raw text when the body is not JSON


class AdminHTTPClient:
    """
    Single request/response client for the admin API.

    Certificate verification is disabled on purpose: admin deployments are
    commonly served with self-signed certificates.
    """

    def __init__(self, timeout: float = 30.0, transport: httpx.BaseTransport | None = None):
        self.timeout = timeout
        self.transport = transport

    def request(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: Any = None
    ) -> HTTPResponse:
        """
        Sends one request and buffers the whole response.

        Args:
            url: Absolute URL; the scheme selects plain or TLS transport
            method: HTTP method
            headers: Extra request headers
            body: JSON-serializable payload, sent as application/json when given

        Returns:
            HTTPResponse with the status code and decoded body

        Raises:
            NetworkError: On connection, DNS, reset or timeout failures
            ConfigurationError: If the URL is malformed
        """
        request_headers = dict(headers or {})
        content = None
        if body is not None:
            request_headers.setdefault("Content-Type", "application/json")
            content = json.dumps(body, ensure_ascii=False, allow_nan=False).encode("utf-8")

        with httpx.Client(verify=False, timeout=self.timeout, transport=self.transport) as client:  # nosec B501
            try:
                response = client.request(method, url, headers=request_headers, content=content)
            except httpx.InvalidURL as e:
                raise ConfigurationError(f"Invalid admin API URL {url}: {e}") from e
            except httpx.TimeoutException as e:
                logger.error(f"{method} {url} timed out after {self.timeout}s")
                raise NetworkError(f"Request to {url} timed out after {self.timeout}s") from e
            except httpx.RequestError as e:
                logger.error(f"{method} {url} failed: {e}")
                raise NetworkError(f"Failed to connect to {url}: {str(e)}") from e

        try:
            parsed: Any = response.json()
        except ValueError:
            parsed = response.text

        return HTTPResponse(status=response.status_code, body=parsed)
