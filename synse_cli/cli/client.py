"""
HTTP Client for Synse Server.

Provides the async HTTP client used by every command to talk to the active
host. All requests include an X-Frontend-ID: cli header.

Transport failures (refused connections, timeouts, undecodable bodies) are
raised as TransportError. Non-2xx responses are raised as RequestError
carrying the status code.

Routes (api_version defaults to 2.0):
    /synse/test                                          server status
    /synse/version                                       server version
    /synse/{api_version}/scan                            device inventory
    /synse/{api_version}/{resource}/{rack}/{board}/{device}           read
    /synse/{api_version}/{resource}/{rack}/{board}/{device}/{action}  action
"""

from typing import Any
from urllib.parse import quote

import httpx

from synse_cli.core.config import HostConfig
from synse_cli.core.config_schema import DEFAULT_TIMEOUT
from synse_cli.core.exceptions import RequestError, TransportError
from synse_cli.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

DEFAULT_API_VERSION = "2.0"


def build_base_url(address: str) -> str:
    """Turn a host address (host:port or full URL) into a base URL."""
    address = address.strip().rstrip("/")
    if address.startswith(("http://", "https://")):
        return address
    return f"http://{address}"


def _error_message(response: httpx.Response) -> str:
    """Build a readable message from a Synse Server error response."""
    message = f"Synse Server returned {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("description"):
        message = f"{message}: {body['description']}"
        if body.get("context"):
            message = f"{message} ({body['context']})"
    elif response.reason_phrase:
        message = f"{message}: {response.reason_phrase}"
    return message


class SynseClient:
    """
    HTTP client for Synse Server communication.

    Features:
    - Base URL from the active host address
    - X-Frontend-ID header for server-side log routing
    - Structured logging of requests/responses
    - httpx errors mapped onto the client error taxonomy

    Usage:
        async with SynseClient.from_host(config.active_host) as client:
            scan = await client.scan()
    """

    def __init__(
        self,
        address: str,
        timeout: float = DEFAULT_TIMEOUT,
        api_version: str = DEFAULT_API_VERSION,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            address: Host address, e.g. localhost:5000 or https://synse.example.com.
            timeout: Per-request timeout in seconds.
            api_version: Synse Server API version used for device routes.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = build_base_url(address)
        self.timeout = timeout
        self.api_version = api_version
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_host(cls, host: HostConfig, timeout: float = DEFAULT_TIMEOUT) -> "SynseClient":
        """Create a client for a configured host."""
        return cls(host.address, timeout=timeout)

    async def __aenter__(self) -> "SynseClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": "cli"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def versioned(self, *segments: str) -> str:
        """Build a versioned API path from URL-quoted segments."""
        quoted = "/".join(quote(segment, safe="") for segment in segments)
        return f"/synse/{self.api_version}/{quoted}"

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Make an HTTP request to the active host.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path (e.g., /synse/test)
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response, whatever its status code

        Raises:
            TransportError: On connection failure or timeout
        """
        client = await self._get_client()
        url = f"{self.base_url}{path}"

        log_with_source(logger, "cli", "debug", "API request", method=method, url=url)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            log_with_source(logger, "cli", "warning", "API request timed out", method=method, url=url)
            raise TransportError(f"Timed out after {self.timeout}s: {method} {url}", url=url) from e
        except httpx.HTTPError as e:
            log_with_source(
                logger, "cli", "warning", "API request failed",
                method=method, url=url, error=str(e),
            )
            raise TransportError(f"{method} {url}: {e}", url=url) from e

        log_with_source(
            logger, "cli", "debug", "API response",
            method=method, url=url, status_code=response.status_code,
        )
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """
        GET a path and check the status, leaving the body undecoded.

        Raises:
            TransportError: On connection failure or timeout
            RequestError: On a non-2xx status
        """
        response = await self.request("GET", path, **kwargs)
        if not response.is_success:
            raise RequestError(_error_message(response), status_code=response.status_code)
        return response

    @staticmethod
    def decode_json(response: httpx.Response) -> Any:
        """
        Decode a response body as JSON.

        Raises:
            TransportError: If the body is empty or not JSON
        """
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Response from {response.request.url} is not valid JSON",
                url=str(response.request.url),
            ) from e

    async def get_json(self, path: str, **kwargs: Any) -> Any:
        """
        GET a path and decode the JSON body.

        Raises:
            TransportError: On connection failure, timeout, or a non-JSON body
            RequestError: On a non-2xx status
        """
        return self.decode_json(await self.get(path, **kwargs))

    async def status(self) -> dict[str, Any]:
        """Get the server status from the unversioned test route."""
        return await self.get_json("/synse/test")

    async def version(self) -> dict[str, Any]:
        """Get the server and API version."""
        return await self.get_json("/synse/version")

    async def scan(self) -> dict[str, Any]:
        """Get the full device inventory."""
        return await self.get_json(self.versioned("scan"))

    async def read_device(self, resource: str, rack: str, board: str, device: str) -> dict[str, Any]:
        """Read the state of one device for a resource type (e.g. power)."""
        return await self.get_json(self.versioned(resource, rack, board, device))

    async def device_action(
        self,
        resource: str,
        rack: str,
        board: str,
        device: str,
        action: str,
    ) -> httpx.Response:
        """
        Perform a state-changing action on one device.

        The status is checked but the body is left undecoded: some actions
        answer 204 No Content. Use decode_json() for the reported state.
        """
        return await self.get(self.versioned(resource, rack, board, device, action))
