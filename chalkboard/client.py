"""
Client for the remote generation service.

The two streaming stages (layout and chalk) run over WebSocket
connections, one per request, and yield operation events as they arrive.
Request/response calls such as batch chalking use an aiohttp session.
"""

import asyncio
import json
import logging
import ssl
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple
from urllib.parse import urljoin

import aiohttp
from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, InvalidStatus, WebSocketException

from chalkboard.board.config import ChalkResult, GenerationTransport, StreamEvent, TransportError
from chalkboard.config import ChalkSettings


logger = logging.getLogger(__name__)

LAYOUT_ENDPOINT = "/ws/chat/layout"
CHALK_ENDPOINT = "/ws/chat/chalk"
BATCH_CHALK_ENDPOINT = "/api/chat/chalk"


class ChalkError(TransportError):
    """Base exception for generation service client errors."""

    pass


class ChalkConnectionError(ChalkError):
    """Raised when connection to the generation service fails."""

    pass


class ChalkAuthenticationError(ChalkError):
    """Raised when the service rejects the credentials."""

    pass


class ChalkStreamError(ChalkError):
    """Raised when a stage reports an error or its stream is malformed."""

    pass


class ChalkTimeoutError(ChalkError):
    """Raised when a request or a stream message times out."""

    pass


def parse_stream_message(message: Any) -> Tuple[Optional[StreamEvent], bool]:
    """Decode one stream message.

    Returns:
        The event to deliver (or None) and whether the stream is finished.

    Raises:
        ChalkStreamError: If the message is not JSON or reports an error.
    """
    try:
        data = json.loads(message)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ChalkStreamError(f"Invalid JSON in stream message: {exc}") from exc

    if not isinstance(data, dict):
        raise ChalkStreamError(f"Unexpected stream message: {data!r}")

    kind = data.get("type")
    if kind == "error" or "error" in data:
        raise ChalkStreamError(f"Generation error: {data.get('error')}")
    if kind == "done":
        content = data.get("content")
        return (StreamEvent(content=content) if content is not None else None), True
    if kind == "operate":
        operation = data.get("operation")
        if not isinstance(operation, dict):
            raise ChalkStreamError(f"Operate message without operation: {data!r}")
        return StreamEvent(operation=operation), False

    logger.debug(f"Skipping stream message of type {kind!r}")
    return None, False


class ChalkClient(GenerationTransport):
    """Client for the generation service over WebSocket and HTTP.

    Attributes:
        settings: Connection details for the service.
        session: Lazily created aiohttp session for HTTP requests.

    Example:
        >>> async with ChalkClient(ChalkSettings.from_env()) as client:
        ...     async for event in client.layout(request, token):
        ...         print(event)
    """

    def __init__(self, settings: Optional[ChalkSettings] = None) -> None:
        self.settings: ChalkSettings = settings or ChalkSettings.from_env()
        self.session: Optional[aiohttp.ClientSession] = None
        self._lock: asyncio.Lock = asyncio.Lock()

    def _get_headers(self, token: Optional[str] = None) -> Dict[str, str]:
        """HTTP headers including authentication if available."""
        headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        bearer = token or self.settings.api_key
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    def _get_ws_url(self, endpoint: str) -> str:
        return urljoin(self.settings.ws_url + "/", endpoint.lstrip("/"))

    def _get_http_url(self, endpoint: str) -> str:
        return urljoin(self.settings.base_url + "/", endpoint.lstrip("/"))

    def _ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self.settings.verify_ssl:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session exists, creating if necessary."""
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.settings.timeout)
            connector = aiohttp.TCPConnector(
                ssl=self.settings.verify_ssl,
                limit_per_host=10,
            )
            self.session = aiohttp.ClientSession(timeout=timeout, connector=connector)
        return self.session

    def layout(self, request: Dict[str, Any], token: Optional[str] = None) -> AsyncIterator[StreamEvent]:
        """Stream the layout stage: page events, then the layout artifact."""
        return self._stream(LAYOUT_ENDPOINT, request, token)

    def chalk(self, request: Dict[str, Any], token: Optional[str] = None) -> AsyncIterator[StreamEvent]:
        """Stream the chalk stage: document operations for the authoring page."""
        return self._stream(CHALK_ENDPOINT, request, token)

    async def _stream(
        self,
        endpoint: str,
        request: Dict[str, Any],
        token: Optional[str],
    ) -> AsyncIterator[StreamEvent]:
        url = self._get_ws_url(endpoint)
        options: Dict[str, Any] = {
            "additional_headers": self._get_headers(token),
            "open_timeout": self.settings.timeout,
            "ping_interval": 20,
            "ping_timeout": 10,
        }
        if url.startswith("wss://"):
            options["ssl"] = self._ssl_context()

        try:
            async with connect(url, **options) as ws:
                await ws.send(json.dumps(request))
                while True:
                    message = await asyncio.wait_for(ws.recv(), timeout=self.settings.timeout)
                    event, done = parse_stream_message(message)
                    if event is not None:
                        yield event
                    if done:
                        break
        except InvalidStatus as exc:
            status = exc.response.status_code
            if status in (401, 403):
                raise ChalkAuthenticationError(f"Authentication failed for {url}") from exc
            raise ChalkConnectionError(
                f"WebSocket connection failed with status {status}: {url}"
            ) from exc
        except ConnectionClosed as exc:
            raise ChalkConnectionError(f"Stream closed before completion: {exc}") from exc
        except WebSocketException as exc:
            raise ChalkConnectionError(f"WebSocket error during streaming: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise ChalkTimeoutError(
                f"No message from {url} within {self.settings.timeout}s"
            ) from exc
        except OSError as exc:
            raise ChalkConnectionError(f"Network error connecting to {url}: {exc}") from exc

    async def chalk_batch(
        self,
        request: Dict[str, Any],
        token: Optional[str] = None,
    ) -> List[ChalkResult]:
        """Run a non-streaming chalk call returning per-page results.

        Raises:
            ChalkConnectionError: If the HTTP connection fails.
            ChalkAuthenticationError: If the credentials are rejected.
            ChalkStreamError: If the service answers with an error.
            ChalkTimeoutError: If the request times out.
        """
        session = await self._ensure_session()
        payload = dict(request, stream=False)
        url = self._get_http_url(BATCH_CHALK_ENDPOINT)

        try:
            async with session.post(url, json=payload, headers=self._get_headers(token)) as response:
                if response.status in (401, 403):
                    raise ChalkAuthenticationError(f"Authentication failed for {url}")
                elif response.status == 404:
                    raise ChalkConnectionError(f"Chalk endpoint not found: {url}")
                elif response.status >= 400:
                    text = await response.text()
                    raise ChalkStreamError(
                        f"Chalk failed with status {response.status}: {text}"
                    )
                data = await response.json()
        except aiohttp.ClientConnectorError as exc:
            raise ChalkConnectionError(f"Cannot connect to {url}: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise ChalkTimeoutError(f"Request timed out after {self.settings.timeout}s") from exc
        except aiohttp.ClientError as exc:
            raise ChalkConnectionError(f"HTTP client error: {exc}") from exc

        items = data.get("results", []) if isinstance(data, dict) else data
        return [ChalkResult.from_dict(item) for item in items]

    async def health_check(self) -> Dict[str, Any]:
        """Check whether the generation service is reachable.

        Raises:
            ChalkConnectionError: If the server is unreachable.
        """
        session = await self._ensure_session()
        url = self._get_http_url("/api/health")

        try:
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=5)) as response:
                if response.status == 200:
                    return await response.json()
                return {"status": "unknown", "http_status": response.status}
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise ChalkConnectionError(f"Health check failed: {exc}") from exc

    async def close(self) -> None:
        """Close the HTTP session. Safe to call multiple times."""
        async with self._lock:
            if self.session is not None:
                try:
                    await self.session.close()
                finally:
                    self.session = None

    async def __aenter__(self) -> "ChalkClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"ChalkClient({self.settings.base_url})"
