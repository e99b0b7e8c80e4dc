"""HTTP client for a running bridge.

Used by the CLI ``status`` and ``show`` commands. Also handy for scripting
exports without the Figma plugin.
"""

import logging
from typing import Optional, Dict, Any, Tuple

import httpx

from figma_bridge import __version__
from figma_bridge.config import DEFAULT_PORT
from figma_bridge.utils.errors import BridgeClientError

logger = logging.getLogger(__name__)

DEFAULT_BRIDGE_URL = f"http://localhost:{DEFAULT_PORT}"
DEFAULT_TIMEOUT = 5.0


class BridgeClient:
    """Async client for the bridge HTTP API.

    Usage:
        async with BridgeClient("http://localhost:8473") as client:
            status = await client.health()
            found, body = await client.debug("figma_abc123_x1y2z3")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BRIDGE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "BridgeClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={
                "User-Agent": f"figma-bridge/{__version__}",
                "Accept": "application/json",
            },
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._client

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise BridgeClientError(f"Bridge timed out: {e}", url=url) from e
        except httpx.TransportError as e:
            raise BridgeClientError(f"Bridge not reachable at {self.base_url}: {e}", url=url) from e
        logger.debug(f"{method} {path} -> {response.status_code}")
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise BridgeClientError(
                f"Bridge returned non-JSON response ({response.status_code})",
                status_code=response.status_code,
                url=str(response.url),
            ) from e
        if not isinstance(body, dict):
            raise BridgeClientError(
                "Bridge returned unexpected JSON", status_code=response.status_code, url=str(response.url)
            )
        return body

    async def health(self) -> Dict[str, Any]:
        response = await self._request("GET", "/health")
        body = self._json(response)
        if response.status_code != 200:
            raise BridgeClientError(
                body.get("error", f"Health check failed ({response.status_code})"),
                status_code=response.status_code,
                url=str(response.url),
            )
        return body

    async def debug(self, token: str) -> Tuple[bool, Dict[str, Any]]:
        """Resolve a token. Returns (found, body); a miss is not an error."""
        response = await self._request("GET", f"/debug/{token}")
        body = self._json(response)
        if response.status_code not in (200, 404):
            raise BridgeClientError(
                body.get("error", f"Debug lookup failed ({response.status_code})"),
                status_code=response.status_code,
                url=str(response.url),
            )
        return response.status_code == 200, body

    async def export(
        self,
        figment: Dict[str, Any],
        export_type: str = "real-time",
        token: Optional[str] = None,
        component_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": export_type, "figment": figment}
        if token:
            payload["token"] = token
        if component_id:
            payload["componentId"] = component_id
        response = await self._request("POST", "/export", json=payload)
        body = self._json(response)
        if response.status_code != 200:
            raise BridgeClientError(
                body.get("error", f"Export failed ({response.status_code})"),
                status_code=response.status_code,
                url=str(response.url),
            )
        return body
