"""JSON-over-HTTP transport for the remote store."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from cartsync._constants import USER_AGENT
from cartsync.config import CartSyncConfig
from cartsync.exceptions import RemoteError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(self, method: str, endpoint: str, *, json_body: Any = None) -> Any:
        ...


class HttpTransport:
    """aiohttp transport: JSON request bodies, JSON (or empty) responses."""

    def __init__(
        self,
        config: CartSyncConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def request(self, method: str, endpoint: str, *, json_body: Any = None) -> Any:
        """Send one request and return the decoded JSON body.

        Any 2xx status is success; an empty body decodes to ``None``.
        Everything else (non-2xx, network failure, timeout, undecodable
        body) raises :class:`RemoteError`.
        """
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        body: str | None = None
        if json_body is not None:
            body = json.dumps(json_body, separators=(",", ":"))
            headers["content-type"] = "application/json"

        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(method, url, data=body, headers=headers, timeout=self._timeout) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise RemoteError(
                f"{method} {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise RemoteError(
                f"{method} {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        if not 200 <= status < 300:
            raise RemoteError(
                f"HTTP {status} from {method} {endpoint}: {text[:200]}",
                status=status,
                endpoint=endpoint,
            )

        if not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise RemoteError(
                f"Invalid JSON from {method} {endpoint}: {text[:200]}",
                status=status,
                endpoint=endpoint,
            ) from exc
