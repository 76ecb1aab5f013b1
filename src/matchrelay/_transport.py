"""HTTP transport for the match data provider."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from matchrelay._constants import USER_AGENT
from matchrelay._redact import redact_params
from matchrelay.config import RelayConfig
from matchrelay.exceptions import TransientUpstreamError, UpstreamError, UpstreamRequestError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """What the endpoint modules need: one authenticated JSON GET."""

    async def get_json(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> Any: ...


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class HttpTransport:
    """GET transport with bearer authentication and per-request timeouts."""

    def __init__(self, config: RelayConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def get_json(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> Any:
        """GET *endpoint* and return the decoded JSON body.

        Raises
        ------
        TransientUpstreamError
            Network failure, timeout, HTTP 429/5xx, or a body that is not JSON.
        UpstreamRequestError
            Any other non-200 status.
        """
        url = f"{self._config.base_url}{endpoint}"
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
            "User-Agent": USER_AGENT,
        }
        query = {key: _query_value(value) for key, value in (params or {}).items()}
        client_timeout = aiohttp.ClientTimeout(total=timeout if timeout is not None else self._config.request_timeout)

        _logger.debug("GET %s %s", url, redact_params(query))

        try:
            async with self._http.get(url, params=query, headers=headers, timeout=client_timeout) as resp:
                text = await resp.text()
                if resp.status == 429 or resp.status >= 500:
                    raise TransientUpstreamError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
                if resp.status != 200:
                    raise UpstreamRequestError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except UpstreamError:
            raise
        except TimeoutError as exc:
            raise TransientUpstreamError(f"Request to {endpoint} timed out", endpoint=endpoint) from exc
        except aiohttp.ClientError as exc:
            raise TransientUpstreamError(f"Request to {endpoint} failed: {exc}", endpoint=endpoint) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TransientUpstreamError(f"Invalid JSON from {endpoint}: {text[:200]}", endpoint=endpoint) from exc
