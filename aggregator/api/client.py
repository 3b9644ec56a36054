"""HTTP client for the routing API (path finding and asset minimums)."""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError
from tenacity import AsyncRetrying, RetryError

from ..config.networks import (
    API_ENDPOINTS,
    DEFAULT_API_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
)
from ..core.errors import ErrorCode, SwapError
from ..core.types import PathData, Token

logger = structlog.get_logger(__name__)

AUTH_HEADER = "authen-key"


def build_query_string(params: dict[str, Any]) -> str:
    """Build the query string the routing API expects.

    Lists are written as JSON-style arrays with only the quotes encoded:
    ``typeId=[1, 2]`` becomes ``typeId=[%221%22,%222%22]``.
    """
    parts = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            array_str = '["' + '","'.join(str(v) for v in value) + '"]'
            rendered = array_str.replace('"', "%22")
        else:
            rendered = str(value)
        parts.append(f"{key}={rendered}")
    return "&".join(parts)


def build_headers(
    headers: dict[str, str] | None = None, api_key: str | None = None
) -> dict[str, str]:
    """Merge auth headers: explicit headers win over the configured key."""
    merged: dict[str, str] = {}
    if api_key:
        merged[AUTH_HEADER] = api_key
    merged.update(headers or {})
    return merged


class APIClient:
    """Routing API client.

    Instances are constructed explicitly and may be shared by the caller
    across requests; nothing is cached at module level.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
        api_key: str | None = None,
        session: httpx.AsyncClient | None = None,
        retrying: AsyncRetrying | None = None,
    ) -> None:
        """Initialize the routing API client.

        Args:
            base_url: Routing API base URL
            timeout: Request timeout in seconds
            headers: Extra headers, these override the api key header
            api_key: Default authen-key value (usually from the environment)
            session: Optional httpx client session
            retrying: Optional tenacity retry policy; requests are sent once
                when omitted
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = build_headers(headers, api_key)
        self.retrying = retrying
        self._session = session or httpx.AsyncClient(timeout=timeout)
        self._owns_session = session is None

    async def close(self) -> None:
        if self._owns_session:
            await self._session.aclose()

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _send(self, url: str) -> Any:
        response = await self._session.get(
            url,
            headers={"Content-Type": "application/json", **self.headers},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def _request(self, endpoint: str) -> Any:
        """GET an endpoint and return its JSON body.

        Raises:
            SwapError: API_ERROR on timeout, transport failure or non-2xx status
        """
        url = f"{self.base_url}{endpoint}"

        try:
            if self.retrying is None:
                return await self._send(url)
            async for attempt in self.retrying.copy():
                with attempt:
                    return await self._send(url)
        except httpx.TimeoutException as e:
            logger.error(
                "Routing API request timed out", endpoint=endpoint, timeout=self.timeout
            )
            raise SwapError(
                "Request timeout",
                ErrorCode.API_ERROR,
                {"endpoint": endpoint, "timeout": self.timeout, "original_error": e},
            ) from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "Routing API error",
                endpoint=endpoint,
                status_code=e.response.status_code,
                response_text=e.response.text,
            )
            raise SwapError(
                f"HTTP {e.response.status_code}: {e.response.reason_phrase}",
                ErrorCode.API_ERROR,
                {"endpoint": endpoint, "original_error": e},
            ) from e
        except (httpx.HTTPError, RetryError, ValueError) as e:
            logger.error("Routing API request failed", endpoint=endpoint, error=str(e))
            raise SwapError(
                str(e) or "Unknown API error",
                ErrorCode.API_ERROR,
                {"endpoint": endpoint, "original_error": e},
            ) from e

    async def get_path_v3(
        self,
        src_token: Token,
        dst_token: Token,
        amount_in: int | str,
        types: list[int],
        enabled_sources: list[int],
    ) -> PathData:
        """Fetch candidate split paths for a token pair.

        Args:
            src_token: Token sold (wrapped address for native assets)
            dst_token: Token bought (wrapped address for native assets)
            amount_in: Input amount in base units
            types: Protocol version type ids
            enabled_sources: Liquidity source ids

        Returns:
            Encoded hops and the matching candidate paths
        """
        query = build_query_string(
            {
                "src": src_token.address,
                "dest": dst_token.address,
                "amount": str(amount_in),
                "typeId": types,
                "sourceId": enabled_sources,
            }
        )
        endpoint = f"{API_ENDPOINTS['PATH_V3']}?{query}"
        payload = await self._request(endpoint)

        data = payload.get("data") if isinstance(payload, dict) else None
        try:
            path_data = PathData.model_validate(data or {})
        except ValidationError as e:
            logger.error("Unexpected path response", endpoint=endpoint, error=str(e))
            raise SwapError(
                "Malformed path response",
                ErrorCode.API_ERROR,
                {"endpoint": endpoint, "original_error": e},
            ) from e

        logger.info(
            "Fetched candidate paths",
            src=src_token.address,
            dest=dst_token.address,
            hops=len(path_data.hops),
            paths=len(path_data.valid_path),
        )
        return path_data

    async def get_asset_minimum(self) -> Any:
        """Fetch per-token minimum amounts worth splitting across paths."""
        return await self._request(API_ENDPOINTS["ASSET_MINIMUM"])
