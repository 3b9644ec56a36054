"""Top-level entry points for fetching swap routes."""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from ..api.client import APIClient
from ..config.networks import get_contract_addresses, get_liquidity_sources
from ..config.settings import AggregatorSettings
from ..core.errors import ErrorCode, SwapError
from ..core.types import BatchResult, SwapQuote, SwapRequest, SwapResult, Token
from ..routing.part_count import AssetMinimumCache, PartCountMode, PartCountSelector
from ..routing.simulator import SplitSimulator
from .swap import SwapService

logger = structlog.get_logger(__name__)


class FetchSwapRouteConfig(BaseModel):
    """Per-call wiring for the entry points.

    Unset fields fall back to ``settings`` (environment / .env by default).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    api_base_url: str | None = Field(default=None, description="Routing API base URL")
    default_part_count: PositiveInt | None = Field(
        default=None, description="Part count for pairs worth splitting"
    )
    timeout: float | None = Field(default=None, gt=0, description="HTTP timeout (s)")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra headers, override the api key"
    )
    force_part_count: PositiveInt | None = Field(
        default=None, description="Part count overriding any selection"
    )
    part_count_mode: PartCountMode | None = Field(default=None)
    web3: Any | None = Field(default=None, description="AsyncWeb3 for eth_call")
    api_client: APIClient | None = Field(
        default=None, description="Shared routing API client (caller owns it)"
    )
    asset_minimum_cache: AssetMinimumCache | None = Field(
        default=None, description="Shared minimum-amount cache for online mode"
    )
    high_value_tokens: Mapping[int, list[str]] | None = Field(
        default=None, description="High-value token allow-list per chain id"
    )
    settings: AggregatorSettings | None = Field(default=None)


async def fetch_swap_route(
    request: SwapRequest, config: FetchSwapRouteConfig | None = None
) -> SwapResult:
    """Fetch the split swap route for one request.

    Args:
        request: Swap request
        config: Optional wiring; defaults come from the environment

    Returns:
        Swap result

    Raises:
        SwapError: On invalid input, unsupported network or routing API failure
    """
    config = config or FetchSwapRouteConfig()
    settings = config.settings or AggregatorSettings()

    addresses = get_contract_addresses(request.chain_id)
    if addresses is None:
        raise SwapError(
            f"Unsupported network: {request.chain_id}",
            ErrorCode.NETWORK_NOT_SUPPORTED,
            {"chain_id": request.chain_id},
        )

    if request.force_part_count is None and config.force_part_count is not None:
        request = request.model_copy(
            update={"force_part_count": config.force_part_count}
        )

    api_client = config.api_client or APIClient(
        base_url=config.api_base_url or settings.api_base_url,
        timeout=config.timeout or settings.timeout_seconds,
        headers=config.headers,
        api_key=settings.api_key,
    )

    service = SwapService(
        addresses=addresses,
        api_client=api_client,
        default_part_count=config.default_part_count or settings.default_part_count,
        simulator=SplitSimulator(web3=config.web3, rpc_urls=settings.rpc_urls),
        part_count_selector=PartCountSelector(
            high_value_tokens=config.high_value_tokens,
            minimum_source=api_client,
            cache=config.asset_minimum_cache,
        ),
        part_count_mode=config.part_count_mode or settings.part_count_mode,
    )

    try:
        return await service.fetch_route(request)
    finally:
        if config.api_client is None:
            await api_client.close()


async def _fetch_one(
    request: SwapRequest, config: FetchSwapRouteConfig | None
) -> BatchResult:
    try:
        result = await fetch_swap_route(request, config)
        return BatchResult(success=True, data=result)
    except Exception as e:
        logger.warning(
            "Batch item failed",
            chain_id=request.chain_id,
            src=request.src_token.address,
            dst=request.dst_token.address,
            error=str(e),
        )
        return BatchResult(success=False, error=str(e) or "Unknown error")


async def fetch_batch_swap_routes(
    swaps: Iterable[SwapRequest | tuple[SwapRequest, FetchSwapRouteConfig | None]],
) -> list[BatchResult]:
    """Fetch many routes concurrently; one failure never affects the others.

    Args:
        swaps: Requests, optionally paired with their own config

    Returns:
        One BatchResult per input, in input order
    """
    tasks = []
    for item in swaps:
        if isinstance(item, tuple):
            request, config = item
        else:
            request, config = item, None
        tasks.append(_fetch_one(request, config))

    outcomes = await asyncio.gather(*tasks, return_exceptions=True)
    results = []
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            results.append(
                BatchResult(success=False, error=str(outcome) or "Unknown error")
            )
        else:
            results.append(outcome)

    logger.info(
        "Batch fetch completed",
        total=len(results),
        succeeded=sum(1 for r in results if r.success),
    )
    return results


async def get_swap_quote(
    src_token: Token,
    dst_token: Token,
    amount_in: str,
    chain_id: int,
    config: FetchSwapRouteConfig | None = None,
) -> SwapQuote:
    """Total output and number of routes for a swap."""
    result = await fetch_swap_route(
        SwapRequest(
            amount_in=amount_in,
            src_token=src_token,
            dst_token=dst_token,
            chain_id=chain_id,
        ),
        config,
    )
    return SwapQuote(amount_out=str(result.amount_out), routes=len(result.routes))


async def fetch_swap_route_simple(
    request: SwapRequest, config: FetchSwapRouteConfig | None = None
) -> SwapResult:
    """Fetch a route using the chain's default liquidity sources."""
    sources = get_liquidity_sources(request.chain_id)
    return await fetch_swap_route(
        request.model_copy(
            update={"types": sources.types, "enabled_sources": sources.enabled_sources}
        ),
        config,
    )
