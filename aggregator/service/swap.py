"""Swap route service: the full aggregation pipeline for one request."""

import structlog

from ..config.networks import (
    DEFAULT_PART_COUNT,
    NetworkAddresses,
    get_contract_addresses,
    get_dex_routers,
    get_supported_networks,
)
from ..core.amounts import (
    from_token_amount,
    is_native_token,
    validate_amount,
    validate_tokens,
)
from ..core.errors import ErrorCode, SwapError
from ..core.interfaces import PathProvider
from ..core.types import SwapRequest, SwapResult
from ..routing.part_count import PartCountMode, PartCountSelector
from ..routing.reconstruct import allocate, build_routes
from ..routing.simulator import SplitSimulator
from ..routing.wrap import build_wrap_result, detect_wrap

logger = structlog.get_logger(__name__)

DEFAULT_TYPES = [1, 2]
DEFAULT_SOURCES = [1]


def empty_result() -> SwapResult:
    """No-liquidity outcome: no routes, zero output."""
    return SwapResult(is_amount_out_error=True)


class SwapService:
    """Fetches split swap routes for one network's contract set.

    ## Part count
    High-value pairs (BTC, pBTC, stablecoins) are split across
    ``default_part_count`` paths, everything else takes a single path. Pair
    liquidity matters more than token value: a thin BTC-X pool split five
    ways still moves the price on every part, so callers that know the pool
    depth should pass ``force_part_count``.
    """

    def __init__(
        self,
        addresses: NetworkAddresses,
        api_client: PathProvider,
        default_part_count: int = DEFAULT_PART_COUNT,
        simulator: SplitSimulator | None = None,
        part_count_selector: PartCountSelector | None = None,
        part_count_mode: PartCountMode = "offline",
        dex_routers: dict[str, str] | None = None,
    ) -> None:
        """Initialize the swap service.

        Args:
            addresses: Router/query/wrapped/native addresses for the network
            api_client: Routing API client
            default_part_count: Part count for pairs worth splitting
            simulator: Split query simulator (built with defaults if omitted)
            part_count_selector: Part count selector (offline table if omitted)
            part_count_mode: "offline" or "online"
            dex_routers: Router table override; per-chain table otherwise
        """
        if default_part_count <= 0:
            raise ValueError(
                f"default_part_count must be positive, got {default_part_count}"
            )
        self.addresses = addresses
        self.api_client = api_client
        self.default_part_count = default_part_count
        self.simulator = simulator or SplitSimulator()
        self.part_count_selector = part_count_selector or PartCountSelector(
            minimum_source=api_client
        )
        self.part_count_mode = part_count_mode
        self.dex_routers = dex_routers

    async def fetch_route(self, request: SwapRequest) -> SwapResult:
        """Fetch the split route for a swap request.

        Args:
            request: Swap request

        Returns:
            Swap result; ``is_amount_out_error`` is set when no liquidity was found

        Raises:
            SwapError: INVALID_TOKENS, INVALID_AMOUNT, NETWORK_NOT_SUPPORTED, or
                API_ERROR when the path lookup fails
        """
        src_token, dst_token = request.src_token, request.dst_token
        chain_id = request.chain_id

        if not validate_tokens(src_token, dst_token):
            raise SwapError(
                "Invalid tokens provided",
                ErrorCode.INVALID_TOKENS,
                {"src_token": src_token.address, "dst_token": dst_token.address},
            )

        try:
            amount_in = (
                from_token_amount(request.amount_in, src_token.decimals)
                if validate_amount(request.amount_in)
                else 0
            )
        except ValueError as e:
            raise SwapError(
                "Invalid amount provided",
                ErrorCode.INVALID_AMOUNT,
                {"amount_in": request.amount_in, "original_error": e},
            ) from e
        if amount_in <= 0:
            raise SwapError(
                "Invalid amount provided",
                ErrorCode.INVALID_AMOUNT,
                {"amount_in": request.amount_in},
            )

        addresses = self.addresses
        force_part_count = request.force_part_count or request.part_count

        wrap = detect_wrap(
            src_token, dst_token, addresses.native_address, addresses.wrapped_address
        )
        if wrap is not None:
            part_count = self.part_count_selector.select_offline(
                src_token,
                dst_token,
                chain_id,
                self.default_part_count,
                force_part_count=force_part_count,
            )
            logger.info("Native wrap detected", kind=wrap, chain_id=chain_id)
            return build_wrap_result(
                wrap,
                src_token,
                dst_token,
                amount_in,
                addresses.router_address,
                part_count,
            )

        # Fails fast with NETWORK_NOT_SUPPORTED before any network traffic
        self.simulator.get_web3(chain_id)

        part_count = await self.part_count_selector.select(
            src_token,
            dst_token,
            chain_id,
            self.default_part_count,
            mode=self.part_count_mode,
            amount_in=request.amount_in,
            force_part_count=force_part_count,
        )

        # Native assets have no pools; look paths up through the wrapped token
        lookup_src = src_token
        if is_native_token(src_token, addresses.native_address):
            lookup_src = src_token.model_copy(
                update={"address": addresses.wrapped_address}
            )
        lookup_dst = dst_token
        if is_native_token(dst_token, addresses.native_address):
            lookup_dst = dst_token.model_copy(
                update={"address": addresses.wrapped_address}
            )

        try:
            path_data = await self.api_client.get_path_v3(
                lookup_src,
                lookup_dst,
                str(amount_in),
                request.types or DEFAULT_TYPES,
                request.enabled_sources or DEFAULT_SOURCES,
            )
        except Exception as e:
            logger.error(
                "Failed to fetch swap route",
                chain_id=chain_id,
                src=src_token.address,
                dst=dst_token.address,
                error=str(e),
            )
            raise SwapError(
                "Failed to fetch swap route",
                ErrorCode.API_ERROR,
                {"original_error": e, "request": request},
            ) from e

        if not path_data.hops:
            logger.info("No liquidity found", chain_id=chain_id, part_count=part_count)
            return empty_result()

        split = await self.simulator.simulate_split(
            chain_id,
            addresses.query_address,
            amount_in,
            path_data.hops,
            part_count,
            addresses.gas_limit,
        )
        if split.amount_out <= 0:
            return empty_result()

        dex_routers = (
            self.dex_routers
            if self.dex_routers is not None
            else get_dex_routers(chain_id)
        )
        routes, distributions = build_routes(
            path_data.valid_path,
            split.distribution,
            addresses.wrapped_address,
            dex_routers,
        )

        result = SwapResult(
            routes=routes,
            distributions=distributions,
            amount_out_routes=allocate(split.amount_out, distributions, part_count),
            amount_out=split.amount_out,
            amount_in_parts=allocate(amount_in, distributions, part_count),
            is_amount_out_error=False,
        )
        logger.info(
            "Swap route fetched",
            chain_id=chain_id,
            part_count=part_count,
            routes=len(routes),
            amount_out=split.amount_out,
        )
        return result

    def get_supported_networks(self) -> list[int]:
        return get_supported_networks()

    def get_network_config(self, chain_id: int) -> NetworkAddresses | None:
        return get_contract_addresses(chain_id)
