"""On-chain split query simulation."""

from typing import Any

import structlog
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from ..config.networks import get_rpc_config
from ..core.errors import ErrorCode, SwapError
from ..core.types import EncodedHop, SplitRoute
from .encoder import decode_split_query, encode_routes, encode_split_query

logger = structlog.get_logger(__name__)


class SplitSimulator:
    """Runs ``splitQuery`` as a read-only ``eth_call``.

    An injected web3 client is used for every chain; otherwise one client
    per chain id is built lazily from the RPC table.
    """

    def __init__(
        self,
        web3: Any | None = None,
        rpc_urls: dict[int, str] | None = None,
    ) -> None:
        """Initialize the simulator.

        Args:
            web3: Optional AsyncWeb3 (or compatible) client
            rpc_urls: RPC URL overrides keyed by chain id
        """
        self._web3 = web3
        self.rpc_urls = rpc_urls or {}
        self._clients: dict[int, Any] = {}

    def get_web3(self, chain_id: int) -> Any:
        """Return the execution client for a chain.

        Raises:
            SwapError: NETWORK_NOT_SUPPORTED for chains without RPC config
        """
        if self._web3 is not None:
            return self._web3
        if chain_id in self._clients:
            return self._clients[chain_id]

        rpc_url = self.rpc_urls.get(chain_id)
        if rpc_url is None:
            rpc_config = get_rpc_config(chain_id)
            if rpc_config is None or not rpc_config.rpc_urls:
                raise SwapError(
                    f"Unsupported chainId: {chain_id}",
                    ErrorCode.NETWORK_NOT_SUPPORTED,
                    {"chain_id": chain_id},
                )
            rpc_url = rpc_config.rpc_urls[0]

        client = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._clients[chain_id] = client
        logger.info("Created RPC client", chain_id=chain_id, rpc_url=rpc_url)
        return client

    async def simulate_split(
        self,
        chain_id: int,
        query_address: str,
        amount_in: int,
        hops: list[list[EncodedHop]],
        part_count: int,
        gas_limit: int,
    ) -> SplitRoute:
        """Query the optimal split for the candidate routes.

        Failures of encoding, the call or decoding yield an empty split
        (amount_out 0, no distribution).

        Args:
            chain_id: Chain identifier
            query_address: Split query contract address
            amount_in: Input amount in base units
            hops: Encoded hops per candidate path
            part_count: Target part count
            gas_limit: Gas ceiling for the read-only call

        Returns:
            Output amount and distribution weight per candidate path

        Raises:
            SwapError: NETWORK_NOT_SUPPORTED for chains without RPC config
        """
        web3 = self.get_web3(chain_id)

        try:
            calldata = encode_split_query(amount_in, encode_routes(hops), part_count)
            result = await web3.eth.call(
                {
                    "to": Web3.to_checksum_address(query_address),
                    "data": Web3.to_hex(calldata),
                    "gas": gas_limit,
                }
            )
            if not result:
                logger.warning("Split query returned no data", chain_id=chain_id)
                return SplitRoute()
            split = decode_split_query(bytes(result))
        except Exception as e:
            logger.warning(
                "Split query failed",
                chain_id=chain_id,
                query_address=query_address,
                part_count=part_count,
                error=str(e),
            )
            return SplitRoute()

        logger.info(
            "Split query completed",
            chain_id=chain_id,
            amount_out=split.amount_out,
            distribution=split.distribution,
        )
        return split
