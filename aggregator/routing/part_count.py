"""Part count selection: how many paths a trade is split across."""

import asyncio
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Literal

import structlog

from ..config.networks import HIGH_VALUE_TOKENS
from ..core.amounts import parse_amount
from ..core.interfaces import AssetMinimumSource
from ..core.types import Token

logger = structlog.get_logger(__name__)

PartCountMode = Literal["offline", "online"]


def parse_asset_minimums(payload: Any) -> dict[tuple[int, str], Decimal]:
    """Map (chain id, lowercase address) to the minimum amount in token units.

    Expected payload: ``{"data": [{"address", "chainId", "minimum"}, ...]}``.
    Malformed entries are skipped.
    """
    entries = payload.get("data") if isinstance(payload, dict) else None
    minimums: dict[tuple[int, str], Decimal] = {}
    if not isinstance(entries, list):
        return minimums

    for entry in entries:
        if not isinstance(entry, dict):
            continue
        address = entry.get("address")
        chain_id = entry.get("chainId")
        minimum = parse_amount(entry.get("minimum", ""))
        if not isinstance(address, str) or minimum is None:
            continue
        try:
            key = (int(chain_id), address.lower())
        except (TypeError, ValueError):
            continue
        minimums[key] = minimum
    return minimums


class AssetMinimumCache:
    """Minimum-amount data shared by reference between requests.

    Loaded on first use and kept until ``clear()``. Concurrent callers wait
    on a single in-flight refresh.
    """

    def __init__(self) -> None:
        self._minimums: dict[tuple[int, str], Decimal] | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._minimums is not None

    async def get(self, source: AssetMinimumSource) -> dict[tuple[int, str], Decimal]:
        if self._minimums is not None:
            return self._minimums
        async with self._lock:
            if self._minimums is None:
                payload = await source.get_asset_minimum()
                self._minimums = parse_asset_minimums(payload)
                logger.info("Asset minimums loaded", count=len(self._minimums))
            return self._minimums

    def clear(self) -> None:
        self._minimums = None


def get_part_count_offline(
    src_token: Token,
    dst_token: Token,
    chain_id: int,
    default_part_count: int,
    high_value_tokens: Mapping[int, Iterable[str]] | None = None,
) -> int:
    """Split only pairs that touch a high-value token on this chain."""
    table = HIGH_VALUE_TOKENS if high_value_tokens is None else high_value_tokens
    listed = {address.lower() for address in table.get(chain_id, ())}
    if src_token.address.lower() in listed or dst_token.address.lower() in listed:
        return default_part_count
    return 1


class PartCountSelector:
    """Chooses the part count for a request.

    Precedence: forced count, then online minimum-amount data (online mode
    only), then the offline allow-list heuristic.
    """

    def __init__(
        self,
        high_value_tokens: Mapping[int, Iterable[str]] | None = None,
        minimum_source: AssetMinimumSource | None = None,
        cache: AssetMinimumCache | None = None,
    ) -> None:
        self.high_value_tokens = (
            HIGH_VALUE_TOKENS if high_value_tokens is None else high_value_tokens
        )
        self.minimum_source = minimum_source
        self.cache = cache or AssetMinimumCache()

    def select_offline(
        self,
        src_token: Token,
        dst_token: Token,
        chain_id: int,
        default_part_count: int,
        force_part_count: int | None = None,
    ) -> int:
        if force_part_count is not None:
            return _require_positive(force_part_count)
        _require_positive(default_part_count)
        return get_part_count_offline(
            src_token, dst_token, chain_id, default_part_count, self.high_value_tokens
        )

    async def select(
        self,
        src_token: Token,
        dst_token: Token,
        chain_id: int,
        default_part_count: int,
        mode: PartCountMode = "offline",
        amount_in: str | Decimal | None = None,
        force_part_count: int | None = None,
    ) -> int:
        """Select the part count for a token pair.

        Args:
            src_token: Token sold
            dst_token: Token bought
            chain_id: Chain identifier
            default_part_count: Count used when splitting is worthwhile
            mode: "offline" (allow-list only) or "online" (minimum amounts)
            amount_in: Input amount in token units, needed for online mode
            force_part_count: Count that overrides any selection

        Returns:
            Part count >= 1

        Raises:
            ValueError: If a count is not a positive integer
        """
        if force_part_count is not None:
            return _require_positive(force_part_count)
        _require_positive(default_part_count)

        if mode == "online":
            online = await self._select_online(
                src_token, chain_id, default_part_count, amount_in
            )
            if online is not None:
                return online

        return self.select_offline(src_token, dst_token, chain_id, default_part_count)

    async def _select_online(
        self,
        src_token: Token,
        chain_id: int,
        default_part_count: int,
        amount_in: str | Decimal | None,
    ) -> int | None:
        amount = parse_amount(amount_in) if amount_in is not None else None
        if self.minimum_source is None or amount is None:
            return None

        try:
            minimums = await self.cache.get(self.minimum_source)
        except Exception as e:
            logger.warning(
                "Asset minimum lookup failed; using offline part count",
                chain_id=chain_id,
                error=str(e),
            )
            return None

        minimum = minimums.get((chain_id, src_token.address.lower()))
        if minimum is None:
            logger.debug(
                "No asset minimum for token; using offline part count",
                chain_id=chain_id,
                token=src_token.address,
            )
            return None

        return default_part_count if amount >= minimum else 1


def _require_positive(part_count: int) -> int:
    if isinstance(part_count, bool) or not isinstance(part_count, int):
        raise ValueError(f"Part count must be an integer, got {part_count!r}")
    if part_count <= 0:
        raise ValueError(f"Part count must be positive, got {part_count}")
    return part_count
