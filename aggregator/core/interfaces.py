"""Core interfaces for route aggregation collaborators."""

from typing import Any, Protocol, runtime_checkable

from .types import PathData, Token


class AssetMinimumSource(Protocol):
    """Source of per-token minimum amounts worth splitting."""

    async def get_asset_minimum(self) -> Any:
        """Fetch the raw minimum-amount payload."""
        ...


@runtime_checkable
class PathProvider(Protocol):
    """Path-finding service protocol."""

    async def get_path_v3(
        self,
        src_token: Token,
        dst_token: Token,
        amount_in: int | str,
        types: list[int],
        enabled_sources: list[int],
    ) -> PathData:
        """Fetch candidate paths for a token pair."""
        ...

    async def get_asset_minimum(self) -> Any:
        """Fetch the raw minimum-amount payload."""
        ...
