"""Core data types for swap route aggregation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class Token(BaseModel):
    """ERC-20 style token descriptor."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: str = Field(description="Token contract address")
    symbol: str = Field(default="", description="Token symbol")
    name: str = Field(default="", description="Token name")
    decimals: int = Field(ge=0, description="Token decimals")
    chain_id: int = Field(alias="chainId", description="Chain identifier")

    def same_address(self, other: "Token") -> bool:
        """Addresses compare case-insensitively."""
        return self.address.lower() == other.address.lower()


class SwapRequest(BaseModel):
    """Single swap route request."""

    model_config = ConfigDict(populate_by_name=True)

    amount_in: str = Field(alias="amountIn", description="Input amount in token units")
    src_token: Token = Field(alias="srcToken", description="Token sold")
    dst_token: Token = Field(alias="dstToken", description="Token bought")
    chain_id: int = Field(alias="chainId", description="Chain identifier")
    part_count: PositiveInt | None = Field(
        default=None, alias="partCount", description="Requested part count"
    )
    force_part_count: PositiveInt | None = Field(
        default=None,
        alias="forcePartCount",
        description="Part count overriding any selection",
    )
    types: list[int] | None = Field(
        default=None, description="Protocol version type ids (1 = V2, 2 = V3)"
    )
    enabled_sources: list[int] | None = Field(
        default=None, alias="enabledSources", description="Liquidity source ids"
    )


class EncodedHop(BaseModel):
    """Hop in the layout consumed by the on-chain split query."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    src: str = Field(description="Source token address")
    dest: str = Field(description="Destination token address")
    type_id: int = Field(alias="typeId", ge=0, le=255, description="Protocol type id")
    source_id: int = Field(
        alias="sourceId", ge=0, le=255, description="Liquidity source id"
    )
    path: str = Field(default="0x", description="Hex encoded protocol routing data")


class PathHop(BaseModel):
    """Hop of a candidate path as described by the path API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    src: str = Field(description="Source token address")
    dest: str = Field(description="Destination token address")
    source: str = Field(description="Liquidity source name, e.g. BITZY")
    type: str = Field(description="Protocol version, V2 or V3")
    pool: str | None = Field(default=None, description="Pool address")
    fee: str | int | float | None = Field(default=None, description="Pool fee")


class PathData(BaseModel):
    """Path API payload: encoded hops and the matching candidate paths."""

    model_config = ConfigDict(populate_by_name=True)

    hops: list[list[EncodedHop]] = Field(default_factory=list)
    valid_path: list[list[PathHop]] = Field(default_factory=list, alias="validPath")


class SplitRoute(BaseModel):
    """Decoded split query result."""

    amount_out: int = Field(default=0, ge=0, description="Optimal output amount")
    distribution: list[int] = Field(
        default_factory=list, description="Weight per candidate path"
    )


class RouteHop(BaseModel):
    """Hop descriptor handed to the transaction submission layer."""

    model_config = ConfigDict(populate_by_name=True)

    router_address: str = Field(alias="routerAddress")
    lp_address: str = Field(alias="lpAddress")
    from_token: str = Field(alias="fromToken")
    to_token: str = Field(alias="toToken")
    from_: str = Field(alias="from", description="Where the hop input is held")
    to: str = Field(description="Where the hop output lands")
    part: str = Field(default="100000000")
    amount_after_fee: str = Field(alias="amountAfterFee", default="10000")
    dex_interface: int = Field(alias="dexInterface", default=0)


class SwapResult(BaseModel):
    """Route aggregation result."""

    model_config = ConfigDict(populate_by_name=True)

    routes: list[list[RouteHop]] = Field(default_factory=list)
    distributions: list[int] = Field(default_factory=list)
    amount_out_routes: list[int] = Field(default_factory=list, alias="amountOutRoutes")
    amount_out: int = Field(default=0, alias="amountOutBN")
    amount_in_parts: list[int] = Field(default_factory=list, alias="amountInParts")
    is_amount_out_error: bool = Field(default=False, alias="isAmountOutError")
    is_wrap: Literal["wrap", "unwrap"] | None = Field(default=None, alias="isWrap")


class SwapQuote(BaseModel):
    """Reduced quote: total output and number of routes used."""

    amount_out: str = Field(alias="amountOut")
    routes: int

    model_config = ConfigDict(populate_by_name=True)


class BatchResult(BaseModel):
    """Per-item outcome of a batch fetch."""

    success: bool
    data: SwapResult | None = None
    error: str | None = None
