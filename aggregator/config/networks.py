"""Per-network address tables, RPC endpoints and routing constants."""

from pydantic import BaseModel, Field

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
# Router lookups that miss resolve to this sentinel instead of failing.
UNKNOWN_ROUTER = ZERO_ADDRESS

# Transfer markers used in route hops
USER_TARGET = "0x0000000000000000000000000000000000000001"
ROUTER_TARGET = "0x0000000000000000000000000000000000000000"

DEX_INTERFACE = {"V2": 0, "V3": 1}

DEFAULT_PART_COUNT = 5
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_API_BASE_URL = "https://api-public.bitzy.app"

# Fixed-point "part" scaling factor carried on every hop
PART_SCALE = "100000000"
FEE_BASE = 10000

API_ENDPOINTS = {
    "PATH_V3": "/api/sdk/bestpath/split",
    "ASSET_MINIMUM": "/api/sdk/asset/minimum",
}

BOTANIX_MAINNET = 3637
BOTANIX_TESTNET = 3636


class NetworkAddresses(BaseModel):
    """Contract addresses used by route aggregation on one chain."""

    router_address: str = Field(description="Aggregation router")
    query_address: str = Field(description="Split query contract")
    wrapped_address: str = Field(description="Canonical wrapped native token")
    native_address: str = Field(description="Native asset placeholder address")
    gas_limit: int = Field(
        default=50_000_000_000, description="Gas ceiling for the split query call"
    )


class NativeCurrency(BaseModel):
    name: str
    symbol: str
    decimals: int


class RpcConfig(BaseModel):
    name: str
    rpc_urls: list[str]
    native_currency: NativeCurrency


class LiquiditySources(BaseModel):
    types: list[int] = Field(default_factory=lambda: [1, 2])
    enabled_sources: list[int] = Field(default_factory=lambda: [1])


CONTRACT_ADDRESSES: dict[int, NetworkAddresses] = {
    BOTANIX_MAINNET: NetworkAddresses(
        router_address="0x41207Eadf1932966Ff75bdc35e55D2C6734E47D4",
        query_address="0x5b5079587501Bd85d3CDf5bFDf299f4eaAe98c23",
        wrapped_address="0x0D2437F93Fed6EA64Ef01cCde385FB1263910C56",  # pBTC
        native_address="0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",  # BTC
    ),
    BOTANIX_TESTNET: NetworkAddresses(
        router_address="0x07c49Ade88b40f1Ac05707f236d7706f834F6BDB",
        query_address="0x2ad4b8912fb4Fe93f79BbCb3Aa6B8C39025FdfCC",
        wrapped_address="0x233631132FD56c8f86D1FC97F0b82420a8d20af3",  # WBTC
        native_address="0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",  # BTC
    ),
}

DEX_ROUTERS: dict[int, dict[str, str]] = {
    BOTANIX_MAINNET: {
        "BITZY_V3": "0xA5E0AE4e5103dc71cA290AA3654830442357A489",
        "BITZY_V2": "0x07c49Ade88b40f1Ac05707f236d7706f834F6BDB",
        "AVOCADO_V2": "0xA4B4cDeC4fE2839d3D3a49Ad5E20c21c01A31091",
    },
    BOTANIX_TESTNET: {
        "BITZY_V3": "0xA5E0AE4e5103dc71cA290AA3654830442357A489",
        "BITZY_V2": "0x07c49Ade88b40f1Ac05707f236d7706f834F6BDB",
        "AVOCADO_V2": "0xA4B4cDeC4fE2839d3D3a49Ad5E20c21c01A31091",
    },
}

_BITCOIN = NativeCurrency(name="Bitcoin", symbol="BTC", decimals=18)

RPC_CONFIG: dict[int, RpcConfig] = {
    BOTANIX_MAINNET: RpcConfig(
        name="Botanix Mainnet",
        rpc_urls=["https://rpc.botanixlabs.com"],
        native_currency=_BITCOIN,
    ),
    BOTANIX_TESTNET: RpcConfig(
        name="Botanix Testnet",
        rpc_urls=["https://node.botanixlabs.dev"],
        native_currency=_BITCOIN,
    ),
}

# types: 1 = V2, 2 = V3; sources: 1 = BITZY
LIQUIDITY_SOURCES: dict[int, LiquiditySources] = {
    BOTANIX_MAINNET: LiquiditySources(types=[1, 2], enabled_sources=[1]),
    BOTANIX_TESTNET: LiquiditySources(types=[1, 2], enabled_sources=[1]),
}

# Tokens deep enough in liquidity to be worth splitting across paths
HIGH_VALUE_TOKENS: dict[int, list[str]] = {
    BOTANIX_MAINNET: [
        "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",  # BTC
        "0x0D2437F93Fed6EA64Ef01cCde385FB1263910C56",  # pBTC
        "0x29eE6138DD4C9815f46D34a4A1ed48F46758A402",  # USDC.e
    ],
    BOTANIX_TESTNET: [
        "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",  # BTC
        "0x233631132FD56c8f86D1FC97F0b82420a8d20af3",  # WBTC
    ],
}


def get_contract_addresses(chain_id: int) -> NetworkAddresses | None:
    return CONTRACT_ADDRESSES.get(chain_id)


def get_rpc_config(chain_id: int) -> RpcConfig | None:
    return RPC_CONFIG.get(chain_id)


def get_dex_routers(chain_id: int) -> dict[str, str]:
    return DEX_ROUTERS.get(chain_id, {})


def get_liquidity_sources(chain_id: int) -> LiquiditySources:
    """Liquidity filters for a chain, V2/V3 on BITZY when unknown."""
    return LIQUIDITY_SOURCES.get(chain_id) or LiquiditySources()


def get_supported_networks() -> list[int]:
    return sorted(CONTRACT_ADDRESSES)
