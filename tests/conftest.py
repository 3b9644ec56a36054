"""Shared fixtures for route aggregation tests."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from eth_abi import encode

from aggregator.config.networks import CONTRACT_ADDRESSES
from aggregator.core.types import Token

MAINNET = 3637
ADDRESSES = CONTRACT_ADDRESSES[MAINNET]

NATIVE_BTC = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
PBTC = "0x0D2437F93Fed6EA64Ef01cCde385FB1263910C56"
USDC_E = "0x29eE6138DD4C9815f46D34a4A1ed48F46758A402"
MEME = "0x1234567890123456789012345678901234567890"
OTHER = "0x0987654321098765432109876543210987654321"
POOL_A = "0x1111111111111111111111111111111111111111"
POOL_B = "0x2222222222222222222222222222222222222222"


def make_token(address: str, symbol: str = "TKN", decimals: int = 18) -> Token:
    return Token(
        address=address, symbol=symbol, name=symbol, decimals=decimals, chain_id=MAINNET
    )


def split_query_return(amount_out: int, distribution: list[int]) -> bytes:
    """ABI-encoded splitQuery return data."""
    return encode(["bool", "(uint256,uint256[])"], [True, (amount_out, distribution)])


def fake_web3(return_value: bytes | None = None, side_effect=None) -> SimpleNamespace:
    """Stand-in for AsyncWeb3 exposing only ``eth.call``."""
    call = AsyncMock(return_value=return_value, side_effect=side_effect)
    return SimpleNamespace(eth=SimpleNamespace(call=call))


def two_path_payload() -> dict:
    """Path API payload with a V3 and a V2 path from pBTC to USDC.e."""
    src, dest = PBTC.lower(), USDC_E.lower()
    return {
        "data": {
            "hops": [
                [
                    {
                        "src": src,
                        "dest": dest,
                        "typeId": 2,
                        "sourceId": 1,
                        "path": "0x000bb8",
                    }
                ],
                [{"src": src, "dest": dest, "typeId": 1, "sourceId": 1, "path": "0x"}],
            ],
            "validPath": [
                [
                    {
                        "src": src,
                        "dest": dest,
                        "source": "BITZY",
                        "type": "V3",
                        "pool": POOL_A,
                        "fee": 3000,
                    }
                ],
                [
                    {
                        "src": src,
                        "dest": dest,
                        "source": "BITZY",
                        "type": "V2",
                        "pool": POOL_B,
                        "fee": 2500,
                    }
                ],
            ],
        }
    }


@pytest.fixture
def btc():
    return make_token(NATIVE_BTC, "BTC")


@pytest.fixture
def pbtc():
    return make_token(PBTC, "pBTC")


@pytest.fixture
def usdc():
    return make_token(USDC_E, "USDC.e", decimals=6)


@pytest.fixture
def meme():
    return make_token(MEME, "MEME")


@pytest.fixture
def other():
    return make_token(OTHER, "OTHER")
