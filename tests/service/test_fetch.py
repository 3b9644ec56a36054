"""Tests for the top-level route fetching entry points."""

from unittest.mock import AsyncMock

import httpx
import pytest
import respx
from eth_abi import decode

from aggregator.api.client import APIClient
from aggregator.config.settings import AggregatorSettings
from aggregator.core.errors import ErrorCode, SwapError
from aggregator.core.types import PathData, SwapRequest
from aggregator.routing.part_count import AssetMinimumCache
from aggregator.service.fetch import (
    FetchSwapRouteConfig,
    fetch_batch_swap_routes,
    fetch_swap_route,
    fetch_swap_route_simple,
    get_swap_quote,
)
from conftest import MAINNET, fake_web3, split_query_return, two_path_payload

BASE_URL = "https://api.test"
PATH_URL = f"{BASE_URL}/api/sdk/bestpath/split"
MINIMUM_URL = f"{BASE_URL}/api/sdk/asset/minimum"


def settings(**overrides) -> AggregatorSettings:
    values = {"api_base_url": BASE_URL, "api_key": "env-key"}
    values.update(overrides)
    return AggregatorSettings(**values)


def part_count_of(web3) -> int:
    calldata = bytes.fromhex(web3.eth.call.await_args.args[0]["data"][10:])
    return decode(["uint256", "bytes", "uint256"], calldata)[2]


@pytest.fixture
def web3():
    return fake_web3(return_value=split_query_return(123457, [3, 2]))


@pytest.fixture
def config(web3):
    return FetchSwapRouteConfig(web3=web3, settings=settings())


@pytest.fixture
def path_route():
    with respx.mock(assert_all_called=False) as mock:
        yield mock.get(PATH_URL).mock(
            return_value=httpx.Response(200, json=two_path_payload())
        )


def swap(src, dst, amount="1.5", chain_id=MAINNET, **kwargs) -> SwapRequest:
    return SwapRequest(
        amount_in=amount, src_token=src, dst_token=dst, chain_id=chain_id, **kwargs
    )


class TestFetchSwapRoute:
    @pytest.mark.asyncio
    async def test_end_to_end(self, config, path_route, btc, usdc):
        result = await fetch_swap_route(swap(btc, usdc), config)

        assert result.amount_out == 123457
        assert result.amount_in_parts == [900000000000000000, 600000000000000000]
        assert len(result.routes) == 2

        request = path_route.calls.last.request
        assert request.headers["authen-key"] == "env-key"
        assert request.url.params["amount"] == "1500000000000000000"

    @pytest.mark.asyncio
    async def test_config_headers_override_api_key(self, web3, path_route, pbtc, usdc):
        config = FetchSwapRouteConfig(
            web3=web3, settings=settings(), headers={"authen-key": "explicit"}
        )

        await fetch_swap_route(swap(pbtc, usdc), config)

        assert path_route.calls.last.request.headers["authen-key"] == "explicit"

    @pytest.mark.asyncio
    async def test_config_base_url_wins_over_settings(self, web3, pbtc, usdc):
        config = FetchSwapRouteConfig(
            web3=web3,
            settings=settings(api_base_url="https://unused.test"),
            api_base_url=BASE_URL,
        )

        with respx.mock:
            route = respx.get(PATH_URL).mock(
                return_value=httpx.Response(200, json=two_path_payload())
            )
            await fetch_swap_route(swap(pbtc, usdc), config)

        assert route.called

    @pytest.mark.asyncio
    async def test_unsupported_network(self, config, path_route, meme, other):
        with pytest.raises(SwapError) as exc_info:
            await fetch_swap_route(swap(meme, other, chain_id=999), config)

        assert exc_info.value.code == ErrorCode.NETWORK_NOT_SUPPORTED
        assert not path_route.called

    @pytest.mark.asyncio
    async def test_config_force_part_count(self, web3, path_route, meme, other):
        config = FetchSwapRouteConfig(
            web3=web3, settings=settings(), force_part_count=4
        )

        await fetch_swap_route(swap(meme, other), config)

        assert part_count_of(web3) == 4

    @pytest.mark.asyncio
    async def test_request_force_part_count_wins(self, web3, path_route, meme, other):
        config = FetchSwapRouteConfig(
            web3=web3, settings=settings(), force_part_count=4
        )

        await fetch_swap_route(swap(meme, other, force_part_count=2), config)

        assert part_count_of(web3) == 2

    @pytest.mark.asyncio
    async def test_default_part_count_from_settings(
        self, web3, path_route, pbtc, usdc
    ):
        config = FetchSwapRouteConfig(
            web3=web3, settings=settings(default_part_count=8)
        )

        await fetch_swap_route(swap(pbtc, usdc), config)

        assert part_count_of(web3) == 8

    @pytest.mark.asyncio
    async def test_online_mode_with_shared_cache(self, web3, pbtc, usdc):
        minimums = {
            "data": [{"address": pbtc.address, "chainId": MAINNET, "minimum": "2"}]
        }
        cache = AssetMinimumCache()
        config = FetchSwapRouteConfig(
            web3=web3,
            settings=settings(),
            part_count_mode="online",
            asset_minimum_cache=cache,
        )

        with respx.mock:
            respx.get(PATH_URL).mock(
                return_value=httpx.Response(200, json=two_path_payload())
            )
            minimum_route = respx.get(MINIMUM_URL).mock(
                return_value=httpx.Response(200, json=minimums)
            )
            await fetch_swap_route(swap(pbtc, usdc, amount="1"), config)
            assert part_count_of(web3) == 1
            await fetch_swap_route(swap(pbtc, usdc, amount="3"), config)
            assert part_count_of(web3) == 5

        assert minimum_route.call_count == 1
        assert cache.loaded

    @pytest.mark.asyncio
    async def test_injected_api_client_is_reused_and_left_open(
        self, web3, pbtc, usdc
    ):
        api_client = AsyncMock(spec=APIClient)
        api_client.get_path_v3.return_value = PathData.model_validate(
            two_path_payload()["data"]
        )
        config = FetchSwapRouteConfig(
            web3=web3, settings=settings(), api_client=api_client
        )

        await fetch_swap_route(swap(pbtc, usdc), config)
        await fetch_swap_route(swap(pbtc, usdc), config)

        assert api_client.get_path_v3.await_count == 2
        api_client.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_owned_api_client_is_closed_on_error(
        self, config, monkeypatch, pbtc, usdc
    ):
        close = AsyncMock()
        monkeypatch.setattr(APIClient, "close", close)

        with respx.mock:
            respx.get(PATH_URL).mock(return_value=httpx.Response(500))
            with pytest.raises(SwapError) as exc_info:
                await fetch_swap_route(swap(pbtc, usdc), config)

        assert exc_info.value.message == "Failed to fetch swap route"
        close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_wrap_needs_no_network(self, config, path_route, btc, pbtc):
        result = await fetch_swap_route(swap(btc, pbtc, amount="1"), config)

        assert result.is_wrap == "wrap"
        assert result.amount_out == 10**18
        assert not path_route.called


class TestBatch:
    @pytest.mark.asyncio
    async def test_failures_are_isolated(self, config, path_route, pbtc, usdc, meme):
        results = await fetch_batch_swap_routes(
            [
                (swap(pbtc, usdc), config),
                (swap(meme, usdc, chain_id=999), config),
                (swap(pbtc, usdc, amount="0"), config),
            ]
        )

        assert [r.success for r in results] == [True, False, False]
        assert results[0].data.amount_out == 123457
        assert results[0].error is None
        assert "999" in results[1].error
        assert results[1].data is None
        assert results[2].error == "Invalid amount provided"

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        assert await fetch_batch_swap_routes([]) == []

    @pytest.mark.asyncio
    async def test_plain_requests_use_default_config(self, monkeypatch, pbtc, usdc):
        seen = []

        async def fake_fetch(request, config=None):
            seen.append(config)
            raise RuntimeError("")

        monkeypatch.setattr("aggregator.service.fetch.fetch_swap_route", fake_fetch)

        (result,) = await fetch_batch_swap_routes([swap(pbtc, usdc)])

        assert seen == [None]
        assert result.success is False
        assert result.error == "Unknown error"


@pytest.mark.asyncio
async def test_get_swap_quote(config, path_route, pbtc, usdc):
    quote = await get_swap_quote(pbtc, usdc, "1.5", MAINNET, config)

    assert quote.amount_out == "123457"
    assert quote.routes == 2
    assert quote.model_dump(by_alias=True) == {"amountOut": "123457", "routes": 2}


@pytest.mark.asyncio
async def test_fetch_swap_route_simple_uses_chain_sources(
    config, path_route, pbtc, usdc
):
    await fetch_swap_route_simple(
        swap(pbtc, usdc, types=[9], enabled_sources=[9]), config
    )

    params = path_route.calls.last.request.url.params
    assert params["typeId"] == '["1","2"]'
    assert params["sourceId"] == '["1"]'
