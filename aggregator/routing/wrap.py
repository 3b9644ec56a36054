"""Native asset wrap/unwrap detection."""

from typing import Literal

from ..config.networks import FEE_BASE, PART_SCALE, ZERO_ADDRESS
from ..core.amounts import is_native_token, is_wrapped_token
from ..core.types import RouteHop, SwapResult, Token

WrapKind = Literal["wrap", "unwrap"]


def detect_wrap(
    src_token: Token,
    dst_token: Token,
    native_address: str,
    wrapped_address: str,
) -> WrapKind | None:
    """Return "wrap" for native -> wrapped, "unwrap" for the reverse."""
    if is_native_token(src_token, native_address) and is_wrapped_token(
        dst_token, wrapped_address
    ):
        return "wrap"
    if is_wrapped_token(src_token, wrapped_address) and is_native_token(
        dst_token, native_address
    ):
        return "unwrap"
    return None


def build_wrap_result(
    kind: WrapKind,
    src_token: Token,
    dst_token: Token,
    amount_in: int,
    router_address: str,
    part_count: int,
) -> SwapResult:
    """Single-hop 1:1 result through the router, no fee."""
    hop = RouteHop(
        router_address=router_address,
        lp_address=ZERO_ADDRESS,
        from_token=src_token.address,
        to_token=dst_token.address,
        from_=src_token.address,
        to=dst_token.address,
        part=PART_SCALE,
        amount_after_fee=str(FEE_BASE),
        dex_interface=0,
    )
    return SwapResult(
        routes=[[hop]],
        distributions=[part_count],
        amount_out_routes=[amount_in],
        amount_out=amount_in,
        amount_in_parts=[amount_in],
        is_amount_out_error=False,
        is_wrap=kind,
    )
