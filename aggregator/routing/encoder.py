"""ABI encoding of candidate routes and the split query call."""

from eth_abi import decode, encode
from web3 import Web3

from ..core.types import EncodedHop, SplitRoute

# splitQuery(uint256 amountIn, bytes routes, uint256 partCount)
#   returns (bool, (uint256 amountOut, uint256[] distribution))
SPLIT_QUERY_SIGNATURE = "splitQuery(uint256,bytes,uint256)"
SPLIT_QUERY_SELECTOR = bytes(Web3.keccak(text=SPLIT_QUERY_SIGNATURE)[:4])

ROUTES_TYPE = "(address,address,uint8,uint8,bytes)[][]"
SPLIT_QUERY_RETURN_TYPES = ["bool", "(uint256,uint256[])"]


def _hex_to_bytes(value: str) -> bytes:
    raw = value[2:] if value.startswith(("0x", "0X")) else value
    return bytes.fromhex(raw)


def encode_routes(hops: list[list[EncodedHop]]) -> bytes:
    """Encode hops as ``(src, dest, typeId, sourceId, path)[][]``."""
    value = [
        [
            (
                hop.src.lower(),
                hop.dest.lower(),
                hop.type_id,
                hop.source_id,
                _hex_to_bytes(hop.path),
            )
            for hop in route
        ]
        for route in hops
    ]
    return encode([ROUTES_TYPE], [value])


def encode_split_query(amount_in: int, encoded_routes: bytes, part_count: int) -> bytes:
    """Calldata for ``splitQuery``."""
    args = encode(
        ["uint256", "bytes", "uint256"], [amount_in, encoded_routes, part_count]
    )
    return SPLIT_QUERY_SELECTOR + args


def decode_split_query(data: bytes) -> SplitRoute:
    """Decode the second return value (the split route)."""
    _, split_route = decode(SPLIT_QUERY_RETURN_TYPES, bytes(data))
    amount_out, distribution = split_route
    return SplitRoute(
        amount_out=int(amount_out), distribution=[int(d) for d in distribution]
    )
