"""Turn candidate paths and split weights into execution routes."""

from decimal import Decimal, InvalidOperation

from ..config.networks import (
    DEX_INTERFACE,
    FEE_BASE,
    PART_SCALE,
    ROUTER_TARGET,
    UNKNOWN_ROUTER,
    USER_TARGET,
    ZERO_ADDRESS,
)
from ..core.types import PathHop, RouteHop


def amount_after_fee(fee: str | int | float | None) -> str:
    """``10000 - fee / 100`` as an exact decimal string.

    >>> amount_after_fee(3000)
    '9970'
    >>> amount_after_fee(50)
    '9999.5'
    """
    try:
        fee_value = Decimal(str(fee)) if fee not in (None, "") else Decimal(0)
    except InvalidOperation:
        fee_value = Decimal(0)
    value = Decimal(FEE_BASE) - fee_value / Decimal(100)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def resolve_router(source: str, protocol: str, dex_routers: dict[str, str]) -> str:
    return dex_routers.get(f"{source}_{protocol}", UNKNOWN_ROUTER)


def build_route(
    path: list[PathHop], wrapped_address: str, dex_routers: dict[str, str]
) -> list[RouteHop]:
    """Hop descriptors for one candidate path.

    Input is pulled from the user only on a first V2 hop that does not start
    from the wrapped native token; output goes to the user only on the last
    hop when it does not end in the wrapped native token.
    """
    wrapped = wrapped_address.lower()
    last = len(path) - 1
    route = []
    for i, hop in enumerate(path):
        from_router = i > 0 or hop.type == "V3" or hop.src.lower() == wrapped
        to_router = i < last or hop.dest.lower() == wrapped
        route.append(
            RouteHop(
                router_address=resolve_router(hop.source, hop.type, dex_routers),
                lp_address=hop.pool or ZERO_ADDRESS,
                from_token=hop.src,
                to_token=hop.dest,
                from_=ROUTER_TARGET if from_router else USER_TARGET,
                to=ROUTER_TARGET if to_router else USER_TARGET,
                part=PART_SCALE,
                amount_after_fee=amount_after_fee(hop.fee),
                dex_interface=DEX_INTERFACE.get(hop.type, 0),
            )
        )
    return route


def build_routes(
    valid_path: list[list[PathHop]],
    distribution: list[int],
    wrapped_address: str,
    dex_routers: dict[str, str],
) -> tuple[list[list[RouteHop]], list[int]]:
    """Routes and weights for every path with a positive weight.

    ``distribution[k]`` belongs to ``valid_path[k]``; both outputs are
    filtered together so they stay aligned.
    """
    routes = []
    weights = []
    for k, path in enumerate(valid_path):
        weight = distribution[k] if k < len(distribution) else 0
        if weight > 0:
            routes.append(build_route(path, wrapped_address, dex_routers))
            weights.append(weight)
    return routes, weights


def allocate(total: int, distributions: list[int], part_count: int) -> list[int]:
    """``floor(total * d / part_count)`` per path; the remainder is dropped."""
    return [total * d // part_count for d in distributions]
