"""Command line quote tool."""

import argparse
import asyncio
import json
import logging
import sys

import structlog

from ..config.networks import BOTANIX_MAINNET
from ..config.settings import AggregatorSettings, load_settings
from ..core.errors import SwapError
from ..core.types import SwapRequest, Token
from ..service.fetch import (
    FetchSwapRouteConfig,
    fetch_swap_route,
    fetch_swap_route_simple,
)

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch a split swap route")
    parser.add_argument("--src", required=True, help="Source token address")
    parser.add_argument("--dst", required=True, help="Destination token address")
    parser.add_argument("--amount", required=True, help="Input amount, e.g. 1.5")
    parser.add_argument("--chain-id", type=int, default=BOTANIX_MAINNET)
    parser.add_argument("--src-decimals", type=int, default=18)
    parser.add_argument("--dst-decimals", type=int, default=18)
    parser.add_argument("--part-count", type=int, default=None)
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument(
        "--simple",
        action="store_true",
        help="Use the chain's default liquidity sources",
    )
    return parser


def build_request(args: argparse.Namespace) -> SwapRequest:
    return SwapRequest(
        amount_in=args.amount,
        src_token=Token(
            address=args.src, decimals=args.src_decimals, chain_id=args.chain_id
        ),
        dst_token=Token(
            address=args.dst, decimals=args.dst_decimals, chain_id=args.chain_id
        ),
        chain_id=args.chain_id,
        force_part_count=args.part_count,
    )


async def main(argv: list[str] | None = None) -> int:
    """Main entry point for the quote tool."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config) if args.config else AggregatorSettings()
        request = build_request(args)
        config = FetchSwapRouteConfig(settings=settings)
        fetch = fetch_swap_route_simple if args.simple else fetch_swap_route
        result = await fetch(request, config)
    except SwapError as e:
        logger.error("Route fetch failed", code=e.code.value, error=e.message)
        print(json.dumps({"error": e.message, "code": e.code.value}))
        return 1
    except Exception as e:
        logger.error("Fatal error", error=str(e))
        return 1

    print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
    return 0


def configure_logging(level: int = logging.INFO) -> None:
    """Send log output to stderr; stdout carries only the JSON result."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def run() -> None:
    configure_logging()
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
