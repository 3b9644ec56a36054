"""Error taxonomy for route aggregation."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    INVALID_TOKENS = "INVALID_TOKENS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    NETWORK_NOT_SUPPORTED = "NETWORK_NOT_SUPPORTED"
    API_ERROR = "API_ERROR"
    # Reserved; no-liquidity outcomes are reported through is_amount_out_error.
    INSUFFICIENT_LIQUIDITY = "INSUFFICIENT_LIQUIDITY"


class SwapError(Exception):
    """Raised for taxonomy errors.

    Args:
        message: Human readable message
        code: Error code
        details: Extra context (endpoint, chain id, original error, ...)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"SwapError(code={self.code.value!r}, message={self.message!r})"
