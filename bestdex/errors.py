"""Router error taxonomy.

Every failure is detected before any quoting happens and aborts the whole
call; there is no partial result. Each error carries an ErrorCode whose value
is the protocol error name callers match on.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Protocol error names."""

    ZERO_ASSET_ADDRESS = "ZERO_ASSET_ADDRESS"
    ASSETS_SHOULD_BE_DIFFERENT = "ASSETS_SHOULD_BE_DIFFERENT"
    ZERO_SHARES = "ZERO_SHARES"
    SHARES_AMOUNT_IS_GREATER_THAN_AMOUNT_TO_SELL = "SHARES_AMOUNT_IS_GREATER_THAN_AMOUNT_TO_SELL"
    SHARES_LIMIT_EXCEEDED = "SHARES_LIMIT_EXCEEDED"
    DIFFERENT_DATA_LENGTH = "DIFFERENT_DATA_LENGTH"
    ADDRESS_NOT_SUPPORTED = "ADDRESS_NOT_SUPPORTED"
    DEPOSITED_AMOUNT_IS_0 = "DEPOSITED_AMOUNT_IS_0"
    EMPTY_VENUES = "EMPTY_VENUES"
    NO_ROUTE_FOUND = "NO_ROUTE_FOUND"
    POSITION_DOES_NOT_EXIST = "POSITION_DOES_NOT_EXIST"
    NO_ORACLE_RATE = "NO_ORACLE_RATE"


class RouterError(Exception):
    """Base error for router and lens operations."""

    def __init__(self, code: ErrorCode, detail: str | None = None) -> None:
        self.code = code
        self.detail = detail
        message = code.value if detail is None else f"{code.value}: {detail}"
        super().__init__(message)


class InvalidAsset(RouterError):
    """Zero asset address, or equal buy/sell assets."""

    pass


class InvalidShareCount(RouterError):
    """Share count is zero, exceeds the amount, or exceeds the configured limit."""

    pass


class DataShapeMismatch(RouterError):
    """Parallel input arrays have different lengths."""

    pass


class UnsupportedCollaborator(RouterError):
    """A collaborator cannot serve the request (unsupported address, unknown oracle pair)."""

    pass


class InvalidAmount(RouterError):
    """A required amount (or venue list) is empty."""

    pass


class RouteNotFound(RouterError):
    """No venue could quote an increment of the swap."""

    pass


class UnknownPosition(RouterError):
    """The position book has no position with the requested id."""

    pass


__all__ = [
    "ErrorCode",
    "RouterError",
    "InvalidAsset",
    "InvalidShareCount",
    "DataShapeMismatch",
    "UnsupportedCollaborator",
    "InvalidAmount",
    "RouteNotFound",
    "UnknownPosition",
]
