"""Collaborators the lens consumes, with in-memory implementations.

The router never owns oracle prices, position bookkeeping or contract
introspection; it asks these interfaces. The in-memory versions back the
service (loaded from a state document) and the tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

import structlog

from bestdex.constants import WAD
from bestdex.errors import ErrorCode, UnknownPosition, UnsupportedCollaborator
from bestdex.math import wad_div
from bestdex.models.position import PositionSnapshot
from bestdex.models.types import is_zero_address, normalize_address

logger = structlog.get_logger()


@runtime_checkable
class Oracle(Protocol):
    def rate(self, asset_a: str, asset_b: str) -> int:
        """Units of asset_b per unit of asset_a, WAD fixed point.

        Raises UnsupportedCollaborator (NO_ORACLE_RATE) for an unknown pair.
        """
        ...


@runtime_checkable
class PositionBook(Protocol):
    def get(self, position_id: int) -> PositionSnapshot:
        """The open position with this id; raises UnknownPosition otherwise."""
        ...


@runtime_checkable
class AddressCapabilityCheck(Protocol):
    def __call__(self, address: str) -> bool:
        """True when the address implements the expected interface."""
        ...


class StaticPriceOracle:
    """Fixed WAD rates keyed by (asset_a, asset_b).

    A missing direction is derived from the inverse pair; identical assets
    always rate 1.

    Raises:
        UnsupportedCollaborator: NO_ORACLE_RATE from rate() when neither
            direction is known
    """

    def __init__(self, rates: Mapping[tuple[str, str], int] | None = None) -> None:
        self._rates: dict[tuple[str, str], int] = {}
        for (asset_a, asset_b), rate in (rates or {}).items():
            if rate <= 0:
                raise ValueError(f"Oracle rate must be positive: {asset_a}/{asset_b}")
            self._rates[(normalize_address(asset_a), normalize_address(asset_b))] = rate

    def rate(self, asset_a: str, asset_b: str) -> int:
        a = normalize_address(asset_a)
        b = normalize_address(asset_b)
        if a == b:
            return WAD
        if (a, b) in self._rates:
            return self._rates[(a, b)]
        if (b, a) in self._rates:
            return wad_div(WAD, self._rates[(b, a)])
        raise UnsupportedCollaborator(ErrorCode.NO_ORACLE_RATE, f"{asset_a}/{asset_b}")


class InMemoryPositionBook:
    """Positions held in a dict keyed by id."""

    def __init__(self, positions: Iterable[PositionSnapshot] = ()) -> None:
        self._positions = {position.position_id: position for position in positions}

    def get(self, position_id: int) -> PositionSnapshot:
        position = self._positions.get(position_id)
        if position is None:
            raise UnknownPosition(ErrorCode.POSITION_DOES_NOT_EXIST, f"position {position_id}")
        return position

    def __len__(self) -> int:
        return len(self._positions)


class SupportedAddressSet:
    """Capability check backed by an allow-list of addresses.

    The zero address never passes.
    """

    def __init__(self, addresses: Iterable[str] = ()) -> None:
        self._addresses = frozenset(normalize_address(address) for address in addresses)

    def __call__(self, address: str) -> bool:
        if is_zero_address(address):
            return False
        supported = normalize_address(address) in self._addresses
        if not supported:
            logger.debug("address_not_supported", address=address)
        return supported


__all__ = [
    "AddressCapabilityCheck",
    "InMemoryPositionBook",
    "Oracle",
    "PositionBook",
    "StaticPriceOracle",
    "SupportedAddressSet",
]
