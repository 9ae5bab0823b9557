"""Lens state documents: venues plus the collaborators' data.

Extends the venue document with what the lens needs besides venue state:

    {
      "blockNumber": 19000000,
      "venues": [...],
      "positions": [{"id": 0, "soldAsset": "0x..", "positionAsset": "0x..",
                     "positionAmount": "100", "debt": "50",
                     "depositAsset": "0x..", "depositAmount": "10"}],
      "oracleRates": [{"assetA": "0x..", "assetB": "0x..", "rate": "2000000000000000000"}],
      "positionManagers": ["0x.."]
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bestdex.lens.collaborators import InMemoryPositionBook, StaticPriceOracle, SupportedAddressSet
from bestdex.models.position import PositionSnapshot
from bestdex.models.types import Address, Uint256
from bestdex.venues.parsing import VenueDocument, build_snapshot
from bestdex.venues.snapshot import VenueSnapshot


class OracleRateData(BaseModel):
    asset_a: Address = Field(alias="assetA")
    asset_b: Address = Field(alias="assetB")
    rate: Uint256 = Field(description="Units of assetB per unit of assetA, WAD")

    model_config = ConfigDict(populate_by_name=True)


class LensDocument(VenueDocument):
    positions: list[PositionSnapshot] = Field(default_factory=list)
    oracle_rates: list[OracleRateData] = Field(default_factory=list, alias="oracleRates")
    position_managers: list[Address] = Field(default_factory=list, alias="positionManagers")


@dataclass(frozen=True)
class LensState:
    """Everything a BestDexLens is built from."""

    snapshot: VenueSnapshot
    gas_overrides: dict[str, int]
    positions: InMemoryPositionBook
    oracle: StaticPriceOracle
    position_managers: SupportedAddressSet


def build_state(document: LensDocument) -> LensState:
    snapshot, gas_overrides = build_snapshot(document)
    return LensState(
        snapshot=snapshot,
        gas_overrides=gas_overrides,
        positions=InMemoryPositionBook(document.positions),
        oracle=StaticPriceOracle({(r.asset_a, r.asset_b): r.rate for r in document.oracle_rates}),
        position_managers=SupportedAddressSet(document.position_managers),
    )


def parse_state(data: dict[str, Any]) -> LensState:
    """Validate a raw lens document.

    Raises:
        pydantic.ValidationError: If the document is malformed
    """
    return build_state(LensDocument.model_validate(data))


def load_state(path: str | Path) -> LensState:
    with open(path) as f:
        return parse_state(json.load(f))


__all__ = ["LensDocument", "LensState", "OracleRateData", "build_state", "load_state", "parse_state"]
