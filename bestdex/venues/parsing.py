"""Parsing of venue state documents into snapshot objects.

A venue document lists venues, each with a kind and its pools:

    {
      "blockNumber": 19000000,
      "venues": [
        {"id": "uniswap", "kind": "constant_product", "gasUnits": 60000,
         "pools": [{"kind": "constant_product", "token0": "0x..", "token1": "0x..",
                    "reserve0": "1000", "reserve1": "2000"}]}
      ]
    }

Pydantic validates the raw JSON; builders turn it into frozen pool objects.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from bestdex.models.types import Address, Bytes32, Uint256
from bestdex.venues.aggregator import AggregatedPool, AggregatorSource
from bestdex.venues.base import VenueKind
from bestdex.venues.concentrated import ConcentratedLiquidityPool
from bestdex.venues.constant_product import ConstantProductPool
from bestdex.venues.snapshot import VenueEntry, VenueSnapshot
from bestdex.venues.stable_swap import StableSwapPool
from bestdex.venues.weighted import WeightedPool

logger = structlog.get_logger()

_CONFIG = ConfigDict(populate_by_name=True)


class ConstantProductPoolData(BaseModel):
    kind: Literal["constant_product"] = "constant_product"
    token0: Address
    token1: Address
    reserve0: Uint256
    reserve1: Uint256
    fee_bps: int = Field(default=30, alias="feeBps", ge=0, lt=10_000)
    selector: Bytes32 | None = None

    model_config = _CONFIG

    def build(self) -> ConstantProductPool:
        return ConstantProductPool(
            token0=self.token0,
            token1=self.token1,
            reserve0=self.reserve0,
            reserve1=self.reserve1,
            fee_bps=self.fee_bps,
        )


class ConcentratedPoolData(BaseModel):
    kind: Literal["concentrated_liquidity"] = "concentrated_liquidity"
    token0: Address
    token1: Address
    fee: int = Field(ge=0, lt=1_000_000)
    liquidity: Uint256
    sqrt_price_x96: Uint256 = Field(alias="sqrtPriceX96")
    sqrt_price_lower_x96: Uint256 = Field(alias="sqrtPriceLowerX96")
    sqrt_price_upper_x96: Uint256 = Field(alias="sqrtPriceUpperX96")
    selector: Bytes32 | None = None

    model_config = _CONFIG

    @model_validator(mode="after")
    def _check_range(self) -> ConcentratedPoolData:
        if not self.sqrt_price_lower_x96 <= self.sqrt_price_x96 <= self.sqrt_price_upper_x96:
            raise ValueError("sqrtPriceX96 must lie within the active range")
        return self

    def build(self) -> ConcentratedLiquidityPool:
        return ConcentratedLiquidityPool(
            token0=self.token0,
            token1=self.token1,
            fee=self.fee,
            liquidity=self.liquidity,
            sqrt_price_x96=self.sqrt_price_x96,
            sqrt_price_lower_x96=self.sqrt_price_lower_x96,
            sqrt_price_upper_x96=self.sqrt_price_upper_x96,
        )


class _MultiTokenPoolData(BaseModel):
    tokens: list[Address] = Field(min_length=2)
    balances: list[Uint256]
    fee: Uint256 = 0
    scaling_factors: list[int] = Field(default_factory=list, alias="scalingFactors")
    selector: Bytes32 | None = None

    model_config = _CONFIG

    @model_validator(mode="after")
    def _check_lengths(self) -> Any:
        if len(self.balances) != len(self.tokens):
            raise ValueError("balances must align with tokens")
        if self.scaling_factors and len(self.scaling_factors) != len(self.tokens):
            raise ValueError("scalingFactors must align with tokens")
        return self


class StablePoolData(_MultiTokenPoolData):
    kind: Literal["stable_swap"] = "stable_swap"
    amp: int = Field(gt=0, description="Amplification parameter times AMP_PRECISION")

    def build(self) -> StableSwapPool:
        return StableSwapPool(
            tokens=tuple(self.tokens),
            balances=tuple(self.balances),
            amp=self.amp,
            fee=self.fee,
            scaling_factors=tuple(self.scaling_factors),
        )


class WeightedPoolData(_MultiTokenPoolData):
    kind: Literal["weighted_pool"] = "weighted_pool"
    weights: list[Uint256]

    @model_validator(mode="after")
    def _check_weights(self) -> WeightedPoolData:
        if len(self.weights) != len(self.tokens) or any(w == 0 for w in self.weights):
            raise ValueError("weights must be positive and align with tokens")
        return self

    def build(self) -> WeightedPool:
        return WeightedPool(
            tokens=tuple(self.tokens),
            balances=tuple(self.balances),
            weights=tuple(self.weights),
            fee=self.fee,
            scaling_factors=tuple(self.scaling_factors),
        )


SourcePoolData = Annotated[
    ConstantProductPoolData | ConcentratedPoolData | StablePoolData | WeightedPoolData,
    Field(discriminator="kind"),
]


class AggregatorPoolData(BaseModel):
    kind: Literal["aggregator"] = "aggregator"
    sources: list[SourcePoolData] = Field(min_length=1)
    selector: Bytes32 | None = None

    model_config = _CONFIG

    def build(self) -> AggregatedPool:
        return AggregatedPool(
            sources=tuple(
                AggregatorSource(kind=VenueKind(source.kind), pool=source.build())
                for source in self.sources
            )
        )


PoolData = Annotated[
    ConstantProductPoolData
    | ConcentratedPoolData
    | StablePoolData
    | WeightedPoolData
    | AggregatorPoolData,
    Field(discriminator="kind"),
]


class VenueData(BaseModel):
    venue_id: str = Field(alias="id", min_length=1)
    kind: VenueKind
    gas_units: int | None = Field(default=None, alias="gasUnits", ge=0)
    pools: list[PoolData] = Field(default_factory=list)

    model_config = _CONFIG

    @model_validator(mode="after")
    def _check_pool_kinds(self) -> VenueData:
        for pool in self.pools:
            if pool.kind != self.kind.value:
                raise ValueError(f"Venue {self.venue_id} is {self.kind.value} but has a {pool.kind} pool")
        return self

    def build(self) -> VenueEntry:
        selectors = {
            pool.selector: index for index, pool in enumerate(self.pools) if pool.selector is not None
        }
        return VenueEntry(
            venue_id=self.venue_id,
            kind=self.kind,
            pools=tuple(pool.build() for pool in self.pools),
            selectors=selectors,
        )


class VenueDocument(BaseModel):
    block_number: int | None = Field(default=None, alias="blockNumber", ge=0)
    venues: list[VenueData] = Field(default_factory=list)

    model_config = _CONFIG


def build_snapshot(document: VenueDocument) -> tuple[VenueSnapshot, dict[str, int]]:
    """Build a snapshot and the explicit per-venue gas overrides.

    Returns:
        (snapshot, gas_overrides) where gas_overrides only lists venues whose
        document carried gasUnits
    """
    snapshot = VenueSnapshot(
        (venue.build() for venue in document.venues), block_number=document.block_number
    )
    gas_overrides = {
        venue.venue_id: venue.gas_units for venue in document.venues if venue.gas_units is not None
    }
    logger.info(
        "snapshot_loaded",
        block_number=document.block_number,
        venue_count=len(snapshot),
        pool_count=sum(len(venue.pools) for venue in document.venues),
    )
    return snapshot, gas_overrides


def parse_snapshot(data: dict[str, Any]) -> tuple[VenueSnapshot, dict[str, int]]:
    """Validate a raw venue document and build its snapshot.

    Raises:
        pydantic.ValidationError: If the document is malformed
    """
    return build_snapshot(VenueDocument.model_validate(data))


__all__ = ["VenueDocument", "build_snapshot", "parse_snapshot"]
