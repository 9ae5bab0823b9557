"""Aggregator venue math.

An aggregator quotes the whole requested amount through the best of its
underlying sources, the way an off-chain aggregator API answers a quote
request. Sources are pools of the other venue kinds.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from bestdex.venues.base import InsufficientLiquidity, PoolCalculator, VenueKind, VenueMathError

logger = structlog.get_logger()


@dataclass(frozen=True)
class AggregatorSource:
    kind: VenueKind
    pool: Any


@dataclass(frozen=True)
class AggregatedPool:
    """The set of sources an aggregator can split over."""

    sources: tuple[AggregatorSource, ...]

    @property
    def tokens(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for source in self.sources:
            for token in source.pool.tokens:
                seen.setdefault(token.lower(), None)
        return tuple(seen)


class AggregatorMath:
    """Best-source quoting over an AggregatedPool.

    Args:
        calculators: Curve math per underlying venue kind. Aggregators are
            not allowed as sources of other aggregators.
    """

    def __init__(self, calculators: Mapping[VenueKind, PoolCalculator]) -> None:
        self._calculators = {
            kind: calc for kind, calc in calculators.items() if kind != VenueKind.AGGREGATOR
        }

    def _source_quotes(
        self, pool: AggregatedPool, token_in: str, token_out: str, amount: int, exact_in: bool
    ) -> list[int]:
        quotes = []
        for source in pool.sources:
            calculator = self._calculators.get(source.kind)
            if calculator is None:
                logger.debug("aggregator_source_unsupported", kind=source.kind.value)
                continue
            try:
                if exact_in:
                    quotes.append(calculator.amount_out(source.pool, token_in, token_out, amount))
                else:
                    quotes.append(calculator.amount_in(source.pool, token_in, token_out, amount))
            except VenueMathError:
                continue
        return quotes

    def amount_out(self, pool: AggregatedPool, token_in: str, token_out: str, amount_in: int) -> int:
        quotes = self._source_quotes(pool, token_in, token_out, amount_in, exact_in=True)
        if not quotes:
            raise InsufficientLiquidity("No aggregator source can fill this input")
        return max(quotes)

    def amount_in(self, pool: AggregatedPool, token_in: str, token_out: str, amount_out: int) -> int:
        quotes = self._source_quotes(pool, token_in, token_out, amount_out, exact_in=False)
        if not quotes:
            raise InsufficientLiquidity("No aggregator source can fill this output")
        return min(quotes)
