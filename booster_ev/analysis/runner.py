"""Cooperative bulk computation with stale-result protection.

Large computations are split into batches that yield to the event loop
between batches. Rankings and set valuations each keep their own generation
counter, and every refresh takes the next number of its kind. A run whose
generation is no longer current stops at its next checkpoint and
publishes nothing, so a slow run can never overwrite a newer result.
"""

import asyncio
import logging
from typing import Iterable, Iterator, Optional, TypeVar

from booster_ev.analysis.ranking import filter_recent_sets
from booster_ev.analysis.service import ValuationService
from booster_ev.errors import DataUnavailableError
from booster_ev.models.valuation import ProductValuation, RankingResult, RankingRow

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunked(items: Iterable[T], size: int) -> Iterator[list[T]]:
    """Split items into lists of at most ``size`` elements."""
    size = max(1, size)
    batch: list[T] = []
    for item in items:
        batch.append(item)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


RANKING = "ranking"
VALUATION = "valuation"


class ValuationRunner:
    """Runs rankings and set valuations in yielding batches."""

    def __init__(self, service: ValuationService, batch_size: Optional[int] = None):
        """
        Initialize runner.

        Args:
            service: Valuation service providing data and engines
            batch_size: Sets per batch between yields (config default)
        """
        self.service = service
        self.batch_size = batch_size or service.config.batch_size
        self._generations = {RANKING: 0, VALUATION: 0}

        # Published results (only ever written by the current generation of their kind)
        self.ranking: Optional[RankingResult] = None
        self.ranking_error: str = ""
        self.valuations: list[ProductValuation] = []
        self.valuation_error: str = ""

    def generation(self, kind: str) -> int:
        return self._generations[kind]

    def _next_generation(self, kind: str) -> int:
        self._generations[kind] += 1
        return self._generations[kind]

    def is_current(self, kind: str, generation: int) -> bool:
        return generation == self._generations[kind]

    def invalidate(self, kind: Optional[str] = None) -> None:
        """Abandon the in-flight run of one kind, or of every kind if None."""
        for name in [kind] if kind else list(self._generations):
            self._next_generation(name)

    async def _checkpoint(self, kind: str, generation: int, label: str) -> bool:
        """Yield to the event loop; report whether the run is still current."""
        await asyncio.sleep(0)
        if self.is_current(kind, generation):
            return True
        logger.info(f"Abandoning stale {label} run (generation {generation})")
        return False

    async def refresh_ranking(
        self,
        years_back: Optional[int] = None,
        min_price: Optional[float] = None,
        types_to_include: Optional[Iterable[str]] = None,
    ) -> Optional[RankingResult]:
        """
        Recompute the booster ranking and publish it to ``self.ranking``.

        Args:
            years_back: Window in years (config default)
            min_price: Card values below this count as 0 (config default)
            types_to_include: Product types to rank (config default)

        Returns:
            The published result, or None if a newer ranking refresh superseded this one
        """
        generation = self._next_generation(RANKING)
        config = self.service.config
        years_back = config.years_back if years_back is None else years_back
        min_price = config.min_price if min_price is None else min_price
        types = tuple(types_to_include or config.product_types)

        try:
            candidates = self.service.load_set_list()
            engine = self.service.ranking_engine()
        except DataUnavailableError as e:
            logger.error(f"Cannot compute booster ranking: {e}")
            if self.is_current(RANKING, generation):
                self.ranking_error = str(e)
                self.ranking = RankingResult(years_back=years_back, min_price=min_price)
            return None

        recent = filter_recent_sets(candidates, years_back)
        rows: list[RankingRow] = []

        for batch in chunked(recent, self.batch_size):
            if not self.is_current(RANKING, generation):
                return None
            for set_info in batch:
                rows.extend(engine.rows_for_set(set_info, min_price, types))
            if not await self._checkpoint(RANKING, generation, "ranking"):
                return None

        result = engine.finalize(rows, years_back, min_price)
        if not self.is_current(RANKING, generation):
            return None

        self.ranking_error = ""
        self.ranking = result
        return result

    async def refresh_valuations(
        self,
        code: str,
        min_price: Optional[float] = None,
    ) -> Optional[list[ProductValuation]]:
        """
        Recompute valuations of one set, yielding between product types.

        Args:
            code: Set code
            min_price: Card values below this count as 0 (config default)

        Returns:
            Published valuations (highest EV first), or None if a newer
            valuation refresh superseded this one
        """
        generation = self._next_generation(VALUATION)
        min_price = self.service.config.min_price if min_price is None else min_price

        try:
            set_detail = self.service.load_set(code)
            valuator = self.service.valuator()
        except DataUnavailableError as e:
            logger.error(f"Cannot value {code}: {e}")
            if self.is_current(VALUATION, generation):
                self.valuation_error = str(e)
                self.valuations = []
            return None

        valuations: list[ProductValuation] = []
        for valuation in valuator.iter_valuations(set_detail, min_price):
            valuations.append(valuation)
            if not await self._checkpoint(VALUATION, generation, f"{code} valuation"):
                return None

        valuations.sort(key=lambda v: v.expected_value, reverse=True)
        if not self.is_current(VALUATION, generation):
            return None

        self.valuation_error = ""
        self.valuations = valuations
        return valuations
