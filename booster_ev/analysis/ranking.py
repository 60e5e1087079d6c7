"""Cross-set ranking of booster EV against reference prices.

Rows with a positive diff (EV above the reference price) are bargains,
rows with a negative diff are overpriced. Rows without a reference price
have no diff and always sort after every priced row.
"""

import logging
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from booster_ev.data.reference_prices import TrendPriceConfig
from booster_ev.errors import BoosterEVError
from booster_ev.models.booster import SetDetail, SetInfo
from booster_ev.models.valuation import ProductValuation, RankingResult, RankingRow
from booster_ev.valuation.product import ProductValuator

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_TYPES = ("play", "draft", "set")
DEFAULT_TOP_N = 10


def years_before(today: date, years: int) -> date:
    """Same calendar day ``years`` years earlier (Feb 29 maps to Feb 28)."""
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return today.replace(year=today.year - years, day=28)


def filter_recent_sets(
    sets: Iterable[SetInfo],
    years_back: int,
    today: Optional[date] = None,
) -> list[SetInfo]:
    """
    Keep sets released on or after the cutoff date.

    Sets without a release date are dropped.

    Args:
        sets: Candidate sets
        years_back: Window size in years
        today: Reference date (defaults to today)

    Returns:
        Sets inside the window, in input order
    """
    cutoff = years_before(today or date.today(), years_back)
    return [s for s in sets if s.release_date is not None and s.release_date >= cutoff]


def compare_to_reference(
    expected_value: float,
    reference_price: Optional[float],
) -> tuple[Optional[float], Optional[float]]:
    """Return (diff, ratio); diff needs a price, ratio a positive price."""
    if reference_price is None:
        return None, None
    diff = expected_value - reference_price
    ratio = expected_value / reference_price if reference_price > 0 else None
    return diff, ratio


def order_rows(
    rows: list[RankingRow],
    top_n: int = DEFAULT_TOP_N,
) -> tuple[list[RankingRow], list[RankingRow]]:
    """
    Split rows into best bargains and most overpriced.

    Priced rows are ordered by diff (descending for ``top``, ascending for
    ``bottom``); unpriced rows follow in input order in both lists. Ties
    keep input order.

    Args:
        rows: Ranking rows
        top_n: Size of each list

    Returns:
        (top, bottom)
    """
    priced = [r for r in rows if r.diff is not None]
    unpriced = [r for r in rows if r.diff is None]

    descending = sorted(priced, key=lambda r: r.diff, reverse=True)
    ascending = sorted(priced, key=lambda r: r.diff)

    top = (descending + unpriced)[:top_n]
    bottom = (ascending + unpriced)[:top_n]
    return top, bottom


class RankingEngine:
    """Ranks product EVs of many sets against reference prices."""

    def __init__(
        self,
        load_set: Callable[[str], SetDetail],
        valuator: ProductValuator,
        trend_prices: Optional[TrendPriceConfig] = None,
        top_n: int = DEFAULT_TOP_N,
    ):
        """
        Initialize ranking engine.

        Args:
            load_set: Set code -> SetDetail (may raise DataUnavailableError)
            valuator: Product valuator over the current price snapshot
            trend_prices: Curated fallback reference prices
            top_n: Size of the top and bottom lists
        """
        self.load_set = load_set
        self.valuator = valuator
        self.trend_prices = trend_prices or TrendPriceConfig()
        self.top_n = top_n

    def reference_price(
        self,
        set_code: str,
        valuation: ProductValuation,
    ) -> tuple[Optional[float], Optional[str]]:
        """Observed market price, else trend price, else None."""
        observed = valuation.observed_price
        if observed is not None:
            return observed, "observed"

        trend = self.trend_prices.trend_price(set_code, valuation.product_type)
        if trend is not None:
            return trend, "trend"

        return None, None

    def build_row(self, set_info: SetInfo, valuation: ProductValuation) -> RankingRow:
        reference, source = self.reference_price(set_info.code, valuation)
        diff, ratio = compare_to_reference(valuation.expected_value, reference)

        return RankingRow(
            code=set_info.code,
            name=set_info.name,
            release_date=set_info.release_date,
            product_type=valuation.product_type,
            currency=valuation.currency,
            expected_value=valuation.expected_value,
            reference_price=reference,
            reference_source=source,
            diff=diff,
            ratio=ratio,
        )

    def rows_for_set(
        self,
        set_info: SetInfo,
        min_price: float = 0.0,
        types_to_include: Iterable[str] = DEFAULT_PRODUCT_TYPES,
    ) -> list[RankingRow]:
        """
        Value one set and build a row per included product type.

        Failures to load or value the set are logged and yield no rows.

        Args:
            set_info: Set list entry
            min_price: Card values below this count as 0
            types_to_include: Product types to rank, in order

        Returns:
            Ranking rows for product types the set actually has
        """
        try:
            set_detail = self.load_set(set_info.code)
            valuations = self.valuator.build_valuations(set_detail, min_price)
        except (BoosterEVError, ValueError, TypeError) as e:
            logger.warning(f"Failed to compute ranking for set {set_info.code}: {e}")
            return []

        by_type = {v.product_type: v for v in valuations}
        rows = []
        for product_type in types_to_include:
            valuation = by_type.get(product_type)
            if valuation is None:
                continue
            rows.append(self.build_row(set_info, valuation))
        return rows

    def finalize(
        self,
        rows: list[RankingRow],
        years_back: int,
        min_price: float,
    ) -> RankingResult:
        top, bottom = order_rows(rows, self.top_n)
        return RankingResult(
            top=top,
            bottom=bottom,
            rows=rows,
            years_back=years_back,
            min_price=min_price,
            generated_at=datetime.now(),
        )

    def rank(
        self,
        candidates: Iterable[SetInfo],
        years_back: int = 4,
        min_price: float = 0.0,
        types_to_include: Iterable[str] = DEFAULT_PRODUCT_TYPES,
        today: Optional[date] = None,
    ) -> RankingResult:
        """
        Rank recent sets' products by EV minus reference price.

        Args:
            candidates: Set list
            years_back: Only sets released within this many years
            min_price: Card values below this count as 0
            types_to_include: Product types to rank
            today: Reference date for the window (defaults to today)

        Returns:
            RankingResult with top (bargains) and bottom (overpriced)
        """
        types_to_include = tuple(types_to_include)
        recent = filter_recent_sets(candidates, years_back, today)
        logger.info(f"Ranking {len(recent)} sets released in the last {years_back} years")

        rows: list[RankingRow] = []
        for set_info in recent:
            rows.extend(self.rows_for_set(set_info, min_price, types_to_include))

        result = self.finalize(rows, years_back, min_price)
        logger.info(
            f"Ranked {len(rows)} products "
            f"({sum(1 for r in rows if r.diff is not None)} with a reference price)"
        )
        return result
