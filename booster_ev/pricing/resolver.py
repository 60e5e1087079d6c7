"""Price disambiguation across mediums, vendors, finishes and dates."""

import logging
from typing import Optional

from booster_ev.models.price import (
    MEDIUMS,
    VENDOR_PRIORITY,
    FinishPreference,
    Quote,
    Unconstrained,
)

logger = logging.getLogger(__name__)


def latest_value(series: Optional[dict]) -> Optional[tuple[str, float]]:
    """
    Find the most recent value in a date -> price series.

    Dates are ISO strings, so the lexicographically greatest date is the
    latest. Null values are ignored.

    Args:
        series: Mapping of date string to price

    Returns:
        (date, value) tuple or None if the series has no values
    """
    if not series:
        return None

    latest_date = ""
    latest = None
    for date, value in series.items():
        if value is None:
            continue
        if date > latest_date:
            latest_date = date
            latest = value

    if latest is None:
        return None
    return latest_date, float(latest)


def pick_latest_price(
    price_entry: Optional[dict],
    preference: Optional[FinishPreference] = None,
) -> Optional[Quote]:
    """
    Pick a single quote from a card's multi-vendor price entry.

    Scan order is medium (paper, mtgo), then vendor priority, then the
    preference's finishes. The first combination with a value wins.

    Args:
        price_entry: medium -> vendor -> {retail, buylist, currency}
        preference: Finish preference (defaults to Unconstrained)

    Returns:
        Quote or None if no eligible price exists
    """
    if not price_entry:
        return None

    finishes = (preference or Unconstrained()).finishes()

    for medium in MEDIUMS:
        medium_node = price_entry.get(medium)
        if not medium_node:
            continue

        for vendor in VENDOR_PRIORITY:
            vendor_node = medium_node.get(vendor)
            if not vendor_node:
                continue

            retail = vendor_node.get("retail")
            pools = retail if retail is not None else vendor_node.get("buylist")
            if not pools:
                continue

            for finish in finishes:
                latest = latest_value(pools.get(finish))
                if latest is None:
                    continue
                date, value = latest
                return Quote(
                    value=value,
                    date=date,
                    vendor=vendor,
                    finish=finish,
                    source="retail" if retail is not None else "buylist",
                    currency=vendor_node.get("currency") or "USD",
                    medium=medium,
                )

    return None


class PriceResolver:
    """Resolves card prices from a fixed price snapshot, memoizing lookups."""

    def __init__(self, price_index: dict[str, dict]):
        """
        Initialize resolver.

        Args:
            price_index: uuid -> PriceEntry mapping (treated as read-only)
        """
        self.price_index = price_index
        self._memo: dict[tuple[str, FinishPreference], Optional[Quote]] = {}

    def resolve(
        self,
        card_id: str,
        preference: Optional[FinishPreference] = None,
    ) -> Optional[Quote]:
        """
        Resolve one card's price for a finish preference.

        Args:
            card_id: Card (or sealed product) uuid
            preference: Finish preference (defaults to Unconstrained)

        Returns:
            Quote or None when no eligible price exists
        """
        preference = preference or Unconstrained()
        key = (card_id, preference)
        if key in self._memo:
            return self._memo[key]

        quote = pick_latest_price(self.price_index.get(card_id), preference)
        self._memo[key] = quote
        return quote

    __call__ = resolve

    def __len__(self) -> int:
        return len(self.price_index)
