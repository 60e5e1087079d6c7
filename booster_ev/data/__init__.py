"""Data loading and caching modules."""

from booster_ev.data.cache import ValuationCache
from booster_ev.data.identifiers import IdentifierIndex
from booster_ev.data.loader import MtgJsonLoader
from booster_ev.data.reference_prices import TrendPriceConfig, observed_booster_prices

__all__ = [
    "ValuationCache",
    "IdentifierIndex",
    "MtgJsonLoader",
    "TrendPriceConfig",
    "observed_booster_prices",
]
