"""Card price resolution."""

from booster_ev.pricing.resolver import PriceResolver, latest_value, pick_latest_price

__all__ = [
    "PriceResolver",
    "latest_value",
    "pick_latest_price",
]
