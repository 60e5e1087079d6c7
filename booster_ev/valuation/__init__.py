"""Expected value aggregation: sheet -> layout -> product."""

from booster_ev.valuation.layout import value_layout
from booster_ev.valuation.product import ProductAggregate, ProductValuator, value_product
from booster_ev.valuation.sheet import apply_min_price, value_sheet

__all__ = [
    "value_sheet",
    "apply_min_price",
    "value_layout",
    "value_product",
    "ProductAggregate",
    "ProductValuator",
]
