"""Product expected value: weighted average across a product's layouts."""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from booster_ev.data.reference_prices import observed_booster_prices
from booster_ev.models.booster import BoosterConfig, Layout, SetDetail
from booster_ev.models.valuation import ProductValuation, SheetValuation
from booster_ev.pricing.resolver import PriceResolver
from booster_ev.valuation.layout import value_layout
from booster_ev.valuation.sheet import value_sheet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductAggregate:
    """Result of aggregating layout EVs for one product type."""

    average_value: float
    total_layout_weight: float
    currency: str


def value_product(
    layouts: list[Layout],
    sheet_values: dict[str, SheetValuation],
) -> ProductAggregate:
    """
    Calculate the layout-weighted average EV of a product.

    When the total layout weight is not positive (no layouts, or all
    weights zero) the EV is the plain sum of all sheet EVs instead.

    Args:
        layouts: Product layouts
        sheet_values: Sheet name -> SheetValuation

    Returns:
        ProductAggregate
    """
    total_layout_weight = sum(layout.effective_weight for layout in layouts)

    aggregated = 0.0
    for layout in layouts:
        aggregated += value_layout(layout, sheet_values) * layout.effective_weight

    if total_layout_weight > 0:
        average_value = aggregated / total_layout_weight
    else:
        average_value = sum(sheet.expected_value for sheet in sheet_values.values())

    currency = next(
        (sheet.currency for sheet in sheet_values.values() if sheet.currency),
        "USD",
    )

    return ProductAggregate(
        average_value=average_value,
        total_layout_weight=total_layout_weight,
        currency=currency,
    )


class ProductValuator:
    """Values every product type of a set against one price snapshot."""

    def __init__(self, resolver: PriceResolver):
        """
        Initialize valuator.

        Args:
            resolver: Price resolver over the current price snapshot
        """
        self.resolver = resolver

    def value_config(
        self,
        set_detail: SetDetail,
        config: BoosterConfig,
        min_price: float = 0.0,
    ) -> ProductValuation:
        """
        Value one product type: all sheets once, then all layouts.

        Args:
            set_detail: Owning set (for sealed product prices)
            config: Booster configuration of the product type
            min_price: Card values below this count as 0

        Returns:
            ProductValuation
        """
        sheet_values = {
            name: value_sheet(sheet, self.resolver.resolve, min_price)
            for name, sheet in config.sheets.items()
        }
        aggregate = value_product(config.layouts, sheet_values)
        booster_prices, sealed_name = observed_booster_prices(
            set_detail, config.product_type, self.resolver.resolve
        )

        return ProductValuation(
            product_type=config.product_type,
            expected_value=aggregate.average_value,
            currency=aggregate.currency,
            layout_count=len(config.layouts),
            total_layout_weight=aggregate.total_layout_weight or None,
            sheet_breakdown=sheet_values,
            booster_prices=booster_prices,
            sealed_product_name=sealed_name,
        )

    def iter_valuations(
        self,
        set_detail: SetDetail,
        min_price: float = 0.0,
    ) -> Iterator[ProductValuation]:
        """Yield one valuation per product type, in document order."""
        for config in set_detail.booster.values():
            yield self.value_config(set_detail, config, min_price)

    def build_valuations(
        self,
        set_detail: Optional[SetDetail],
        min_price: float = 0.0,
    ) -> list[ProductValuation]:
        """
        Build valuations for all product types of a set.

        Args:
            set_detail: Set document (None or no booster data yields [])
            min_price: Card values below this count as 0

        Returns:
            One ProductValuation per product type, in document order
        """
        if set_detail is None or not set_detail.booster:
            return []

        valuations = list(self.iter_valuations(set_detail, min_price))
        logger.info(f"Valued {len(valuations)} product types for {set_detail.code}")
        return valuations
