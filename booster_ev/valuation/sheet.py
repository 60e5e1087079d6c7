"""Sheet expected value: one draw from a weighted card pool."""

import logging
from typing import Callable, Optional

from booster_ev.models.booster import Sheet
from booster_ev.models.price import FinishPreference, ForceFoil, ForceNonFoil, Quote
from booster_ev.models.valuation import SheetValuation

logger = logging.getLogger(__name__)

Resolve = Callable[[str, FinishPreference], Optional[Quote]]


def apply_min_price(value: float, min_price: float) -> float:
    """Floor values below the threshold to 0 (the threshold itself is kept)."""
    return value if value >= min_price else 0.0


def value_sheet(sheet: Sheet, resolve: Resolve, min_price: float = 0.0) -> SheetValuation:
    """
    Calculate the expected value of one draw from a sheet.

    EV = sum(card_value * card_weight / total_weight). Foil sheets are
    priced with foil quotes only, other sheets never fall back to foil.

    Args:
        sheet: Sheet to value
        resolve: Price lookup (uuid, preference) -> Quote or None
        min_price: Card values below this count as 0

    Returns:
        SheetValuation
    """
    total_weight = sheet.effective_total_weight

    if total_weight <= 0:
        if sheet.cards:
            logger.debug(
                f"Sheet {sheet.name} has non-positive total weight "
                f"({total_weight}); valued at 0"
            )
        return SheetValuation(
            expected_value=0.0,
            currency="USD",
            foil=sheet.foil,
            total_weight=0,
            card_count=0,
        )

    preference = ForceFoil() if sheet.foil else ForceNonFoil()
    currency: Optional[str] = None
    expected_value = 0.0

    for card_id, weight in sheet.cards.items():
        quote = resolve(card_id, preference)

        # Currency comes from the first quote that has one, floored or not
        if currency is None and quote is not None and quote.currency:
            currency = quote.currency

        raw = quote.value if quote is not None else 0.0
        expected_value += (weight / total_weight) * apply_min_price(raw, min_price)

    return SheetValuation(
        expected_value=expected_value,
        currency=currency or "USD",
        foil=sheet.foil,
        total_weight=total_weight,
        card_count=len(sheet.cards),
    )
