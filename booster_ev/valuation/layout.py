"""Layout expected value: one concrete pack recipe."""

import logging

from booster_ev.models.booster import Layout
from booster_ev.models.valuation import SheetValuation

logger = logging.getLogger(__name__)


def value_layout(layout: Layout, sheet_values: dict[str, SheetValuation]) -> float:
    """
    Sum quantity * sheet EV over a layout's contents.

    A sheet name missing from ``sheet_values`` contributes 0.
    """
    total = 0.0
    for sheet_name, quantity in layout.contents.items():
        sheet = sheet_values.get(sheet_name)
        if sheet is None:
            logger.debug(f"Layout references unknown sheet {sheet_name!r}")
            continue
        total += quantity * sheet.expected_value
    return total
