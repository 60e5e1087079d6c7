"""Analysis modules."""

from booster_ev.analysis.price_table import build_price_table
from booster_ev.analysis.ranking import RankingEngine, filter_recent_sets, order_rows
from booster_ev.analysis.runner import ValuationRunner
from booster_ev.analysis.service import ValuationService

__all__ = [
    "RankingEngine",
    "filter_recent_sets",
    "order_rows",
    "build_price_table",
    "ValuationService",
    "ValuationRunner",
]
