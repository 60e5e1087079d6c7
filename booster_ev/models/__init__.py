"""Data models for Booster EV."""

from booster_ev.models.booster import (
    BoosterConfig,
    Layout,
    SealedProduct,
    SetDetail,
    SetInfo,
    Sheet,
)
from booster_ev.models.card import Card, CardPriceRow, Rarity
from booster_ev.models.price import (
    FinishPreference,
    ForceFinish,
    ForceFoil,
    ForceNonFoil,
    Quote,
    Unconstrained,
)
from booster_ev.models.valuation import (
    ProductValuation,
    RankingResult,
    RankingRow,
    SheetValuation,
)

__all__ = [
    "Card",
    "CardPriceRow",
    "Rarity",
    "Sheet",
    "Layout",
    "BoosterConfig",
    "SealedProduct",
    "SetInfo",
    "SetDetail",
    "FinishPreference",
    "ForceFoil",
    "ForceNonFoil",
    "ForceFinish",
    "Unconstrained",
    "Quote",
    "SheetValuation",
    "ProductValuation",
    "RankingRow",
    "RankingResult",
]
