"""Set, sheet and layout models parsed from MTGJSON set documents."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from booster_ev.models.card import Card

logger = logging.getLogger(__name__)


def parse_release_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO release date, returning None for missing or bad values."""
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.debug(f"Unparsable release date: {value!r}")
        return None


@dataclass(frozen=True)
class Sheet:
    """Weighted card pool that pack slots draw from."""

    name: str
    cards: dict[str, int] = field(default_factory=dict)  # uuid -> weight
    total_weight: Optional[int] = None
    foil: bool = False

    # Container fields make instances unhashable
    __hash__ = None

    @property
    def effective_total_weight(self) -> int:
        """Declared total weight, or the sum of card weights if absent."""
        if self.total_weight is not None:
            return self.total_weight
        return sum(self.cards.values())

    @classmethod
    def from_mtgjson(cls, name: str, data: dict) -> "Sheet":
        return cls(
            name=name,
            cards=dict(data.get("cards") or {}),
            total_weight=data.get("totalWeight"),
            foil=bool(data.get("foil", False)),
        )


@dataclass(frozen=True)
class Layout:
    """One pack recipe: sheet name -> number of cards drawn."""

    contents: dict[str, int] = field(default_factory=dict)
    weight: Optional[float] = None

    # Container fields make instances unhashable
    __hash__ = None

    @property
    def effective_weight(self) -> float:
        """Relative weight among sibling layouts (defaults to 1)."""
        return 1 if self.weight is None else self.weight

    @classmethod
    def from_mtgjson(cls, data: dict) -> "Layout":
        return cls(
            contents=dict(data.get("contents") or {}),
            weight=data.get("weight"),
        )


@dataclass(frozen=True)
class BoosterConfig:
    """All sheets and layouts of one product type (play, draft, collector...)."""

    product_type: str
    sheets: dict[str, Sheet] = field(default_factory=dict)
    layouts: list[Layout] = field(default_factory=list)
    boosters_total_weight: Optional[float] = None

    # Container fields make instances unhashable
    __hash__ = None

    @classmethod
    def from_mtgjson(cls, product_type: str, data: dict) -> "BoosterConfig":
        sheets = {
            name: Sheet.from_mtgjson(name, sheet_data or {})
            for name, sheet_data in (data.get("sheets") or {}).items()
        }
        layouts = [Layout.from_mtgjson(b or {}) for b in data.get("boosters") or []]
        return cls(
            product_type=product_type,
            sheets=sheets,
            layouts=layouts,
            boosters_total_weight=data.get("boostersTotalWeight"),
        )


@dataclass(frozen=True)
class SealedProduct:
    """A sealed product listed in a set document."""

    uuid: str
    name: str
    category: Optional[str] = None
    subtype: Optional[str] = None

    @classmethod
    def from_mtgjson(cls, data: dict) -> Optional["SealedProduct"]:
        uuid = data.get("uuid")
        if not uuid:
            return None
        return cls(
            uuid=uuid,
            name=data.get("name", ""),
            category=data.get("category"),
            subtype=data.get("subtype"),
        )


@dataclass(frozen=True)
class SetInfo:
    """Entry from the set list."""

    code: str
    name: str
    release_date: Optional[date] = None

    @classmethod
    def from_mtgjson(cls, data: dict) -> "SetInfo":
        return cls(
            code=str(data.get("code", "")).upper(),
            name=data.get("name", ""),
            release_date=parse_release_date(data.get("releaseDate")),
        )


@dataclass
class SetDetail:
    """Full set document: cards, booster configurations, sealed products."""

    code: str
    name: str
    release_date: Optional[date] = None
    cards: list[dict] = field(default_factory=list)
    booster: dict[str, BoosterConfig] = field(default_factory=dict)
    sealed_products: list[SealedProduct] = field(default_factory=list)

    @property
    def product_types(self) -> list[str]:
        """Available product types, e.g. ['play', 'collector']."""
        return list(self.booster.keys())

    @classmethod
    def from_mtgjson(cls, data: dict) -> "SetDetail":
        booster = {
            product_type: BoosterConfig.from_mtgjson(product_type, config or {})
            for product_type, config in (data.get("booster") or {}).items()
        }
        sealed = [
            product
            for product in (
                SealedProduct.from_mtgjson(p or {}) for p in data.get("sealedProduct") or []
            )
            if product is not None
        ]
        return cls(
            code=str(data.get("code", "")).upper(),
            name=data.get("name", ""),
            release_date=parse_release_date(data.get("releaseDate")),
            cards=list(data.get("cards") or []),
            booster=booster,
            sealed_products=sealed,
        )


def set_options(sets: list[SetInfo]) -> list[SetInfo]:
    """Sort sets by release date, newest first (missing dates sort last)."""
    epoch = date(1970, 1, 1)
    return sorted(sets, key=lambda s: s.release_date or epoch, reverse=True)


def rarity_breakdown(cards: list[Card]) -> dict:
    """
    Count cards by rarity.

    Args:
        cards: Cards of one set

    Returns:
        Dict with total count and per-rarity counts
    """
    rarities: dict[str, int] = {}
    for card in cards:
        key = card.rarity.value
        rarities[key] = rarities.get(key, 0) + 1
    return {"total": len(cards), "rarities": rarities}
