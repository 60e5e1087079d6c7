"""Card data models for Booster EV."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Rarity(Enum):
    """Card rarity levels as used by MTGJSON."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    MYTHIC = "mythic"
    SPECIAL = "special"
    BONUS = "bonus"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Rarity":
        """Parse rarity from string (case-insensitive)."""
        if not value:
            return cls.UNKNOWN
        mapping = {
            "c": cls.COMMON,
            "common": cls.COMMON,
            "u": cls.UNCOMMON,
            "uncommon": cls.UNCOMMON,
            "r": cls.RARE,
            "rare": cls.RARE,
            "m": cls.MYTHIC,
            "mythic": cls.MYTHIC,
            "s": cls.SPECIAL,
            "special": cls.SPECIAL,
            "bonus": cls.BONUS,
        }
        return mapping.get(value.lower(), cls.UNKNOWN)


@dataclass(frozen=True)
class Card:
    """Lightweight card identity, immutable after load."""

    uuid: str
    set_code: str
    name: str
    rarity: Rarity = Rarity.UNKNOWN
    number: Optional[str] = None
    types: tuple[str, ...] = ()
    mana_value: Optional[float] = None

    @classmethod
    def from_mtgjson(cls, uuid: str, data: dict) -> Optional["Card"]:
        """Create a Card from an AllIdentifiers entry.

        Returns None for entries without a set code, which cannot be
        grouped by set.
        """
        set_code = (data.get("setCode") or "").upper()
        if not set_code:
            return None

        return cls(
            uuid=uuid,
            set_code=set_code,
            name=data.get("name", "Unknown"),
            rarity=Rarity.from_string(data.get("rarity")),
            number=data.get("number"),
            types=tuple(data.get("types") or ()),
            mana_value=data.get("manaValue"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON export."""
        return {
            "uuid": self.uuid,
            "set_code": self.set_code,
            "name": self.name,
            "rarity": self.rarity.value,
            "number": self.number,
            "types": list(self.types),
            "mana_value": self.mana_value,
        }


@dataclass
class CardPriceRow:
    """One row of a per-set card price table."""

    card: Card
    price: Optional[float] = None
    currency: str = "USD"
    vendor: str = "N/A"
    finish: str = "normal"
    source: str = ""
    medium: str = "paper"
    last_updated: str = ""
    variant_summary: str = "Standard printing"

    @property
    def name(self) -> str:
        """Card name shortcut."""
        return self.card.name

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON export."""
        data = self.card.to_dict()
        data.update({
            "price": self.price,
            "currency": self.currency,
            "vendor": self.vendor,
            "finish": self.finish,
            "source": self.source,
            "medium": self.medium,
            "last_updated": self.last_updated,
            "variant_summary": self.variant_summary,
        })
        return data

    def __repr__(self) -> str:
        price = f"{self.price:.2f}" if self.price is not None else "n/a"
        return f"CardPriceRow({self.name}, {price} {self.currency})"
