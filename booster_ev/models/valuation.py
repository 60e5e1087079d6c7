"""Derived valuation and ranking models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from booster_ev.models.price import Quote


@dataclass(frozen=True)
class SheetValuation:
    """Expected value of one draw from a sheet."""

    expected_value: float = 0.0
    currency: str = "USD"
    foil: bool = False
    total_weight: int = 0
    card_count: int = 0

    def to_dict(self) -> dict:
        return {
            "expected_value": round(self.expected_value, 4),
            "currency": self.currency,
            "foil": self.foil,
            "total_weight": self.total_weight,
            "card_count": self.card_count,
        }


@dataclass
class ProductValuation:
    """Expected value of one product type of a set."""

    product_type: str
    expected_value: float
    currency: str = "USD"
    layout_count: int = 0
    total_layout_weight: Optional[float] = None
    sheet_breakdown: dict[str, SheetValuation] = field(default_factory=dict)
    booster_prices: list[Quote] = field(default_factory=list)
    sealed_product_name: Optional[str] = None

    @property
    def observed_price(self) -> Optional[float]:
        """First observed market price of the sealed product, if any."""
        return self.booster_prices[0].value if self.booster_prices else None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON export."""
        return {
            "product_type": self.product_type,
            "expected_value": round(self.expected_value, 4),
            "currency": self.currency,
            "layout_count": self.layout_count,
            "total_layout_weight": self.total_layout_weight,
            "sheet_breakdown": {
                name: sheet.to_dict() for name, sheet in self.sheet_breakdown.items()
            },
            "booster_prices": [q.to_dict() for q in self.booster_prices],
            "sealed_product_name": self.sealed_product_name,
        }

    def __repr__(self) -> str:
        return (
            f"ProductValuation({self.product_type}, "
            f"{self.expected_value:.2f} {self.currency})"
        )


@dataclass
class RankingRow:
    """One (set, product type) observation in a ranking pass."""

    code: str
    name: str
    product_type: str
    expected_value: float
    currency: str = "USD"
    release_date: Optional[date] = None
    reference_price: Optional[float] = None
    reference_source: Optional[str] = None  # "observed" or "trend"
    diff: Optional[float] = None
    ratio: Optional[float] = None

    @property
    def is_bargain(self) -> bool:
        """EV above the reference price."""
        return self.diff is not None and self.diff > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON export."""
        return {
            "code": self.code,
            "name": self.name,
            "release_date": self.release_date.isoformat() if self.release_date else None,
            "product_type": self.product_type,
            "currency": self.currency,
            "expected_value": round(self.expected_value, 4),
            "reference_price": self.reference_price,
            "reference_source": self.reference_source,
            "diff": round(self.diff, 4) if self.diff is not None else None,
            "ratio": round(self.ratio, 4) if self.ratio is not None else None,
        }


@dataclass
class RankingResult:
    """Best bargains and most overpriced products of a ranking pass."""

    top: list[RankingRow] = field(default_factory=list)
    bottom: list[RankingRow] = field(default_factory=list)
    rows: list[RankingRow] = field(default_factory=list)
    years_back: int = 4
    min_price: float = 0.0
    generated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON export."""
        return {
            "meta": {
                "generated_at": self.generated_at.isoformat(),
                "years_back": self.years_back,
                "min_price": self.min_price,
                "total_rows": len(self.rows),
            },
            "top": [row.to_dict() for row in self.top],
            "bottom": [row.to_dict() for row in self.bottom],
        }
