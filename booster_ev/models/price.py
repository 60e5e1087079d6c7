"""Price quote and finish preference models."""

from dataclasses import dataclass
from typing import Optional

MEDIUMS = ("paper", "mtgo")
VENDOR_PRIORITY = ("cardmarket", "tcgplayer", "cardkingdom", "manapool")
NON_FOIL_FINISHES = ("normal", "nonfoil", "etched")
BASE_FINISH_PRIORITY = NON_FOIL_FINISHES + ("foil",)


class FinishPreference:
    """Which finishes a price lookup may consider, in priority order.

    Subclasses are the only valid preferences; each one states its own
    candidate finishes, so there is no implicit fallback between cases.
    """

    def finishes(self) -> tuple[str, ...]:
        raise NotImplementedError

    @property
    def label(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class ForceFoil(FinishPreference):
    """Foil sheets: only a foil price counts."""

    def finishes(self) -> tuple[str, ...]:
        return ("foil",)

    @property
    def label(self) -> str:
        return "foil"


@dataclass(frozen=True)
class ForceNonFoil(FinishPreference):
    """Non-foil sheets: any non-foil finish, never foil."""

    def finishes(self) -> tuple[str, ...]:
        return NON_FOIL_FINISHES

    @property
    def label(self) -> str:
        return "nonfoil"


@dataclass(frozen=True)
class ForceFinish(FinishPreference):
    """Exactly one named finish."""

    finish: str

    def finishes(self) -> tuple[str, ...]:
        return (self.finish,)

    @property
    def label(self) -> str:
        return self.finish


@dataclass(frozen=True)
class Unconstrained(FinishPreference):
    """Any finish; a foil-only listing may win."""

    def finishes(self) -> tuple[str, ...]:
        return BASE_FINISH_PRIORITY

    @property
    def label(self) -> str:
        return "any"


def parse_preference(value: Optional[str]) -> FinishPreference:
    """
    Parse a finish preference from a user-supplied string.

    Args:
        value: "foil", "nonfoil"/"normal", "any"/None, or a finish name

    Returns:
        Matching FinishPreference
    """
    if value is None:
        return Unconstrained()
    lowered = value.strip().lower()
    if lowered in ("", "any"):
        return Unconstrained()
    if lowered == "foil":
        return ForceFoil()
    if lowered in ("nonfoil", "non-foil", "normal"):
        return ForceNonFoil()
    return ForceFinish(lowered)


@dataclass(frozen=True)
class Quote:
    """A single resolved card price."""

    value: float
    date: str
    vendor: str
    finish: str
    source: str  # "retail" or "buylist"
    currency: str
    medium: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON export."""
        return {
            "value": self.value,
            "date": self.date,
            "vendor": self.vendor,
            "finish": self.finish,
            "source": self.source,
            "currency": self.currency,
            "medium": self.medium,
        }
