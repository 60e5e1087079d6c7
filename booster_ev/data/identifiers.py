"""Card identifier index (uuid -> Card, set code -> cards)."""

import logging
from typing import Optional

from booster_ev.models.card import Card

logger = logging.getLogger(__name__)


class IdentifierIndex:
    """Lightweight lookup over the AllIdentifiers document."""

    def __init__(self, cards: Optional[list[Card]] = None):
        self.by_uuid: dict[str, Card] = {}
        self.by_set: dict[str, list[Card]] = {}
        for card in cards or []:
            self.add(card)

    def add(self, card: Card) -> None:
        self.by_uuid[card.uuid] = card
        self.by_set.setdefault(card.set_code, []).append(card)

    @classmethod
    def from_mtgjson(cls, identifiers: dict[str, dict]) -> "IdentifierIndex":
        """
        Build the index from raw identifier data.

        Entries without a set code are skipped.

        Args:
            identifiers: uuid -> card data mapping

        Returns:
            Populated IdentifierIndex
        """
        index = cls()
        skipped = 0
        for uuid, data in identifiers.items():
            card = Card.from_mtgjson(uuid, data or {})
            if card is None:
                skipped += 1
                continue
            index.add(card)

        logger.info(
            f"Indexed {len(index.by_uuid)} cards across {len(index.by_set)} sets"
            + (f" ({skipped} without set code)" if skipped else "")
        )
        return index

    def get(self, uuid: str) -> Optional[Card]:
        return self.by_uuid.get(uuid)

    def cards_for_set(self, set_code: str) -> list[Card]:
        return self.by_set.get(set_code.upper(), [])

    def __len__(self) -> int:
        return len(self.by_uuid)
