"""Per-set card price tables."""

import logging
from typing import Optional

from booster_ev.models.card import Card, CardPriceRow
from booster_ev.models.price import Quote, Unconstrained
from booster_ev.pricing.resolver import PriceResolver

logger = logging.getLogger(__name__)


def variant_summary(card: Card, quote: Optional[Quote]) -> str:
    """Describe which printing/listing a price row refers to."""
    descriptors = []
    if card.number:
        descriptors.append(f"Collector #: {card.number}")
    if quote is not None:
        descriptors.append(f"Finish: {quote.finish}")
        descriptors.append(f"Medium: {quote.medium}")
        descriptors.append(f"Vendor: {quote.vendor}")
        descriptors.append(f"Source: {quote.source}")
    return " · ".join(descriptors) or "Standard printing"


def build_price_row(card: Card, quote: Optional[Quote]) -> CardPriceRow:
    if quote is None:
        return CardPriceRow(card=card, variant_summary=variant_summary(card, None))

    return CardPriceRow(
        card=card,
        price=quote.value,
        currency=quote.currency or "USD",
        vendor=quote.vendor,
        finish=quote.finish,
        source=quote.source,
        medium=quote.medium,
        last_updated=quote.date,
        variant_summary=variant_summary(card, quote),
    )


def build_price_table(cards: list[Card], resolver: PriceResolver) -> list[CardPriceRow]:
    """
    Price every card of a set with an unconstrained lookup.

    Args:
        cards: Cards of the set
        resolver: Price resolver over the current snapshot

    Returns:
        Rows sorted by price, highest first (unpriced cards last)
    """
    rows = [build_price_row(card, resolver.resolve(card.uuid, Unconstrained())) for card in cards]
    rows.sort(key=lambda r: r.price or 0, reverse=True)
    logger.debug(f"Built price table with {len(rows)} rows")
    return rows


def rows_to_payload(rows: list[CardPriceRow]) -> list[dict]:
    """Serialize rows for the cache."""
    return [row.to_dict() for row in rows]


def rows_from_payload(payload: list[dict]) -> list[CardPriceRow]:
    """Rebuild rows from a cached payload."""
    rows = []
    for data in payload:
        card = Card.from_mtgjson(
            data["uuid"],
            {
                "setCode": data.get("set_code"),
                "name": data.get("name"),
                "rarity": data.get("rarity"),
                "number": data.get("number"),
                "types": data.get("types"),
                "manaValue": data.get("mana_value"),
            },
        )
        if card is None:
            continue
        rows.append(
            CardPriceRow(
                card=card,
                price=data.get("price"),
                currency=data.get("currency", "USD"),
                vendor=data.get("vendor", "N/A"),
                finish=data.get("finish", "normal"),
                source=data.get("source", ""),
                medium=data.get("medium", "paper"),
                last_updated=data.get("last_updated", ""),
                variant_summary=data.get("variant_summary", "Standard printing"),
            )
        )
    return rows
