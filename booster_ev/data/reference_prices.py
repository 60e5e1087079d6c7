"""Reference prices for sealed product: curated trend prices and observed quotes."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

import yaml

from booster_ev.models.booster import SetDetail
from booster_ev.models.price import FinishPreference, Quote, Unconstrained

logger = logging.getLogger(__name__)

BOOSTER_PACK_CATEGORY = "booster_pack"


@dataclass
class TrendPriceConfig:
    """Manually curated booster prices, per set and product type."""

    trend_prices: dict[str, dict[str, float]] = field(default_factory=dict)
    default_prices: dict[str, float] = field(
        default_factory=lambda: {"play": 5.0, "draft": 4.0, "set": 4.5}
    )

    @classmethod
    def from_dict(cls, data: dict) -> "TrendPriceConfig":
        trend = {
            str(code).upper(): dict(prices or {})
            for code, prices in (data.get("trendPrices") or {}).items()
        }
        config = cls(trend_prices=trend)
        if data.get("defaultPrices"):
            config.default_prices = dict(data["defaultPrices"])
        return config

    @classmethod
    def from_file(cls, path: str) -> "TrendPriceConfig":
        """
        Load trend prices from a YAML or JSON file.

        A missing or invalid file yields an empty configuration.

        Args:
            path: Path to the trend price file

        Returns:
            TrendPriceConfig instance
        """
        config_path = Path(path)
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError("top level must be a mapping")
        except FileNotFoundError:
            logger.warning(f"Trend price config not found: {config_path}")
            return cls()
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load trend price config {config_path}: {e}")
            return cls()

        config = cls.from_dict(data)
        logger.info(f"Loaded trend prices for {len(config.trend_prices)} sets")
        return config

    def trend_price(self, set_code: str, product_type: str) -> Optional[float]:
        """Set-specific trend price, or None. Default prices are not used here."""
        value = self.trend_prices.get(set_code.upper(), {}).get(product_type)
        return float(value) if value is not None else None


def observed_booster_prices(
    set_detail: SetDetail,
    product_type: str,
    resolve: Callable[[str, FinishPreference], Optional[Quote]],
) -> tuple[list[Quote], Optional[str]]:
    """
    Resolve market prices for a set's sealed booster packs of one type.

    Args:
        set_detail: Set document with sealed products
        product_type: Product type to match against the sealed subtype
        resolve: Price lookup (card or product uuid, preference) -> Quote

    Returns:
        (quotes in sealed product order, name of the first priced product)
    """
    quotes: list[Quote] = []
    first_name: Optional[str] = None

    for product in set_detail.sealed_products:
        if product.category != BOOSTER_PACK_CATEGORY or product.subtype != product_type:
            continue
        quote = resolve(product.uuid, Unconstrained())
        if quote is None:
            continue
        quotes.append(quote)
        if first_name is None:
            first_name = product.name

    return quotes, first_name
