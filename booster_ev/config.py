"""Configuration for Booster EV."""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from booster_ev.data.cache import MAX_ENTRY_SIZE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/valuation.yaml"

# environment variable -> (config attribute, parser)
ENV_OVERRIDES = {
    "MTGJSON_DIR": ("data_dir", str),
    "MTGJSON_BASE_URL": ("base_url", str),
    "MTG_YEARS_BACK": ("years_back", int),
    "BOOSTER_EV_CACHE_DIR": ("cache_dir", str),
    "BOOSTER_EV_TREND_PRICES": ("trend_prices_path", str),
}


@dataclass
class ValuationConfig:
    """Settings shared by the loader, cache, valuation and ranking."""

    # Dataset location: local directory, or HTTP base URL when set
    data_dir: str = "mtgjson"
    base_url: Optional[str] = None

    # Cache
    cache_dir: str = ".cache"
    dataset_ttl_hours: float = 6
    identifiers_ttl_hours: float = 12
    max_entry_size: int = MAX_ENTRY_SIZE

    # Valuation and ranking
    min_price: float = 0.0
    years_back: int = 4
    product_types: list[str] = field(default_factory=lambda: ["play", "draft", "set"])
    top_n: int = 10
    batch_size: int = 5

    trend_prices_path: str = "config/trend-prices.yaml"

    @property
    def dataset_ttl_seconds(self) -> float:
        return self.dataset_ttl_hours * 3600

    @property
    def identifiers_ttl_seconds(self) -> float:
        return self.identifiers_ttl_hours * 3600

    @classmethod
    def from_config(
        cls,
        config_path: str = DEFAULT_CONFIG_PATH,
        use_env: bool = True,
    ) -> "ValuationConfig":
        """
        Create config from a YAML file plus environment overrides.

        A missing file yields the defaults.

        Args:
            config_path: Path to YAML config
            use_env: Whether to apply .env / environment overrides

        Returns:
            ValuationConfig instance
        """
        values: dict = {}
        path = Path(config_path)
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            values = raw.get("valuation", raw)
        else:
            logger.debug(f"No config file at {config_path}, using defaults")

        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

        config = cls(**{k: v for k, v in values.items() if k in known})

        if use_env:
            config.apply_env()

        return config

    def apply_env(self) -> None:
        """Apply overrides from the environment (and a .env file if present)."""
        load_dotenv()
        for env_name, (attr, parser) in ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if not raw:
                continue
            try:
                setattr(self, attr, parser(raw))
            except ValueError:
                logger.warning(f"Invalid value for {env_name}: {raw!r}")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON export."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
