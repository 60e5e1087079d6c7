import json
from pathlib import Path

import pytest

from booster_ev.config import ValuationConfig
from booster_ev.data.cache import ValuationCache
from booster_ev.data.reference_prices import TrendPriceConfig


def retail_entry(vendor: str, finish: str, series: dict, currency: str = "USD", medium: str = "paper") -> dict:
    """Build a single-vendor price entry."""
    return {medium: {vendor: {"retail": {finish: series}, "currency": currency}}}


class FakeClock:
    """Controllable epoch-seconds clock."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(tmp_path: Path, clock: FakeClock) -> ValuationCache:
    return ValuationCache(cache_dir=str(tmp_path / "cache"), clock=clock)


@pytest.fixture
def price_index() -> dict:
    """Prices for the sample set."""
    return {
        "c1": retail_entry("tcgplayer", "normal", {"2024-01-01": 0.10}),
        "c2": retail_entry("tcgplayer", "normal", {"2024-01-01": 0.15}),
        "c3": retail_entry("tcgplayer", "normal", {"2024-01-01": 0.05}),
        "r1": retail_entry("tcgplayer", "normal", {"2024-01-01": 2.00}),
        "f1": retail_entry("tcgplayer", "foil", {"2024-01-01": 8.00}),
        "pack-play": retail_entry("tcgplayer", "normal", {"2024-01-01": 4.50}),
    }


@pytest.fixture
def set_document() -> dict:
    """Minimal MTGJSON set document with two product types."""
    return {
        "code": "TST",
        "name": "Test Set",
        "releaseDate": "2024-02-09",
        "cards": [{"uuid": u} for u in ("c1", "c2", "c3", "r1", "f1")],
        "booster": {
            "play": {
                "boosters": [
                    {"contents": {"common": 2, "rare": 1}, "weight": 3},
                    {"contents": {"common": 2, "foil": 1}, "weight": 1},
                ],
                "boostersTotalWeight": 4,
                "sheets": {
                    "common": {"cards": {"c1": 1, "c2": 1, "c3": 1}, "totalWeight": 3},
                    "rare": {"cards": {"r1": 1}, "totalWeight": 1},
                    "foil": {"cards": {"f1": 1}, "totalWeight": 1, "foil": True},
                },
            },
            "collector": {
                "boosters": [{"contents": {"foil": 2}, "weight": 1}],
                "sheets": {
                    "foil": {"cards": {"f1": 1}, "totalWeight": 1, "foil": True},
                },
            },
        },
        "sealedProduct": [
            {"uuid": "pack-play", "name": "Test Set Play Booster", "category": "booster_pack", "subtype": "play"},
            {"uuid": "box-play", "name": "Test Set Play Booster Box", "category": "booster_box", "subtype": "play"},
        ],
    }


@pytest.fixture
def identifiers() -> dict:
    return {
        "c1": {"setCode": "tst", "name": "Common One", "rarity": "common", "number": "1"},
        "c2": {"setCode": "tst", "name": "Common Two", "rarity": "common", "number": "2"},
        "c3": {"setCode": "tst", "name": "Common Three", "rarity": "common", "number": "3"},
        "r1": {"setCode": "tst", "name": "Rare One", "rarity": "rare", "number": "4"},
        "f1": {"setCode": "tst", "name": "Foil Mythic", "rarity": "mythic", "number": "5"},
        "x1": {"setCode": "OLD", "name": "Old Card", "rarity": "uncommon"},
        "nz": {"name": "No Set"},
    }


@pytest.fixture
def data_dir(tmp_path: Path, price_index, set_document, identifiers) -> Path:
    """Local MTGJSON directory with set list, identifiers, prices and one set."""
    root = tmp_path / "mtgjson"
    (root / "sets").mkdir(parents=True)

    set_list = {
        "data": [
            {"code": "TST", "name": "Test Set", "releaseDate": "2024-02-09"},
            {"code": "OLD", "name": "Old Set", "releaseDate": "2001-01-01"},
            {"code": "GONE", "name": "Missing Set", "releaseDate": "2024-06-01"},
        ]
    }
    (root / "SetList.json").write_text(json.dumps(set_list), encoding="utf-8")
    (root / "AllIdentifiers.json").write_text(json.dumps({"data": identifiers}), encoding="utf-8")
    (root / "AllPricesToday.json").write_text(json.dumps({"data": price_index}), encoding="utf-8")
    (root / "sets" / "TST.json").write_text(json.dumps({"data": set_document}), encoding="utf-8")
    return root


@pytest.fixture
def config(tmp_path: Path, data_dir: Path) -> ValuationConfig:
    return ValuationConfig(
        data_dir=str(data_dir),
        cache_dir=str(tmp_path / "cache"),
        years_back=100,
        batch_size=1,
    )


@pytest.fixture
def trend_prices() -> TrendPriceConfig:
    return TrendPriceConfig(trend_prices={"TST": {"play": 5.0, "collector": 30.0}})
