"""Valuation service tests."""

import pytest

from booster_ev.analysis.service import PRICE_TABLE_PREFIX, ValuationService
from booster_ev.config import ValuationConfig
from booster_ev.models.price import ForceFoil, ForceNonFoil


@pytest.fixture
def service(config, trend_prices) -> ValuationService:
    return ValuationService(config=config, trend_prices=trend_prices)


class TestValueSet:
    """Test single-set valuation."""

    def test_sorted_by_ev(self, service):
        valuations = service.value_set("tst")

        assert [v.product_type for v in valuations] == ["collector", "play"]
        assert valuations[0].expected_value == pytest.approx(16.0)
        assert valuations[1].expected_value == pytest.approx(3.7)
        assert service.last_error == ""

    def test_min_price_default_from_config(self, config, trend_prices):
        config.min_price = 1.0
        service = ValuationService(config=config, trend_prices=trend_prices)

        play = [v for v in service.value_set("TST") if v.product_type == "play"][0]

        assert play.expected_value == pytest.approx(3.5)

    def test_missing_set_records_error(self, service):
        assert service.value_set("GONE") == []
        assert "GONE" in service.last_error

    def test_error_cleared_on_success(self, service):
        service.value_set("GONE")
        service.value_set("TST")
        assert service.last_error == ""

    def test_value_product_without_booster(self, service):
        assert service.value_product(None) == []


class TestRank:
    """Test end-to-end ranking."""

    def test_rank_default_set_list(self, service):
        result = service.rank()

        assert [r.code for r in result.rows] == ["TST"]
        (row,) = result.top
        assert row.product_type == "play"
        assert row.reference_source == "observed"
        assert row.diff == pytest.approx(-0.8)
        assert result.bottom == [row]
        assert service.last_error == ""

    def test_rank_window_from_config(self, service):
        result = service.rank(years_back=0)
        assert result.rows == []
        assert result.years_back == 0

    def test_missing_base_data(self, tmp_path, trend_prices):
        empty = tmp_path / "empty"
        empty.mkdir()
        config = ValuationConfig(data_dir=str(empty), cache_dir=str(tmp_path / "c2"))
        service = ValuationService(config=config, trend_prices=trend_prices)

        result = service.rank()

        assert result.rows == []
        assert result.top == []
        assert "SetList.json" in service.last_error


class TestPriceTable:
    """Test per-set card price tables."""

    def test_rows_sorted_by_price(self, service):
        rows = service.price_table("tst")

        assert [r.card.uuid for r in rows] == ["f1", "r1", "c2", "c1", "c3"]
        assert rows[0].price == 8.0
        assert rows[0].finish == "foil"
        assert "Collector #: 5" in rows[0].variant_summary

    def test_cached(self, service):
        service.price_table("TST")
        assert service.cache_get(f"{PRICE_TABLE_PREFIX}TST") is not None

    def test_served_from_cache_across_instances(self, config, trend_prices, service):
        first = service.price_table("TST")

        fresh = ValuationService(config=config, trend_prices=trend_prices)
        (fresh.loader.data_dir / "AllPricesToday.json").unlink()
        rows = fresh.price_table("TST")

        assert fresh.last_error == ""
        assert [(r.card.uuid, r.price) for r in rows] == [(r.card.uuid, r.price) for r in first]
        assert rows[0].card.rarity.value == "mythic"

    def test_empty_code(self, service):
        assert service.price_table("") == []

    def test_unknown_set(self, service):
        assert service.price_table("NOPE") == []


class TestLookups:
    """Test price lookups and set helpers."""

    def test_resolve_price(self, service):
        assert service.resolve_price("r1").value == 2.0
        assert service.resolve_price("f1", ForceNonFoil()) is None
        assert service.resolve_price("f1", ForceFoil()).value == 8.0

    def test_card_stats(self, service):
        stats = service.card_stats("TST")
        assert stats["total"] == 5
        assert stats["rarities"] == {"common": 3, "rare": 1, "mythic": 1}

    def test_set_options_newest_first(self, service):
        assert [s.code for s in service.set_options()] == ["GONE", "TST", "OLD"]


class TestCacheClear:
    """Test cache primitives on the service."""

    def test_clear_drops_snapshots(self, service):
        service.ensure_prices()
        service.load_set_list()

        removed = service.cache_clear()

        assert removed >= 2
        assert service._resolver is None
        assert service._set_list == []

    def test_clear_derived_tables_keeps_snapshots(self, service):
        service.price_table("TST")
        resolver = service.ensure_prices()

        assert service.cache_clear(PRICE_TABLE_PREFIX) == 1
        assert service.ensure_prices() is resolver

    def test_set_and_get(self, service):
        service.cache_set("custom:key", {"a": 1}, ttl=60)
        assert service.cache_get("custom:key") == {"a": 1}
