"""Contract validation tests."""

from booster_ev.contracts import (
    CacheContract,
    CacheProtocol,
    DatasetLoaderProtocol,
    LoaderContract,
    PriceResolverProtocol,
    ReferencePriceContract,
    ResolverContract,
    validate_all_contracts,
)
from booster_ev.data.cache import ValuationCache
from booster_ev.data.loader import MtgJsonLoader
from booster_ev.data.reference_prices import TrendPriceConfig
from booster_ev.models.price import ForceNonFoil, Quote
from booster_ev.pricing.resolver import PriceResolver


class TestLoaderContract:
    """Test MtgJsonLoader contract compliance."""

    def test_loader_has_required_methods(self, cache):
        contract = LoaderContract()
        loader = MtgJsonLoader(cache=cache)

        is_valid, errors = contract.validate(loader)
        assert is_valid, f"Contract validation failed: {errors}"

    def test_loader_matches_protocol(self, cache):
        assert isinstance(MtgJsonLoader(cache=cache), DatasetLoaderProtocol)


class TestResolverContract:
    """Test PriceResolver contract compliance."""

    def test_resolver_has_required_methods(self, price_index):
        contract = ResolverContract()
        resolver = PriceResolver(price_index)

        is_valid, errors = contract.validate(resolver)
        assert is_valid, f"Contract validation failed: {errors}"
        assert isinstance(resolver, PriceResolverProtocol)

    def test_resolver_output(self, price_index):
        contract = ResolverContract()
        resolver = PriceResolver(price_index)

        for card_id in list(price_index) + ["missing"]:
            is_valid, error = contract.validate_output(resolver.resolve(card_id, ForceNonFoil()))
            assert is_valid, f"Output validation failed: {error}"

    def test_negative_price_rejected(self):
        quote = Quote(-1.0, "2024-01-01", "tcgplayer", "normal", "retail", "USD", "paper")
        is_valid, _ = ResolverContract().validate_output(quote)
        assert not is_valid


class TestReferencePriceContract:
    """Test TrendPriceConfig contract compliance."""

    def test_trend_prices_have_required_methods(self, trend_prices):
        is_valid, errors = ReferencePriceContract().validate(trend_prices)
        assert is_valid, f"Contract validation failed: {errors}"


class TestCacheContract:
    """Test ValuationCache contract compliance."""

    def test_cache_has_required_methods(self, cache):
        is_valid, errors = CacheContract().validate(cache)
        assert is_valid, f"Contract validation failed: {errors}"
        assert isinstance(cache, CacheProtocol)

    def test_incomplete_cache_rejected(self):
        class ReadOnlyCache:
            def get(self, key):
                return None

        is_valid, errors = CacheContract().validate(ReadOnlyCache())
        assert not is_valid
        assert "Missing required method: set" in errors


class TestContractRegistry:
    """Test validate_all_contracts."""

    def test_all_contracts(self, cache, price_index):
        results = validate_all_contracts({
            "loader": MtgJsonLoader(cache=cache),
            "resolver": PriceResolver(price_index),
            "reference_prices": TrendPriceConfig(),
            "cache": ValuationCache(cache_dir=None),
        })

        for name, (is_valid, errors) in results.items():
            assert is_valid, f"{name} contract validation failed: {errors}"

    def test_unknown_contract(self):
        results = validate_all_contracts({"scorer": object()})
        assert results["scorer"][0] is False
