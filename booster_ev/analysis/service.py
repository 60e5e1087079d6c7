"""Valuation orchestration: loads datasets and runs the valuation pipeline."""

import logging
from typing import Any, Optional

from booster_ev.analysis.price_table import build_price_table, rows_from_payload, rows_to_payload
from booster_ev.analysis.ranking import RankingEngine
from booster_ev.config import ValuationConfig
from booster_ev.data.cache import ValuationCache
from booster_ev.data.identifiers import IdentifierIndex
from booster_ev.data.loader import MtgJsonLoader
from booster_ev.data.reference_prices import TrendPriceConfig
from booster_ev.errors import DataUnavailableError
from booster_ev.models.booster import SetDetail, SetInfo, rarity_breakdown, set_options
from booster_ev.models.card import CardPriceRow
from booster_ev.models.price import FinishPreference, Quote
from booster_ev.models.valuation import ProductValuation, RankingResult
from booster_ev.pricing.resolver import PriceResolver
from booster_ev.valuation.product import ProductValuator

logger = logging.getLogger(__name__)

PRICE_TABLE_PREFIX = "price-table:"


class ValuationService:
    """Main entry point for valuations, rankings and price tables."""

    def __init__(
        self,
        config: Optional[ValuationConfig] = None,
        cache: Optional[ValuationCache] = None,
        loader: Optional[MtgJsonLoader] = None,
        trend_prices: Optional[TrendPriceConfig] = None,
    ):
        """
        Initialize valuation service.

        Args:
            config: Settings (defaults to ValuationConfig())
            cache: Cache shared by loader and derived tables
            loader: MTGJSON dataset loader
            trend_prices: Curated reference prices (loaded lazily if omitted)
        """
        self.config = config or ValuationConfig()
        self.cache = cache or ValuationCache(
            cache_dir=self.config.cache_dir,
            max_entry_size=self.config.max_entry_size,
        )
        self.loader = loader or MtgJsonLoader(
            cache=self.cache,
            data_dir=self.config.data_dir,
            base_url=self.config.base_url,
            dataset_ttl=self.config.dataset_ttl_seconds,
            identifiers_ttl=self.config.identifiers_ttl_seconds,
        )
        self._trend_prices = trend_prices
        self._set_list: list[SetInfo] = []
        self._resolver: Optional[PriceResolver] = None
        self._identifiers: Optional[IdentifierIndex] = None
        self.last_error: str = ""

    # ------------------------------------------------------------------
    # Dataset access
    # ------------------------------------------------------------------

    def load_set_list(self, force: bool = False) -> list[SetInfo]:
        """Load (once) and return the set list."""
        if self._set_list and not force:
            return self._set_list
        self._set_list = self.loader.fetch_set_list(use_cache=not force)
        return self._set_list

    def load_set(self, code: str) -> SetDetail:
        """Load one set document (raises DataUnavailableError)."""
        return self.loader.fetch_set(code)

    def ensure_prices(self) -> PriceResolver:
        """Load the price table once and wrap it in a resolver."""
        if self._resolver is None:
            self._resolver = PriceResolver(self.loader.fetch_prices())
            logger.info(f"Price index ready with {len(self._resolver)} entries")
        return self._resolver

    def ensure_identifiers(self) -> IdentifierIndex:
        """Load and index card identifiers once."""
        if self._identifiers is None:
            self._identifiers = IdentifierIndex.from_mtgjson(self.loader.fetch_identifiers())
        return self._identifiers

    @property
    def trend_prices(self) -> TrendPriceConfig:
        if self._trend_prices is None:
            self._trend_prices = TrendPriceConfig.from_file(self.config.trend_prices_path)
        return self._trend_prices

    def set_options(self) -> list[SetInfo]:
        """Set list sorted newest first."""
        return set_options(self.load_set_list())

    def card_stats(self, code: str) -> dict:
        """Card count and rarity breakdown of one set."""
        return rarity_breakdown(self.ensure_identifiers().cards_for_set(code))

    # ------------------------------------------------------------------
    # Valuation
    # ------------------------------------------------------------------

    def resolve_price(
        self,
        card_id: str,
        preference: Optional[FinishPreference] = None,
    ) -> Optional[Quote]:
        """Resolve one card's price against the loaded snapshot."""
        return self.ensure_prices().resolve(card_id, preference)

    def valuator(self) -> ProductValuator:
        return ProductValuator(self.ensure_prices())

    def value_product(
        self,
        set_detail: Optional[SetDetail],
        min_price: Optional[float] = None,
    ) -> list[ProductValuation]:
        """
        Value every product type of a set document.

        Args:
            set_detail: Set document
            min_price: Card values below this count as 0 (config default)

        Returns:
            Valuations sorted by EV, highest first
        """
        if set_detail is None or not set_detail.booster:
            return []
        min_price = self.config.min_price if min_price is None else min_price
        valuations = self.valuator().build_valuations(set_detail, min_price)
        return sorted(valuations, key=lambda v: v.expected_value, reverse=True)

    def value_set(self, code: str, min_price: Optional[float] = None) -> list[ProductValuation]:
        """
        Load a set by code and value its products.

        Loading failures are recorded in ``last_error`` and yield [].
        """
        self.last_error = ""
        try:
            set_detail = self.load_set(code)
            return self.value_product(set_detail, min_price)
        except DataUnavailableError as e:
            logger.error(f"Cannot value {code}: {e}")
            self.last_error = str(e)
            return []

    def ranking_engine(self) -> RankingEngine:
        return RankingEngine(
            load_set=self.load_set,
            valuator=self.valuator(),
            trend_prices=self.trend_prices,
            top_n=self.config.top_n,
        )

    def rank(
        self,
        sets: Optional[list[SetInfo]] = None,
        years_back: Optional[int] = None,
        min_price: Optional[float] = None,
    ) -> RankingResult:
        """
        Rank recent sets' boosters as bargains or overpriced.

        Args:
            sets: Candidate sets (defaults to the loaded set list)
            years_back: Window in years (config default)
            min_price: Card values below this count as 0 (config default)

        Returns:
            RankingResult; empty if the base datasets are unavailable
        """
        years_back = self.config.years_back if years_back is None else years_back
        min_price = self.config.min_price if min_price is None else min_price
        self.last_error = ""

        try:
            candidates = sets if sets is not None else self.load_set_list()
            engine = self.ranking_engine()
        except DataUnavailableError as e:
            logger.error(f"Cannot compute booster ranking: {e}")
            self.last_error = str(e)
            return RankingResult(years_back=years_back, min_price=min_price)

        return engine.rank(
            candidates,
            years_back=years_back,
            min_price=min_price,
            types_to_include=self.config.product_types,
        )

    # ------------------------------------------------------------------
    # Price tables
    # ------------------------------------------------------------------

    def price_table(self, code: str) -> list[CardPriceRow]:
        """
        Card price table for one set, highest price first.

        Cached as a derived table in the ValuationCache.
        """
        normalized = (code or "").upper()
        if not normalized:
            return []

        self.last_error = ""
        cache_key = f"{PRICE_TABLE_PREFIX}{normalized}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Using cached price table for {normalized}")
            return rows_from_payload(cached)

        try:
            cards = self.ensure_identifiers().cards_for_set(normalized)
            rows = build_price_table(cards, self.ensure_prices())
        except DataUnavailableError as e:
            logger.error(f"Cannot build price table for {normalized}: {e}")
            self.last_error = str(e)
            return []

        self.cache.set(cache_key, rows_to_payload(rows), self.config.dataset_ttl_seconds)
        return rows

    # ------------------------------------------------------------------
    # Cache primitives
    # ------------------------------------------------------------------

    def cache_get(self, key: str) -> Optional[Any]:
        return self.cache.get(key)

    def cache_set(self, key: str, payload: Any, ttl: Optional[float] = None) -> None:
        self.cache.set(key, payload, ttl)

    def cache_clear(self, prefix: Optional[str] = None) -> int:
        """Clear cache entries and drop in-process snapshots built from them."""
        removed = self.cache.clear(prefix)
        if prefix is None or MtgJsonLoader.CACHE_PREFIX.startswith(prefix):
            self._set_list = []
            self._resolver = None
            self._identifiers = None
        return removed
