"""MTGJSON dataset loader (local directory or HTTP mirror)."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import requests

from booster_ev.data.cache import ValuationCache
from booster_ev.errors import DataUnavailableError
from booster_ev.models.booster import SetDetail, SetInfo

logger = logging.getLogger(__name__)

ONE_DAY_SECONDS = 24 * 60 * 60
SIX_HOURS_SECONDS = 6 * 60 * 60
TWELVE_HOURS_SECONDS = 12 * 60 * 60


def unwrap(document: Any) -> Any:
    """Return the ``data`` member of an MTGJSON envelope, or the document itself."""
    if isinstance(document, dict) and "data" in document:
        return document["data"]
    return document


class MtgJsonLoader:
    """Reads MTGJSON documents through a ValuationCache."""

    SET_LIST = "SetList.json"
    IDENTIFIERS = "AllIdentifiers.json"
    PRICES = "AllPricesToday.json"
    CACHE_PREFIX = "mtgjson-local:"

    def __init__(
        self,
        cache: ValuationCache,
        data_dir: str = "mtgjson",
        base_url: Optional[str] = None,
        timeout: int = 30,
        dataset_ttl: float = SIX_HOURS_SECONDS,
        identifiers_ttl: float = TWELVE_HOURS_SECONDS,
    ):
        """
        Initialize loader.

        Args:
            cache: Cache shared with the rest of the application
            data_dir: Local MTGJSON directory
            base_url: HTTP base URL; when set, documents are fetched over HTTP
            timeout: Request timeout in seconds
            dataset_ttl: Cache TTL for set list, prices and set documents
            identifiers_ttl: Cache TTL for the identifier index
        """
        self.cache = cache
        self.data_dir = Path(data_dir)
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = timeout
        self.dataset_ttl = dataset_ttl
        self.identifiers_ttl = identifiers_ttl
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": "Booster-EV/0.1.0",
            "Accept": "application/json",
        })

    def _location(self, path: str) -> str:
        path = path.lstrip("/")
        if self.base_url:
            return f"{self.base_url}/{path}"
        return str(self.data_dir / path)

    def _read_local(self, path: str) -> Any:
        file_path = self.data_dir / path.lstrip("/")
        if not file_path.exists():
            raise DataUnavailableError(str(file_path))
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to parse {file_path}: {e}")
            raise DataUnavailableError(str(file_path), str(e)) from e

    def _read_remote(self, path: str) -> Any:
        url = self._location(path)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout as e:
            logger.error(f"Request timeout for {url}")
            raise DataUnavailableError(url, "timeout") from e
        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error {e.response.status_code} for {url}")
            raise DataUnavailableError(url, f"HTTP {e.response.status_code}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed for {url}: {e}")
            raise DataUnavailableError(url, str(e)) from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise DataUnavailableError(url, "invalid JSON") from e

    def fetch_json(
        self,
        path: str,
        ttl: Optional[float] = ONE_DAY_SECONDS,
        use_cache: bool = True,
    ) -> Any:
        """
        Fetch a JSON document, consulting the cache first.

        Args:
            path: Path relative to the data directory / base URL
            ttl: Cache time-to-live in seconds
            use_cache: Whether to read cached data (fresh loads are always cached)

        Returns:
            Parsed JSON document

        Raises:
            DataUnavailableError: If the document is missing or unparsable
        """
        cache_key = f"{self.CACHE_PREFIX}{self._location(path)}"

        if use_cache:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Using cached {path}")
                return cached

        logger.info(f"Loading {self._location(path)}")
        if self.base_url:
            payload = self._read_remote(path)
        else:
            payload = self._read_local(path)

        self.cache.set(cache_key, payload, ttl)

        return payload

    def fetch_set_list(self, use_cache: bool = True) -> list[SetInfo]:
        """Load the list of all sets."""
        payload = self.fetch_json(self.SET_LIST, self.dataset_ttl, use_cache)
        sets = [SetInfo.from_mtgjson(s) for s in unwrap(payload) or []]
        logger.info(f"Loaded {len(sets)} sets")
        return sets

    def fetch_identifiers(self, use_cache: bool = True) -> dict[str, dict]:
        """Load the raw identifier document (uuid -> card data)."""
        payload = self.fetch_json(self.IDENTIFIERS, self.identifiers_ttl, use_cache)
        return unwrap(payload) or {}

    def fetch_prices(self, use_cache: bool = True) -> dict[str, dict]:
        """Load the price table (uuid -> PriceEntry)."""
        payload = self.fetch_json(self.PRICES, self.dataset_ttl, use_cache)
        return unwrap(payload) or {}

    def fetch_set(self, code: str, use_cache: bool = True) -> SetDetail:
        """
        Load the detail document of one set.

        Args:
            code: Set code (case-insensitive)
            use_cache: Whether to use cached data

        Returns:
            Parsed SetDetail
        """
        normalized = code.upper()
        payload = self.fetch_json(f"sets/{normalized}.json", self.dataset_ttl, use_cache)
        data = unwrap(payload)
        if not isinstance(data, dict):
            raise DataUnavailableError(self._location(f"sets/{normalized}.json"), "unexpected format")
        return SetDetail.from_mtgjson(data)
