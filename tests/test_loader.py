"""MTGJSON loader tests."""

import json
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from booster_ev.data.identifiers import IdentifierIndex
from booster_ev.data.loader import MtgJsonLoader, unwrap
from booster_ev.errors import DataUnavailableError


@pytest.fixture
def loader(cache, data_dir) -> MtgJsonLoader:
    return MtgJsonLoader(cache=cache, data_dir=str(data_dir))


def mock_response(payload=None, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


class TestUnwrap:
    """Test envelope handling."""

    def test_data_member(self):
        assert unwrap({"meta": {}, "data": [1]}) == [1]

    def test_bare_document(self):
        assert unwrap([1, 2]) == [1, 2]
        assert unwrap({"code": "TST"}) == {"code": "TST"}


class TestLocalLoader:
    """Test loading from a local MTGJSON directory."""

    def test_set_list(self, loader):
        sets = loader.fetch_set_list()
        assert [s.code for s in sets] == ["TST", "OLD", "GONE"]
        assert sets[0].release_date == date(2024, 2, 9)

    def test_fetch_set(self, loader):
        detail = loader.fetch_set("tst")

        assert detail.code == "TST"
        assert detail.product_types == ["play", "collector"]
        play = detail.booster["play"]
        assert len(play.layouts) == 2
        assert play.sheets["foil"].foil is True

    def test_missing_set_raises(self, loader):
        with pytest.raises(DataUnavailableError) as exc_info:
            loader.fetch_set("GONE")
        assert "GONE.json" in str(exc_info.value)

    def test_corrupt_file_raises(self, loader, data_dir):
        (data_dir / "sets" / "BAD.json").write_text("{oops", encoding="utf-8")
        with pytest.raises(DataUnavailableError):
            loader.fetch_set("BAD")

    def test_prices_and_identifiers_unwrapped(self, loader):
        prices = loader.fetch_prices()
        identifiers = loader.fetch_identifiers()

        assert "c1" in prices
        assert identifiers["r1"]["name"] == "Rare One"

    def test_documents_cached(self, loader, data_dir):
        loader.fetch_set_list()
        (data_dir / "SetList.json").unlink()

        sets = loader.fetch_set_list()

        assert len(sets) == 3

    def test_bypass_cache(self, loader, data_dir):
        loader.fetch_set_list()
        (data_dir / "SetList.json").write_text(json.dumps({"data": []}), encoding="utf-8")

        assert loader.fetch_set_list(use_cache=False) == []

    def test_forced_reload_refreshes_cache(self, loader, data_dir):
        loader.fetch_set_list()
        (data_dir / "SetList.json").write_text(json.dumps({"data": []}), encoding="utf-8")
        loader.fetch_set_list(use_cache=False)
        (data_dir / "SetList.json").unlink()

        assert loader.fetch_set_list() == []

    def test_cache_expires_after_ttl(self, cache, data_dir, clock):
        loader = MtgJsonLoader(cache=cache, data_dir=str(data_dir), dataset_ttl=60)
        loader.fetch_set_list()
        (data_dir / "SetList.json").write_text(json.dumps({"data": []}), encoding="utf-8")

        clock.advance(61)

        assert loader.fetch_set_list() == []

    def test_cache_keys_prefixed(self, loader, cache):
        loader.fetch_set_list()
        assert cache.clear(MtgJsonLoader.CACHE_PREFIX) == 1


class TestRemoteLoader:
    """Test loading over HTTP."""

    @pytest.fixture
    def remote(self, cache) -> MtgJsonLoader:
        return MtgJsonLoader(cache=cache, base_url="https://mtgjson.example/api/v5/")

    def test_fetches_url(self, remote):
        with patch.object(remote.session, "get", return_value=mock_response({"data": []})) as get:
            remote.fetch_set_list()

        get.assert_called_once_with("https://mtgjson.example/api/v5/SetList.json", timeout=30)

    def test_http_error(self, remote):
        with patch.object(remote.session, "get", return_value=mock_response(status_code=404)):
            with pytest.raises(DataUnavailableError) as exc_info:
                remote.fetch_set("ZZZ")
        assert "HTTP 404" in str(exc_info.value)

    def test_timeout(self, remote):
        with patch.object(remote.session, "get", side_effect=requests.exceptions.Timeout()):
            with pytest.raises(DataUnavailableError) as exc_info:
                remote.fetch_prices()
        assert "timeout" in str(exc_info.value)

    def test_connection_error(self, remote):
        with patch.object(remote.session, "get", side_effect=requests.exceptions.ConnectionError("down")):
            with pytest.raises(DataUnavailableError):
                remote.fetch_prices()

    def test_invalid_json(self, remote):
        response = mock_response()
        response.json.side_effect = ValueError("no json")
        with patch.object(remote.session, "get", return_value=response):
            with pytest.raises(DataUnavailableError):
                remote.fetch_identifiers()

    def test_second_call_served_from_cache(self, remote):
        with patch.object(remote.session, "get", return_value=mock_response({"data": {"x": {}}})) as get:
            remote.fetch_prices()
            remote.fetch_prices()
        assert get.call_count == 1

    def test_empty_document_served_from_cache(self, remote):
        with patch.object(remote.session, "get", return_value=mock_response({})) as get:
            assert remote.fetch_prices() == {}
            assert remote.fetch_prices() == {}
        assert get.call_count == 1


class TestIdentifierIndex:
    """Test the uuid / set index."""

    def test_groups_by_upper_set_code(self, identifiers):
        index = IdentifierIndex.from_mtgjson(identifiers)

        assert len(index.cards_for_set("tst")) == 5
        assert index.get("r1").name == "Rare One"
        assert index.get("x1").set_code == "OLD"

    def test_entries_without_set_code_skipped(self, identifiers):
        index = IdentifierIndex.from_mtgjson(identifiers)
        assert index.get("nz") is None
        assert len(index) == 6

    def test_unknown_set(self, identifiers):
        assert IdentifierIndex.from_mtgjson(identifiers).cards_for_set("NOPE") == []
