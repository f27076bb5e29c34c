"""Tests for dashboard/cache_store.py: persisted snapshot with a 5 minute TTL."""
import json

import pytest

from dashboard.cache_store import CACHE_KEY, CacheStore, decode_record
from dashboard.errors import CacheReadError
from dashboard.sections import Section, empty_state


def _state(**payloads):
    state = empty_state()
    for name, payload in payloads.items():
        state[Section(name)] = payload
    return state


class TestLoadSave:
    def test_empty_store_is_a_miss(self, cache_store):
        assert cache_store.load() is None

    def test_save_then_load(self, cache_store):
        cache_store.save(_state(products={"totalSales": 1000}))
        loaded = cache_store.load()
        assert loaded[Section.PRODUCTS] == {"totalSales": 1000}
        assert loaded[Section.COMMUNITY] is None
        assert loaded[Section.FINANCE] is None

    def test_record_layout(self, store, cache_store, clock):
        cache_store.save(_state(finance={"resumo": {}}))
        raw = json.loads(store.get_item(CACHE_KEY))
        assert raw["timestamp"] == int(clock.now * 1000)
        assert raw["data"] == {"community": None, "products": None, "finance": {"resumo": {}}}

    def test_save_overwrites(self, cache_store):
        cache_store.save(_state(products={"v": 1}))
        cache_store.save(_state(community={"v": 2}))
        loaded = cache_store.load()
        assert loaded[Section.PRODUCTS] is None
        assert loaded[Section.COMMUNITY] == {"v": 2}

    def test_clear(self, store, cache_store):
        cache_store.save(_state(products={"v": 1}))
        cache_store.clear()
        assert store.get_item(CACHE_KEY) is None
        assert cache_store.load() is None

    def test_clear_when_empty(self, cache_store):
        cache_store.clear()


class TestTTL:
    def test_valid_just_before_expiry(self, cache_store, clock):
        cache_store.save(_state(products={"v": 1}))
        clock.advance(4 * 60 + 59)
        assert cache_store.load() is not None

    def test_expired_just_after_ttl(self, store, cache_store, clock):
        cache_store.save(_state(products={"v": 1}))
        clock.advance(5 * 60 + 1)
        assert cache_store.load() is None
        assert store.get_item(CACHE_KEY) is None

    def test_exactly_ttl_is_expired(self, cache_store, clock):
        cache_store.save(_state(products={"v": 1}))
        clock.advance(5 * 60)
        assert cache_store.load() is None

    def test_save_restarts_window(self, cache_store, clock):
        cache_store.save(_state(products={"v": 1}))
        clock.advance(4 * 60)
        cache_store.save(_state(products={"v": 2}))
        clock.advance(4 * 60)
        assert cache_store.load()[Section.PRODUCTS] == {"v": 2}

    def test_custom_ttl(self, store, clock):
        cache = CacheStore(store, ttl_seconds=10, clock=clock)
        cache.save(_state(products={"v": 1}))
        clock.advance(11)
        assert cache.load() is None


class TestMalformedRecords:
    @pytest.mark.parametrize("raw", [
        "{not json",
        "[]",
        json.dumps({"data": {}}),
        json.dumps({"data": {}, "timestamp": 0}),
        json.dumps({"data": {}, "timestamp": "yesterday"}),
        json.dumps({"timestamp": 1767225600000}),
        json.dumps({"data": [], "timestamp": 1767225600000}),
    ])
    def test_malformed_is_discarded(self, store, cache_store, raw):
        store.set_item(CACHE_KEY, raw)
        assert cache_store.load() is None
        assert store.get_item(CACHE_KEY) is None

    @pytest.mark.parametrize("content", ["{not json", '{"data": {}, "timestamp": 1}'])
    def test_corrupt_backing_file_is_deleted(self, store, cache_store, content):
        path = store.root_dir / f"{CACHE_KEY}.json"
        path.write_text(content, encoding="utf-8")
        assert cache_store.load() is None
        assert not path.exists()

    def test_decode_raises_cache_read_error(self):
        with pytest.raises(CacheReadError):
            decode_record("nope")

    def test_unknown_sections_ignored(self, store, cache_store, clock):
        record = {"data": {"products": {"v": 1}, "marketing": {"v": 2}},
                  "timestamp": int(clock.now * 1000)}
        store.set_item(CACHE_KEY, json.dumps(record))
        loaded = cache_store.load()
        assert set(loaded) == set(Section)
        assert loaded[Section.PRODUCTS] == {"v": 1}

    def test_legacy_section_names(self, store, cache_store, clock):
        record = {"data": {"comunidade": {"activeMembers": 3}, "produtos": None,
                           "financeiro": None},
                  "timestamp": int(clock.now * 1000)}
        store.set_item(CACHE_KEY, json.dumps(record))
        assert cache_store.load()[Section.COMMUNITY] == {"activeMembers": 3}
