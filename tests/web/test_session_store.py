"""Tests for the in-memory TTL store."""

from web.session_store import TTLStore


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestTTLStore:
    def test_set_get(self):
        store = TTLStore()
        store.set("a", [1, 2])
        assert store.get("a") == [1, 2]
        assert "a" in store

    def test_default_for_missing(self):
        assert TTLStore().get("missing", "fallback") == "fallback"

    def test_entry_expires(self):
        clock = FakeClock()
        store = TTLStore(clock=clock)
        store.set("a", 1, ttl=10)

        clock.now = 9.9
        assert store.get("a") == 1
        clock.now = 10
        assert store.get("a") is None
        assert "a" not in store

    def test_default_ttl(self):
        clock = FakeClock()
        store = TTLStore(default_ttl=5, clock=clock)
        store.set("a", 1)
        store.set("b", 2, ttl=100)

        clock.now = 6
        assert store.sweep() == 1
        assert len(store) == 1

    def test_no_ttl_never_expires(self):
        clock = FakeClock()
        store = TTLStore(clock=clock)
        store.set("a", 1)
        clock.now = 1e9
        assert store.get("a") == 1

    def test_delete_and_clear(self):
        store = TTLStore()
        store.set("a", 1)
        store.set("b", 2)

        assert store.delete("a") is True
        assert store.delete("a") is False
        store.clear()
        assert len(store) == 0

    def test_stored_none_is_present(self):
        store = TTLStore()
        store.set("a", None)
        assert "a" in store
