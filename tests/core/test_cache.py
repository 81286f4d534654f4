"""Event Cache — expiry, size bound, prefix invalidation and stats with an injected clock."""

from ventytime.infrastructure.cache import EventCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_entry_served_until_ttl():
    clock = FakeClock()
    cache = EventCache(ttl_seconds=10, clock=clock)
    cache.set("events:id:1", "dto")
    clock.now = 9.9
    assert cache.get("events:id:1") == "dto"
    clock.now = 10
    assert cache.get("events:id:1") is None
    assert len(cache) == 0


def test_invalidate_prefix_drops_family_only():
    cache = EventCache()
    cache.set("events:id:1", 1)
    cache.set("events:upcoming:10", 2)
    cache.set("users:1", 3)
    assert cache.invalidate_prefix("events:") == 2
    assert cache.get("users:1") == 3


def test_delete_reports_presence():
    cache = EventCache()
    cache.set("k", 1)
    assert cache.delete("k") is True
    assert cache.delete("k") is False


def test_stats_count_hits_and_misses():
    cache = EventCache()
    cache.set("k", 1)
    cache.get("k")
    cache.get("missing")
    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate_percent"] == 50.0


def test_falsy_values_are_cached():
    cache = EventCache()
    cache.set("categories", [])
    assert cache.get("categories", default="miss") == []


def test_entry_count_bounded_by_max_entries():
    cache = EventCache(max_entries=3)
    for i in range(10):
        cache.set(f"events:search:term{i}:1:10", i)
    assert len(cache) == 3
    assert cache.get("events:search:term9:1:10") == 9
    assert cache.get("events:search:term0:1:10") is None


def test_expired_entries_not_counted():
    clock = FakeClock()
    cache = EventCache(ttl_seconds=5, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    clock.now = 6
    assert len(cache) == 0
    assert cache.stats()["entries"] == 0
