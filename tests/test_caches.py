"""Tests for the in-memory overlays and the change notifier."""

from datetime import datetime, timezone

from repostore.state import BranchProtectionCache, ChangeNotifier, MemoryCache, TimestampCache


class TestMemoryCache:
    def test_set_get_delete(self):
        cache: MemoryCache[str, int] = MemoryCache()
        cache.set("a", 1)

        assert cache.get("a") == 1
        assert "a" in cache
        cache.delete("a")
        assert cache.get("a") is None
        cache.delete("a")

    def test_purge_by_predicate(self):
        cache: MemoryCache[tuple[int, str], bool] = MemoryCache()
        cache.set((1, "main"), True)
        cache.set((1, "release"), True)
        cache.set((11, "main"), True)

        assert cache.purge(lambda key: key[0] == 1) == 2
        assert len(cache) == 1
        assert (11, "main") in cache


class TestBranchProtectionCache:
    def test_replace_purges_then_primes(self):
        cache = BranchProtectionCache()
        cache.replace(1, ["main", "release"])
        cache.replace(2, ["main"])

        cache.replace(1, ["main"])

        assert cache.is_protected(1, "main")
        assert not cache.is_protected(1, "release")
        assert cache.is_protected(2, "main")
        assert len(cache) == 2


class TestTimestampCache:
    def test_discard(self):
        cache = TimestampCache()
        cache.set(1, datetime(2024, 1, 1, tzinfo=timezone.utc))
        cache.discard(1)

        assert cache.get(1) is None


class TestChangeNotifier:
    def test_emit_calls_listeners_in_order(self):
        notifier = ChangeNotifier()
        calls = []
        notifier.subscribe(lambda: calls.append("a"))
        notifier.subscribe(lambda: calls.append("b"))

        notifier.emit()

        assert calls == ["a", "b"]

    def test_unsubscribe(self):
        notifier = ChangeNotifier()
        calls = []
        unsubscribe = notifier.subscribe(lambda: calls.append(1))

        unsubscribe()
        unsubscribe()
        notifier.emit()

        assert calls == []
        assert len(notifier) == 0

    def test_failing_listener_does_not_block_others(self, caplog):
        notifier = ChangeNotifier()
        calls = []

        def broken():
            raise ValueError("boom")

        notifier.subscribe(broken)
        notifier.subscribe(lambda: calls.append(1))

        notifier.emit()

        assert calls == [1]
        assert "boom" in caplog.text
