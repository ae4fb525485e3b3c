"""
Tests para el cache de resultados (cache.py).
"""

import threading

import pytest
from pydantic import ValidationError

from hidrocanal.cache import (
    CRITICAL_DEPTH,
    NORMAL_DEPTH,
    PROFILE,
    ResultCache,
    cache_stats,
    clear_cache,
    configure_cache,
    get_cache,
)
from hidrocanal.config import CacheConfig, ProfileOptions, RectangularChannel
from hidrocanal.core.profile import water_surface_profile


class TestKeys:
    """Tests de claves de cache."""

    def test_rounding(self, cache, mild_params):
        a = RectangularChannel(**mild_params)
        b = RectangularChannel(**{**mild_params, "discharge": 10.00001})
        assert cache.critical_key(a) == cache.critical_key(b)

    def test_critical_ignores_slope(self, mild_channel, steep_channel, cache):
        assert cache.critical_key(mild_channel) == cache.critical_key(steep_channel)
        assert cache.normal_key(mild_channel) != cache.normal_key(steep_channel)

    def test_profile_includes_options(self, mild_channel, cache):
        assert cache.profile_key(mild_channel) == cache.profile_key(mild_channel, ProfileOptions())
        assert cache.profile_key(mild_channel) != cache.profile_key(
            mild_channel, ProfileOptions(resolution=50)
        )

    def test_profile_includes_length(self, mild_channel, mild_params, cache):
        longer = RectangularChannel(**{**mild_params, "length": 2000.0})
        assert cache.profile_key(mild_channel) != cache.profile_key(longer)


class TestStorage:
    """Tests de almacenamiento, expiración y tamaño."""

    def test_roundtrip_returns_copy(self, cache, mild_channel):
        result = water_surface_profile(mild_channel, num_steps=10)
        cache.put_profile(mild_channel, None, result)
        cached = cache.get_profile(mild_channel)
        assert cached == result
        assert cached is not result

    def test_mutable_values_are_copied(self, cache):
        value = {"depths": [1.0, 2.0]}
        cache.put(CRITICAL_DEPTH, "k", value)
        value["depths"].append(3.0)
        assert cache.get(CRITICAL_DEPTH, "k") == {"depths": [1.0, 2.0]}

    def test_miss(self, cache, mild_channel):
        assert cache.get_critical(mild_channel) is None
        assert cache.stats().misses == 1

    def test_expiration(self, cache, clock):
        cache.put(NORMAL_DEPTH, "k", 1.0)
        clock.advance(599)
        assert cache.get(NORMAL_DEPTH, "k") == 1.0
        clock.advance(2)
        assert cache.get(NORMAL_DEPTH, "k") is None

    def test_purge_expired(self, cache, clock):
        cache.put(NORMAL_DEPTH, "a", 1.0)
        clock.advance(300)
        cache.put(NORMAL_DEPTH, "b", 2.0)
        clock.advance(301)
        assert cache.purge_expired() == 1
        assert cache.get(NORMAL_DEPTH, "b") == 2.0

    def test_max_size_evicts_oldest(self, clock):
        cache = ResultCache(CacheConfig(max_size=2), clock=clock)
        for key in ("a", "b", "c"):
            cache.put(PROFILE, key, key)
        assert cache.get(PROFILE, "a") is None
        assert cache.get(PROFILE, "c") == "c"
        assert cache.stats().entry_counts[PROFILE] == 2

    def test_kinds_are_independent(self, cache):
        cache.put(CRITICAL_DEPTH, "k", 1.0)
        assert cache.get(NORMAL_DEPTH, "k") is None

    def test_clear(self, cache):
        cache.put(CRITICAL_DEPTH, "k", 1.0)
        cache.get(CRITICAL_DEPTH, "k")
        cache.clear()
        stats = cache.stats()
        assert stats.total_entries == 0
        assert stats.hits == 0

    def test_concurrent_puts(self, cache):
        def worker(offset):
            for i in range(50):
                cache.put(PROFILE, f"{offset}-{i}", i)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert cache.stats().entry_counts[PROFILE] == 100


class TestConfiguration:
    """Tests de configuración."""

    def test_disable(self, cache):
        cache.put(CRITICAL_DEPTH, "k", 1.0)
        cache.configure(enabled=False)
        assert cache.stats().total_entries == 0
        cache.put(CRITICAL_DEPTH, "k", 1.0)
        assert cache.get(CRITICAL_DEPTH, "k") is None

    def test_shrink_evicts(self, cache):
        for key in "abcde":
            cache.put(PROFILE, key, key)
        config = cache.configure(max_size=3)
        assert config.max_size == 3
        assert cache.stats().entry_counts[PROFILE] == 3
        assert cache.get(PROFILE, "e") == "e"

    def test_invalid(self, cache):
        with pytest.raises(ValidationError):
            cache.configure(ttl_s=-1)

    def test_stats(self, cache):
        stats = cache.stats()
        assert stats.ttl_s == 600.0
        assert stats.max_size == 100
        assert stats.enabled
        assert set(stats.entry_counts) == {CRITICAL_DEPTH, NORMAL_DEPTH, PROFILE}


class TestSharedCache:
    """Tests del cache compartido del proceso."""

    def test_singleton(self):
        assert get_cache() is get_cache()

    def test_module_functions(self):
        get_cache().put(CRITICAL_DEPTH, "k", 1.0)
        assert cache_stats().total_entries == 1
        clear_cache()
        assert cache_stats().total_entries == 0

    def test_configure_shared(self):
        try:
            assert configure_cache(ttl_s=60).ttl_s == 60
            assert cache_stats().ttl_s == 60
        finally:
            configure_cache(ttl_s=600)
