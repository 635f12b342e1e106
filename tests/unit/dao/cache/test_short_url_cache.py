"""Unit tests for the bounded TTL ShortURLCache

Test coverage includes:

1. Basic operations
   - set/get/has/delete/clear and __len__.

2. FIFO eviction
   - Inserting max_size + 1 distinct keys evicts the first-inserted key.
   - Reading a key doesn't protect it from eviction (not LRU).
   - Re-setting an existing key refreshes it in place without evicting.

3. TTL expiry
   - get()/has() lazily remove expired entries (frozen clock).
   - sweep() removes every expired entry and reports the count.

4. Statistics
   - stats() reports size, max_size, ttl and utilization percentage.

5. Fault isolation
   - Internal failures are logged and degrade to a miss, never raised.

6. Background sweep lifecycle
   - start() schedules the sweeper and close() stops it and clears entries.
"""

import logging
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from shortlinks.dao.cache import ShortURLCache


# -------------------------------
# Fixtures
# -------------------------------

@pytest.fixture
def small_cache() -> ShortURLCache:
    return ShortURLCache(max_size=3, ttl=60, sweep_interval=300)


# -------------------------------
# 1. Basic operations
# -------------------------------

def test_set_and_get(small_cache):
    value = object()
    assert small_cache.set('abc123', value) is True
    assert small_cache.get('abc123') is value
    assert small_cache.has('abc123') is True
    assert len(small_cache) == 1


def test_get_missing_key_returns_none(small_cache):
    assert small_cache.get('missing') is None
    assert small_cache.has('missing') is False


def test_delete(small_cache):
    small_cache.set('abc123', 'value')
    assert small_cache.delete('abc123') is True
    assert small_cache.delete('abc123') is False
    assert small_cache.get('abc123') is None


def test_clear(small_cache):
    small_cache.set('a', 1)
    small_cache.set('b', 2)
    small_cache.clear()
    assert len(small_cache) == 0


@pytest.mark.parametrize('max_size, ttl', [(0, 60), (-1, 60), (10, 0), (10, -5)])
def test_invalid_construction_parameters(max_size, ttl):
    with pytest.raises(ValueError):
        ShortURLCache(max_size=max_size, ttl=ttl)


# -------------------------------
# 2. FIFO eviction
# -------------------------------

def test_inserting_beyond_capacity_evicts_first_inserted(small_cache):
    for key in ('a', 'b', 'c', 'd'):
        small_cache.set(key, key.upper())

    assert len(small_cache) == 3
    assert small_cache.has('a') is False
    assert [small_cache.get(key) for key in ('b', 'c', 'd')] == ['B', 'C', 'D']


def test_reads_do_not_protect_from_eviction(small_cache):
    for key in ('a', 'b', 'c'):
        small_cache.set(key, key)

    # Under LRU this would save 'a'; FIFO evicts it anyway
    small_cache.get('a')
    small_cache.set('d', 'd')

    assert small_cache.has('a') is False
    assert small_cache.has('b') is True


def test_resetting_existing_key_keeps_position_and_does_not_evict(small_cache):
    for key in ('a', 'b', 'c'):
        small_cache.set(key, key)

    small_cache.set('a', 'updated')
    assert len(small_cache) == 3
    assert small_cache.get('a') == 'updated'

    small_cache.set('d', 'd')
    assert small_cache.has('a') is False
    assert small_cache.has('b') is True


# -------------------------------
# 3. TTL expiry
# -------------------------------

def test_get_removes_expired_entry(small_cache):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        small_cache.set('abc123', 'value')

        frozen.tick(timedelta(seconds=60))
        assert small_cache.get('abc123') == 'value'  # now == expiry: still fresh

        frozen.tick(timedelta(seconds=1))
        assert small_cache.get('abc123') is None
        assert len(small_cache) == 0


def test_has_removes_expired_entry(small_cache):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        small_cache.set('abc123', 'value')
        frozen.tick(timedelta(seconds=61))
        assert small_cache.has('abc123') is False
        assert len(small_cache) == 0


def test_reset_refreshes_expiry(small_cache):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        small_cache.set('abc123', 'value')
        frozen.tick(timedelta(seconds=50))
        small_cache.set('abc123', 'value')
        frozen.tick(timedelta(seconds=50))
        assert small_cache.get('abc123') == 'value'


def test_sweep_removes_only_expired_entries(small_cache):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        small_cache.set('old1', 1)
        small_cache.set('old2', 2)
        frozen.tick(timedelta(seconds=30))
        small_cache.set('fresh', 3)
        frozen.tick(timedelta(seconds=31))

        assert small_cache.sweep() == 2
        assert len(small_cache) == 1
        assert small_cache.get('fresh') == 3
        assert small_cache.sweep() == 0


# -------------------------------
# 4. Statistics
# -------------------------------

def test_stats():
    cache = ShortURLCache(max_size=4, ttl=3600)
    cache.set('a', 1)

    assert cache.stats() == {'size': 1, 'max_size': 4, 'ttl': 3600, 'utilization': 25.0}


# -------------------------------
# 5. Fault isolation
# -------------------------------

def test_internal_faults_degrade_to_miss(small_cache, caplog):
    broken = MagicMock()
    broken.get.side_effect = RuntimeError('boom')
    broken.pop.side_effect = RuntimeError('boom')
    broken.__len__.side_effect = RuntimeError('boom')
    broken.items.side_effect = RuntimeError('boom')
    small_cache._entries = broken

    with caplog.at_level(logging.ERROR, logger='shortlinks.dao.cache.short_url_cache'):
        assert small_cache.get('abc123') is None
        assert small_cache.has('abc123') is False
        assert small_cache.set('abc123', 'value') is False
        assert small_cache.delete('abc123') is False
        assert small_cache.sweep() == 0

    assert sum(record.getMessage() == 'Cache operation failed.' for record in caplog.records) == 5


# -------------------------------
# 6. Background sweep lifecycle
# -------------------------------

def test_start_and_close(small_cache):
    small_cache.set('abc123', 'value')
    small_cache.start()
    assert small_cache._sweeper.is_alive is True

    small_cache.close()
    assert small_cache._sweeper.is_alive is False
    assert len(small_cache) == 0
