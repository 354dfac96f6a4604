import pytest

from sentinelfs.cache import DeviceCache, LRUCache
from sentinelfs.db import FileInfo, PeerInfo


def test_put_and_get_round_trip():
    cache = LRUCache(4)
    cache.put("a", 1)
    assert cache.get("a") == 1


def test_get_missing_returns_none():
    cache = LRUCache(4)
    assert cache.get("missing") is None


def test_evicts_least_recently_used():
    cache = LRUCache(2)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.get("a") == 1
    cache.put("c", 3)
    assert cache.exists("a")
    assert not cache.exists("b")
    assert cache.exists("c")


def test_put_existing_key_replaces_value_without_growing():
    cache = LRUCache(2)
    cache.put("a", 1)
    cache.put("a", 5)
    assert len(cache) == 1
    assert cache.get("a") == 5


def test_size_never_exceeds_max():
    cache = LRUCache(3)
    for index in range(10):
        cache.put(str(index), index)
    assert len(cache) == 3
    assert [cache.exists(str(i)) for i in range(7, 10)] == [True, True, True]


def test_zero_capacity_keeps_nothing():
    cache = LRUCache(0)
    cache.put("a", 1)
    assert not cache.exists("a")


def test_remove_and_clear():
    cache = LRUCache(4)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.remove("a")
    cache.remove("not-there")
    assert "a" not in cache
    assert "b" in cache
    cache.clear()
    assert len(cache) == 0


@pytest.fixture
def device_cache():
    return DeviceCache(8)


def test_peer_cache_round_trip(device_cache):
    peer = PeerInfo(id="peer-1", address="127.0.0.1", port=8080)
    device_cache.cache_peer(peer)
    assert device_cache.is_peer_cached("peer-1")
    assert device_cache.get_cached_peer("peer-1") == peer
    device_cache.remove_cached_peer("peer-1")
    assert not device_cache.is_peer_cached("peer-1")
    assert device_cache.get_cached_peer("peer-1") is None


def test_file_cache_round_trip(device_cache):
    info = FileInfo(path="/sync/a.txt", hash="abc", size=3)
    device_cache.cache_file_metadata(info)
    assert device_cache.is_file_cached("/sync/a.txt")
    assert device_cache.get_cached_file_metadata("/sync/a.txt") == info
    device_cache.remove_cached_file_metadata("/sync/a.txt")
    assert device_cache.get_cached_file_metadata("/sync/a.txt") is None


def test_peer_and_file_caches_are_separate(device_cache):
    device_cache.cache_peer(PeerInfo(id="same"))
    assert device_cache.is_peer_cached("same")
    assert not device_cache.is_file_cached("same")


def test_each_cache_holds_half_the_size():
    cache = DeviceCache(4)
    for index in range(3):
        cache.cache_peer(PeerInfo(id=f"p{index}"))
    assert not cache.is_peer_cached("p0")
    assert cache.is_peer_cached("p1")
    assert cache.is_peer_cached("p2")


def test_clear_caches(device_cache):
    device_cache.cache_peer(PeerInfo(id="p"))
    device_cache.cache_file_metadata(FileInfo(path="f"))
    device_cache.clear_caches()
    assert not device_cache.is_peer_cached("p")
    assert not device_cache.is_file_cached("f")