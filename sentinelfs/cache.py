"""Thread-safe LRU caches for peer and file metadata."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Generic, TypeVar

from .db import FileInfo, PeerInfo

V = TypeVar("V")


class LRUCache(Generic[V]):
    """A bounded mapping that evicts the least recently used key."""

    def __init__(self, max_size: int = 1024) -> None:
        self.max_size = max_size
        self._items: OrderedDict[str, V] = OrderedDict()
        self._lock = threading.Lock()

    def put(self, key: str, value: V) -> None:
        """Store a value, evicting the least recently used entries if full."""
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            while len(self._items) > self.max_size:
                self._items.popitem(last=False)

    def get(self, key: str) -> V | None:
        """Return the value for key and mark it recently used, or None."""
        with self._lock:
            if key not in self._items:
                return None
            self._items.move_to_end(key)
            return self._items[key]

    def exists(self, key: str) -> bool:
        """Report whether key is cached, without touching its recency."""
        with self._lock:
            return key in self._items

    def remove(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class DeviceCache:
    """Separate LRU caches for peers and file metadata, half the size each."""

    def __init__(self, max_size: int = 512) -> None:
        self._peers: LRUCache[PeerInfo] = LRUCache(max_size // 2)
        self._files: LRUCache[FileInfo] = LRUCache(max_size // 2)
        self._lock = threading.Lock()

    def cache_peer(self, peer: PeerInfo) -> None:
        with self._lock:
            self._peers.put(peer.id, peer)

    def get_cached_peer(self, peer_id: str) -> PeerInfo | None:
        with self._lock:
            return self._peers.get(peer_id)

    def is_peer_cached(self, peer_id: str) -> bool:
        with self._lock:
            return self._peers.exists(peer_id)

    def remove_cached_peer(self, peer_id: str) -> None:
        with self._lock:
            self._peers.remove(peer_id)

    def cache_file_metadata(self, file_info: FileInfo) -> None:
        with self._lock:
            self._files.put(file_info.path, file_info)

    def get_cached_file_metadata(self, file_path: str) -> FileInfo | None:
        with self._lock:
            return self._files.get(file_path)

    def is_file_cached(self, file_path: str) -> bool:
        with self._lock:
            return self._files.exists(file_path)

    def remove_cached_file_metadata(self, file_path: str) -> None:
        with self._lock:
            self._files.remove(file_path)

    def clear_caches(self) -> None:
        with self._lock:
            self._peers.clear()
            self._files.clear()