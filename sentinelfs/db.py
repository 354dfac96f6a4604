"""SQLite-backed store for file metadata, peers and logged anomalies."""

from __future__ import annotations

import sqlite3
import threading
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

_FILE_COLUMNS = "path, hash, last_modified, size, device_id, version, conflict_status"
_PEER_COLUMNS = "id, address, port, latency, active, last_seen"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS files (
    path TEXT PRIMARY KEY,
    hash TEXT NOT NULL,
    last_modified TEXT NOT NULL,
    size INTEGER NOT NULL,
    device_id TEXT NOT NULL,
    version INTEGER DEFAULT 1,
    conflict_status TEXT DEFAULT 'none'
);
CREATE TABLE IF NOT EXISTS peers (
    id TEXT PRIMARY KEY,
    address TEXT NOT NULL,
    port INTEGER NOT NULL,
    latency REAL,
    active INTEGER NOT NULL,
    last_seen TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS anomalies (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    file_path TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    features TEXT
);
CREATE INDEX IF NOT EXISTS idx_files_hash ON files(hash);
CREATE INDEX IF NOT EXISTS idx_files_device ON files(device_id);
CREATE INDEX IF NOT EXISTS idx_files_modified ON files(last_modified);
CREATE INDEX IF NOT EXISTS idx_peers_active ON peers(active);
CREATE INDEX IF NOT EXISTS idx_peers_latency ON peers(latency);
CREATE INDEX IF NOT EXISTS idx_anomalies_timestamp ON anomalies(timestamp);
"""


@dataclass
class FileInfo:
    """Metadata for one synchronised file."""

    path: str = ""
    hash: str = ""
    last_modified: str = ""
    size: int = 0
    device_id: str = ""
    version: int = 1
    conflict_status: str = "none"


@dataclass
class PeerInfo:
    """A known peer in the sync network."""

    id: str = ""
    address: str = ""
    port: int = 0
    latency: float = 0.0
    active: bool = False
    last_seen: str = ""


@dataclass(frozen=True)
class DBStats:
    """Row counts and on-disk size of the database."""

    total_files: int = 0
    total_peers: int = 0
    active_peers: int = 0
    total_anomalies: int = 0
    db_size_bytes: int = 0


def _timestamp() -> str:
    return time.ctime()


def _file_from_row(row: tuple[Any, ...]) -> FileInfo:
    path, hash_, last_modified, size, device_id, version, conflict = row
    return FileInfo(path, hash_, last_modified, size, device_id, version, conflict)


def _peer_from_row(row: tuple[Any, ...]) -> PeerInfo:
    peer_id, address, port, latency, active, last_seen = row
    return PeerInfo(
        peer_id, address, port, float(latency or 0.0), bool(active), last_seen
    )


class MetadataDB:
    """Metadata database; sqlite3 errors propagate to the caller."""

    def __init__(self, db_path: str = "metadata.db") -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def __enter__(self) -> MetadataDB:
        if self._conn is None:
            self.initialize()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def initialize(self) -> None:
        """Open the database, apply pragmas and create the schema."""
        conn = sqlite3.connect(
            self.db_path, isolation_level=None, check_same_thread=False
        )
        self._conn = conn
        with self._lock:
            conn.execute("PRAGMA foreign_keys = ON;")
            conn.execute("PRAGMA journal_mode = WAL;")
            conn.execute("PRAGMA synchronous = NORMAL;")
            conn.execute("PRAGMA page_size = 4096;")
            conn.executescript(_SCHEMA)

    def close(self) -> None:
        """Close the connection if it is open."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    @property
    def _db(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("database is not initialized")
        return self._conn

    def _execute(self, sql: str, params: Iterable[Any] = ()) -> sqlite3.Cursor:
        with self._lock:
            return self._db.execute(sql, tuple(params))

    def _files(self, sql: str, params: Iterable[Any] = ()) -> list[FileInfo]:
        return [_file_from_row(row) for row in self._execute(sql, params)]

    def _peers(self, sql: str, params: Iterable[Any] = ()) -> list[PeerInfo]:
        return [_peer_from_row(row) for row in self._execute(sql, params)]

    def _count(self, sql: str) -> int:
        row = self._execute(sql).fetchone()
        return int(row[0]) if row and row[0] is not None else 0

    # Files

    def add_file(self, file_info: FileInfo) -> None:
        """Insert a file record, replacing any record with the same path."""
        self._execute(
            f"INSERT OR REPLACE INTO files ({_FILE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                file_info.path,
                file_info.hash,
                file_info.last_modified,
                file_info.size,
                file_info.device_id,
                file_info.version,
                file_info.conflict_status,
            ),
        )

    def update_file(self, file_info: FileInfo) -> None:
        """Store a file record; same as add_file."""
        self.add_file(file_info)

    def delete_file(self, file_path: str) -> None:
        self._execute("DELETE FROM files WHERE path = ?", (file_path,))

    def get_file(self, file_path: str) -> FileInfo | None:
        """Return the record for a path, or None if there is none."""
        files = self._files(
            f"SELECT {_FILE_COLUMNS} FROM files WHERE path = ?", (file_path,)
        )
        return files[0] if files else None

    def get_all_files(self) -> list[FileInfo]:
        return self._files(f"SELECT {_FILE_COLUMNS} FROM files")

    # Peers

    def add_peer(self, peer: PeerInfo) -> None:
        """Insert or replace a peer, stamping it with the current time."""
        self._execute(
            f"INSERT OR REPLACE INTO peers ({_PEER_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            (
                peer.id,
                peer.address,
                peer.port,
                peer.latency,
                1 if peer.active else 0,
                _timestamp(),
            ),
        )

    def update_peer(self, peer: PeerInfo) -> None:
        """Store a peer; same as add_peer."""
        self.add_peer(peer)

    def remove_peer(self, peer_id: str) -> None:
        self._execute("DELETE FROM peers WHERE id = ?", (peer_id,))

    def get_peer(self, peer_id: str) -> PeerInfo | None:
        """Return the peer with this id, or None if there is none."""
        peers = self._peers(
            f"SELECT {_PEER_COLUMNS} FROM peers WHERE id = ?", (peer_id,)
        )
        return peers[0] if peers else None

    def get_all_peers(self) -> list[PeerInfo]:
        return self._peers(f"SELECT {_PEER_COLUMNS} FROM peers")

    # Anomalies

    def log_anomaly(self, file_path: str, features: Iterable[float]) -> None:
        """Record an anomaly with its feature vector."""
        features_str = "[" + ",".join(f"{value:f}" for value in features) + "]"
        self._execute(
            "INSERT INTO anomalies (file_path, timestamp, features) VALUES (?, ?, ?)",
            (file_path, _timestamp(), features_str),
        )

    def get_anomalies(self) -> list[dict[str, str]]:
        """Return logged anomalies, newest timestamp first."""
        rows = self._execute(
            "SELECT id, file_path, timestamp, features FROM anomalies "
            "ORDER BY timestamp DESC"
        )
        return [
            {
                "id": str(row_id),
                "file_path": file_path,
                "timestamp": timestamp,
                "features": features or "",
            }
            for row_id, file_path, timestamp, features in rows
        ]

    # Transactions

    def begin_transaction(self) -> None:
        self._execute("BEGIN TRANSACTION;")

    def commit(self) -> None:
        self._execute("COMMIT;")

    def rollback(self) -> None:
        self._execute("ROLLBACK;")

    def _batch(self, files: Iterable[FileInfo]) -> None:
        items = list(files)
        if not items:
            return
        with self._lock:
            self.begin_transaction()
            try:
                for file_info in items:
                    self.add_file(file_info)
            except BaseException:
                self.rollback()
                raise
            self.commit()

    def add_files_batch(self, files: Iterable[FileInfo]) -> None:
        """Insert all records in one transaction; nothing is kept on failure."""
        self._batch(files)

    def update_files_batch(self, files: Iterable[FileInfo]) -> None:
        """Update all records in one transaction; nothing is kept on failure."""
        self._batch(files)

    # Queries

    def get_files_modified_after(self, timestamp: str) -> list[FileInfo]:
        """Files whose last_modified sorts after timestamp, newest first."""
        return self._files(
            f"SELECT {_FILE_COLUMNS} FROM files WHERE last_modified > ? "
            "ORDER BY last_modified DESC",
            (timestamp,),
        )

    def get_files_by_device(self, device_id: str) -> list[FileInfo]:
        return self._files(
            f"SELECT {_FILE_COLUMNS} FROM files WHERE device_id = ?", (device_id,)
        )

    def get_active_peers(self) -> list[PeerInfo]:
        """Active peers ordered by ascending latency."""
        return self._peers(
            f"SELECT {_PEER_COLUMNS} FROM peers WHERE active = 1 ORDER BY latency ASC"
        )

    def get_files_by_hash_prefix(self, hash_prefix: str) -> list[FileInfo]:
        return self._files(
            f"SELECT {_FILE_COLUMNS} FROM files WHERE hash LIKE ?",
            (hash_prefix + "%",),
        )

    def get_statistics(self) -> DBStats:
        return DBStats(
            total_files=self._count("SELECT COUNT(*) FROM files"),
            total_peers=self._count("SELECT COUNT(*) FROM peers"),
            active_peers=self._count("SELECT COUNT(*) FROM peers WHERE active = 1"),
            total_anomalies=self._count("SELECT COUNT(*) FROM anomalies"),
            db_size_bytes=self._count(
                "SELECT page_count * page_size AS size "
                "FROM pragma_page_count(), pragma_page_size()"
            ),
        )

    # Maintenance

    def vacuum(self) -> None:
        self._execute("VACUUM;")

    def analyze(self) -> None:
        self._execute("ANALYZE;")

    def optimize(self) -> None:
        with self._lock:
            self._execute("PRAGMA optimize;")
            self.analyze()

    def __iter__(self) -> Iterator[FileInfo]:
        return iter(self.get_all_files())