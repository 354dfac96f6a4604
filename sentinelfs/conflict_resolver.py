"""Detection and resolution of conflicting local and remote file versions."""

from __future__ import annotations

import enum
import os
import shutil
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from .db import PeerInfo

_BUFFER_SIZE = 8192
MERGE_SEPARATOR = b"\n--- MERGED FROM REMOTE ---\n"


class ConflictResolutionStrategy(enum.Enum):
    TIMESTAMP = "timestamp"  # keep the most recently modified version
    LATEST = "latest"  # always keep the remote version
    MERGE = "merge"  # append the remote content to the local content
    ASK_USER = "ask_user"  # not interactive; behaves like TIMESTAMP
    BACKUP = "backup"  # back up both versions, keep the remote one
    P2P_VOTE = "p2p_vote"  # peer voting; currently keeps the remote version


_REMOTE_WINS = frozenset(
    {ConflictResolutionStrategy.LATEST, ConflictResolutionStrategy.P2P_VOTE}
)


@dataclass
class FileConflict:
    """Two diverging versions of the same file."""

    file_path: str
    local_version: str = ""
    remote_version: str = ""
    local_timestamp: str = ""
    remote_timestamp: str = ""
    conflicting_peers: list[PeerInfo] = field(default_factory=list)
    detected_at: datetime = field(default_factory=datetime.now)


def file_modification_time(filepath: str | Path) -> str:
    """Modification time in whole seconds since the epoch, or "" if unknown."""
    try:
        return str(int(os.stat(filepath).st_mtime))
    except OSError:
        return ""


def _contents_differ(local_file: str | Path, remote_file: str | Path) -> bool:
    try:
        with open(local_file, "rb") as local, open(remote_file, "rb") as remote:
            if os.fstat(local.fileno()).st_size != os.fstat(remote.fileno()).st_size:
                return True
            while True:
                local_block = local.read(_BUFFER_SIZE)
                remote_block = remote.read(_BUFFER_SIZE)
                if local_block != remote_block:
                    return True
                if not local_block:
                    return False
    except OSError:
        return False


class ConflictResolver:
    """Chooses which version of a conflicting file to keep."""

    def __init__(
        self,
        strategy: ConflictResolutionStrategy = ConflictResolutionStrategy.TIMESTAMP,
    ) -> None:
        self.strategy = strategy
        self._conflicts: list[FileConflict] = []
        self._lock = threading.Lock()

    def check_conflict(
        self, local_file: str | Path, remote_file: str | Path
    ) -> bool:
        """True if both files can be read and their contents differ."""
        return _contents_differ(local_file, remote_file)

    def resolve_conflict(self, conflict: FileConflict) -> str:
        """Record the conflict and return the path of the version to keep."""
        self.register_conflict(conflict)
        return self.apply_strategy(
            conflict.local_version,
            conflict.remote_version,
            conflict.conflicting_peers,
        )

    def apply_strategy(
        self,
        local_file: str | Path,
        remote_file: str | Path,
        peers: Iterable[PeerInfo] = (),
    ) -> str:
        """Return the path of the version chosen by the current strategy.

        LATEST and P2P_VOTE keep the remote version; peer votes are not
        collected yet, so the peers do not change the outcome.
        """
        local, remote = os.fspath(local_file), os.fspath(remote_file)
        if self.strategy in _REMOTE_WINS:
            return remote
        handlers: dict[ConflictResolutionStrategy, Callable[[str, str], str]] = {
            ConflictResolutionStrategy.MERGE: self._resolve_by_merge,
            ConflictResolutionStrategy.BACKUP: self._resolve_by_backup,
        }
        handler = handlers.get(self.strategy, self._resolve_by_timestamp)
        return handler(local, remote)

    def create_backup(self, filepath: str | Path) -> str:
        """Copy filepath next to itself with a timestamp suffix; return the copy."""
        source = os.fspath(filepath)
        backup_path = f"{source}.backup_{int(time.time())}"
        shutil.copyfile(source, backup_path)
        return backup_path

    def register_conflict(self, conflict: FileConflict) -> None:
        with self._lock:
            self._conflicts.append(conflict)

    def get_conflicts(self) -> list[FileConflict]:
        """A copy of the conflicts registered so far, oldest first."""
        with self._lock:
            return list(self._conflicts)

    # Strategies

    def _resolve_by_timestamp(self, local_file: str, remote_file: str) -> str:
        local_time = file_modification_time(local_file)
        remote_time = file_modification_time(remote_file)
        if not local_time or not remote_time:
            return remote_file
        return local_file if int(local_time) > int(remote_time) else remote_file

    def _resolve_by_merge(self, local_file: str, remote_file: str) -> str:
        try:
            local_content = Path(local_file).read_bytes()
            remote_content = Path(remote_file).read_bytes()
        except OSError:
            return remote_file
        merged = local_content
        if local_content != remote_content:
            merged += MERGE_SEPARATOR + remote_content
        merged_file = local_file + ".merged"
        try:
            Path(merged_file).write_bytes(merged)
        except OSError:
            return remote_file
        return merged_file

    def _resolve_by_backup(self, local_file: str, remote_file: str) -> str:
        for path in (local_file, remote_file):
            try:
                self.create_backup(path)
            except OSError:
                pass
        return remote_file