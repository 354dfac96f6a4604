"""Polling watcher reporting files created, modified or deleted in a directory."""

from __future__ import annotations

import errno
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

_Signature = tuple[int, int]


@dataclass(frozen=True)
class FileEvent:
    """A change to one entry of the watched directory."""

    path: str
    type: str  # "created", "modified" or "deleted"
    file_size: int = 0
    peer_id: int = 0


EventCallback = Callable[[FileEvent], None]


class FileWatcher:
    """Watches the entries directly inside a directory from a background thread."""

    def __init__(
        self, path: str | Path, callback: EventCallback, interval: float = 1.0
    ) -> None:
        self.watch_path = os.fspath(path)
        if not os.path.isdir(self.watch_path):
            raise FileNotFoundError(
                errno.ENOENT, "cannot watch missing directory", self.watch_path
            )
        self.interval = interval
        self._callback = callback
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._snapshot: dict[str, _Signature] = {}

    def __enter__(self) -> FileWatcher:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def start(self) -> None:
        """Begin watching; changes from now on are reported to the callback."""
        if self.is_running():
            return
        self._snapshot = self._scan()
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop watching and wait for the background thread to finish."""
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def is_running(self) -> bool:
        return self._thread is not None and not self._stop.is_set()

    def _scan(self) -> dict[str, _Signature]:
        snapshot: dict[str, _Signature] = {}
        try:
            with os.scandir(self.watch_path) as entries:
                for entry in entries:
                    try:
                        st = entry.stat(follow_symlinks=False)
                    except FileNotFoundError:
                        continue
                    snapshot[entry.name] = (st.st_mtime_ns, st.st_size)
        except FileNotFoundError:
            return {}
        return snapshot

    def _event(self, name: str, kind: str, size: int = 0) -> FileEvent:
        return FileEvent(f"{self.watch_path}/{name}", kind, size, 0)

    def _changes(
        self, before: dict[str, _Signature], after: dict[str, _Signature]
    ) -> list[FileEvent]:
        events = [
            self._event(name, "deleted") for name in sorted(before.keys() - after.keys())
        ]
        events += [
            self._event(name, "created", after[name][1])
            for name in sorted(after.keys() - before.keys())
        ]
        events += [
            self._event(name, "modified", after[name][1])
            for name in sorted(before.keys() & after.keys())
            if before[name] != after[name]
        ]
        return events

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            current = self._scan()
            events = self._changes(self._snapshot, current)
            self._snapshot = current
            for event in events:
                if self._stop.is_set():
                    return
                self._callback(event)