# sentinelfs

Building blocks for keeping a folder in sync between peers. Each module
stands on its own and uses only the Python standard library. File locking
relies on `fcntl`, so the package targets POSIX systems.

## What is inside

| Module | Purpose |
| --- | --- |
| `sentinelfs.db` | SQLite store for file metadata, peers and logged anomalies (`MetadataDB`, `FileInfo`, `PeerInfo`, `DBStats`) |
| `sentinelfs.cache` | Thread-safe least-recently-used cache (`LRUCache`) and a peer/file metadata cache built on it (`DeviceCache`) |
| `sentinelfs.file_queue` | Thread-safe FIFO of pending sync work (`FileQueue`, `SyncItem`) |
| `sentinelfs.compressor` | Gzip compression of bytes and files (`Compressor`, `CompressionAlgorithm`, `compression_ratio`) |
| `sentinelfs.logger` | Timestamped logger writing to stdout and optionally a file, with `{}` placeholders (`Logger`, `LogLevel`, `format_message`) |
| `sentinelfs.delta_engine` | SHA-256 hashing and whole-file or block-based deltas (`DeltaEngine`, `DeltaData`, `DeltaChunk`, `FileBlock`, `calculate_hash`, `block_checksum`, `calculate_file_blocks`, `compute_block_based_delta`) |
| `sentinelfs.file_locker` | Advisory shared/exclusive `flock` locks with a timeout (`FileLocker`, `LockType`, `FileLockInfo`) |
| `sentinelfs.conflict_resolver` | Detect and resolve conflicting file versions (`ConflictResolver`, `ConflictResolutionStrategy`, `FileConflict`, `file_modification_time`) |
| `sentinelfs.watcher` | Polling watcher for entries created, modified or deleted directly inside a directory (`FileWatcher`, `FileEvent`) |
| `sentinelfs.cli` | Parsing of sync-session options into a `Config` (`parse_arguments`, `print_usage`, `print_version`) |
| `sentinelfs.ml_demo` | Heuristic scoring of file accesses and network links (`SimpleMLAnalyzer`) and the demo command |

## Notes on behaviour

- `MetadataDB("metadata.db")` opens its database in `initialize()` or on
  entering a `with` block. `get_file` and `get_peer` return `None` when
  nothing matches; sqlite3 errors are raised to the caller.
  `add_files_batch` stores all records in one transaction and keeps none
  of them if one fails.
- `LRUCache.get` returns `None` for a missing key. `DeviceCache(max_size)`
  gives half of `max_size` to peers and half to files.
- `FileQueue.dequeue` returns `None` when empty; `wait_for_item(timeout)`
  returns `False` if the timeout runs out.
- `Compressor` produces gzip data for `GZIP` and for `ZSTD`; `LZ4` and
  `NONE` leave data unchanged. `decompress` raises `ValueError` on
  malformed gzip data.
- `ConflictResolver` strategies: `TIMESTAMP` keeps the newer file,
  `LATEST` and `P2P_VOTE` keep the remote file, `MERGE` writes
  `<local>.merged` with the remote content appended after a separator,
  `BACKUP` copies both files to `<file>.backup_<seconds>` and keeps the
  remote file; `ASK_USER` behaves like `TIMESTAMP`.
- `FileWatcher(path, callback, interval=1.0)` rescans the directory every
  `interval` seconds from a background thread and reports only changes
  made after `start()`.
- `parse_arguments(argv)` understands `--session`, `--path`, `--port`,
  `--config`, `--verbose`, `--daemon`, `--help` and `--version`. It raises
  `SystemExit(0)` after help or version and `SystemExit(1)` on an unknown
  option, a non-numeric port, or a missing `--session` or `--path`.

## Examples

Compress and restore some bytes:

```python
from sentinelfs.compressor import CompressionAlgorithm, Compressor, compression_ratio

compressor = Compressor(CompressionAlgorithm.GZIP)
packed = compressor.compress(b"hello hello hello hello")
assert compressor.decompress(packed) == b"hello hello hello hello"
print(compression_ratio(b"hello hello hello hello", packed))
```

Record file metadata:

```python
from sentinelfs.db import FileInfo, MetadataDB

with MetadataDB(":memory:") as db:
    db.add_file(FileInfo(path="docs/report.txt", hash="ab12", size=10, device_id="dev-1"))
    print(db.get_file("docs/report.txt"))
    print(db.get_statistics().total_files)
```

Queue work for a sync loop:

```python
from sentinelfs.file_queue import FileQueue, SyncItem

queue = FileQueue()
queue.enqueue(SyncItem("docs/report.txt", "update"))
queue.enqueue(SyncItem("docs/old.txt", "delete"))
for item in queue.dequeue_batch(10):
    print(item.operation, item.file_path)
```

Find which blocks of a file changed and write them into a copy:

```python
from sentinelfs.delta_engine import DeltaEngine, calculate_hash, compute_block_based_delta

delta = compute_block_based_delta("old.bin", "new.bin", 1024)
print(len(delta.chunks), "changed blocks; new hash", calculate_hash("new.bin"))
DeltaEngine("new.bin").apply(delta, "copy-of-old.bin")
```

Lock a file while working on it:

```python
from sentinelfs.file_locker import FileLocker, LockType

with FileLocker() as locker:
    if locker.acquire_lock("data.bin", LockType.WRITE, timeout=1.0):
        ...
        locker.release_lock("data.bin")
```

Log with placeholders:

```python
from sentinelfs.logger import Logger, LogLevel

log = Logger()
log.set_level(LogLevel.DEBUG)
log.info("synced {} files to {}", 3, "peer-a")
```

## Command

The package installs one command, which scores randomly generated access
and network samples with `SimpleMLAnalyzer` and prints the results:

```
sentinelfs-ml-demo
sentinelfs-ml-demo --seed 42
```

`--seed` makes the generated samples repeatable.

## What the package does not do

It provides the pieces, not a running sync service. There is no peer
discovery, no network transfer and no encryption, and no command that
starts a sync session: `sentinelfs.cli` only turns options into a
`Config`. There is no graphical interface. The analyzer in
`sentinelfs.ml_demo` uses fixed heuristics and does not learn from
feedback.

## Running the tests

The test suite uses pytest; install the `test` extra and run `pytest`
from the project directory.