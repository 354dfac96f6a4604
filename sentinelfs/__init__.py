"""Building blocks for peer-to-peer folder sync: metadata store, caches, queue,
deltas, compression, file locks, conflict resolution and directory watching."""

__version__ = "1.0.0"