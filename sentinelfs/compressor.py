"""Byte and file compression with selectable algorithms."""

from __future__ import annotations

import enum
import zlib
from pathlib import Path

_GZIP_WBITS = 15 + 16


class CompressionAlgorithm(enum.Enum):
    GZIP = "gzip"
    ZSTD = "zstd"
    LZ4 = "lz4"
    NONE = "none"


def _gzip_compress(data: bytes) -> bytes:
    if not data:
        return b""
    compressor = zlib.compressobj(
        zlib.Z_DEFAULT_COMPRESSION, zlib.DEFLATED, _GZIP_WBITS, 8
    )
    return compressor.compress(data) + compressor.flush()


def _gzip_decompress(data: bytes) -> bytes:
    if not data:
        return b""
    decompressor = zlib.decompressobj(_GZIP_WBITS)
    try:
        result = decompressor.decompress(data)
    except zlib.error as exc:
        raise ValueError(f"invalid gzip data: {exc}") from exc
    if not decompressor.eof:
        raise ValueError("invalid gzip data: stream is truncated")
    return result


class Compressor:
    """Compresses bytes with the configured algorithm.

    ZSTD currently uses the gzip format and LZ4 stores data unchanged.
    """

    def __init__(
        self, algorithm: CompressionAlgorithm = CompressionAlgorithm.GZIP
    ) -> None:
        self.algorithm = algorithm

    def compress(self, data: bytes) -> bytes:
        if self.algorithm in (CompressionAlgorithm.GZIP, CompressionAlgorithm.ZSTD):
            return _gzip_compress(bytes(data))
        return bytes(data)

    def decompress(self, compressed_data: bytes) -> bytes:
        """Undo compress; raises ValueError on malformed compressed data."""
        if self.algorithm in (CompressionAlgorithm.GZIP, CompressionAlgorithm.ZSTD):
            return _gzip_decompress(bytes(compressed_data))
        return bytes(compressed_data)

    def compress_file(self, input_path: str | Path, output_path: str | Path) -> None:
        Path(output_path).write_bytes(self.compress(Path(input_path).read_bytes()))

    def decompress_file(
        self, input_path: str | Path, output_path: str | Path
    ) -> None:
        Path(output_path).write_bytes(self.decompress(Path(input_path).read_bytes()))


def compression_ratio(original: bytes, compressed: bytes) -> float:
    """Compressed size over original size; 0.0 for empty input."""
    if not original:
        return 0.0
    return len(compressed) / len(original)