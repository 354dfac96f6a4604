"""Whole-file and block-based deltas between file versions."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from pathlib import Path

from .compressor import CompressionAlgorithm, Compressor

DEFAULT_BLOCK_SIZE = 1024


@dataclass
class DeltaChunk:
    """A run of bytes to be written at an offset of the target file."""

    offset: int
    length: int
    data: bytes = b""
    checksum: str = ""


@dataclass
class DeltaData:
    """The chunks that turn one version of a file into another."""

    file_path: str = ""
    chunks: list[DeltaChunk] = field(default_factory=list)
    old_hash: str = ""
    new_hash: str = ""
    is_compressed: bool = False


@dataclass(frozen=True)
class FileBlock:
    """Checksum of one fixed-size block of a file."""

    offset: int = 0
    checksum: str = ""
    length: int = 0


def _read_bytes(file_path: str | Path) -> bytes | None:
    try:
        return Path(file_path).read_bytes()
    except (OSError, ValueError):
        return None


def _check_block_size(block_size: int) -> None:
    if block_size <= 0:
        raise ValueError(f"block size must be positive, got {block_size}")


def block_checksum(data: bytes) -> str:
    """Hex SHA-256 digest of a block of bytes."""
    return hashlib.sha256(bytes(data)).hexdigest()


def calculate_hash(file_path: str | Path) -> str:
    """Hex SHA-256 digest of a file's contents, or "" if it cannot be read."""
    content = _read_bytes(file_path)
    if content is None:
        return ""
    return block_checksum(content)


def _blocks(content: bytes, block_size: int) -> list[tuple[int, bytes]]:
    return [
        (offset, content[offset : offset + block_size])
        for offset in range(0, len(content), block_size)
    ]


def calculate_file_blocks(
    file_path: str | Path, block_size: int = DEFAULT_BLOCK_SIZE
) -> list[FileBlock]:
    """Split a file into blocks and checksum each; [] if it cannot be read."""
    _check_block_size(block_size)
    content = _read_bytes(file_path)
    if content is None:
        return []
    return [
        FileBlock(offset, block_checksum(block), len(block))
        for offset, block in _blocks(content, block_size)
    ]


def compute_block_based_delta(
    old_file: str | Path, new_file: str | Path, block_size: int = DEFAULT_BLOCK_SIZE
) -> DeltaData:
    """Chunks of new_file whose checksum matches no block of old_file."""
    _check_block_size(block_size)
    delta = DeltaData(str(new_file))
    known = {block.checksum for block in calculate_file_blocks(old_file, block_size)}
    content = _read_bytes(new_file)
    if content is None:
        return delta
    for offset, block in _blocks(content, block_size):
        checksum = block_checksum(block)
        if checksum not in known:
            delta.chunks.append(DeltaChunk(offset, len(block), block, checksum))
    return delta


class DeltaEngine:
    """Computes and applies deltas, optionally compressing chunk data."""

    def __init__(self, file_path: str | Path) -> None:
        self.file_path = str(file_path)
        self.compressor = Compressor(CompressionAlgorithm.GZIP)

    def compute(self) -> DeltaData:
        """The whole current file as a single chunk."""
        delta = DeltaData(self.file_path, new_hash=calculate_hash(self.file_path))
        content = _read_bytes(self.file_path)
        if content:
            delta.chunks.append(DeltaChunk(0, len(content), content))
        return delta

    def compute_between(self, old_file: str | Path, new_file: str | Path) -> DeltaData:
        """The whole of new_file as one chunk, unless both files hash the same."""
        delta = DeltaData(
            str(new_file),
            old_hash=calculate_hash(old_file),
            new_hash=calculate_hash(new_file),
        )
        if delta.old_hash != delta.new_hash:
            content = _read_bytes(new_file)
            if content:
                delta.chunks.append(DeltaChunk(0, len(content), content))
        return delta

    def compute_rsync(
        self,
        old_file: str | Path,
        new_file: str | Path,
        block_size: int = DEFAULT_BLOCK_SIZE,
    ) -> DeltaData:
        """Rsync-style delta: only the blocks of new_file not found in old_file."""
        return compute_block_based_delta(old_file, new_file, block_size)

    def compute_compressed(
        self, old_file: str | Path, new_file: str | Path
    ) -> DeltaData:
        """Like compute_between, with each chunk's data compressed."""
        delta = self.compute_between(old_file, new_file)
        if delta.chunks:
            for chunk in delta.chunks:
                chunk.data = self.compressor.compress(chunk.data)
            delta.is_compressed = True
        return delta

    def apply(self, delta: DeltaData, target_file: str | Path) -> None:
        """Write each chunk at its offset, creating the target if needed."""
        path = Path(target_file)
        mode = "r+b" if path.exists() else "w+b"
        with open(path, mode) as handle:
            for chunk in delta.chunks:
                handle.seek(chunk.offset)
                handle.write(chunk.data[: chunk.length])

    def apply_compressed(self, delta: DeltaData, target_file: str | Path) -> None:
        """Decompress the chunks if needed, then apply them."""
        if not delta.is_compressed:
            self.apply(delta, target_file)
            return
        plain = replace(
            delta,
            chunks=[
                replace(chunk, data=self.compressor.decompress(chunk.data))
                for chunk in delta.chunks
            ],
            is_compressed=False,
        )
        self.apply(plain, target_file)

    def set_compression(self, algorithm: CompressionAlgorithm) -> None:
        self.compressor.algorithm = algorithm