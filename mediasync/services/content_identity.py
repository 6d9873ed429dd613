"""Content identity for media files: xxHash64 digest plus byte size."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

import xxhash

from mediasync.config.settings import settings

HASH_SEED = 0
DIGEST_WIDTH = 16


@dataclass(frozen=True)
class ContentIdentity:
    """Dedup key of a file, independent of its path."""

    hash: str
    size: int

    @property
    def device_asset_id(self) -> str:
        """Stable asset id handed to the remote service."""
        return f"{self.hash}-{self.size}"


def hash_stream(stream: BinaryIO, chunk_size: int | None = None) -> str:
    """Hash a binary stream chunk by chunk.

    Returns the xxHash64 digest as a zero-padded, lower-case hex string.
    """
    chunk_size = chunk_size or settings.HASH_CHUNK_SIZE
    hasher = xxhash.xxh64(seed=HASH_SEED)
    while chunk := stream.read(chunk_size):
        hasher.update(chunk)
    return format(hasher.intdigest(), f"0{DIGEST_WIDTH}x")


def hash_file(path: str | Path, chunk_size: int | None = None) -> str:
    with Path(path).open("rb") as f:
        return hash_stream(f, chunk_size)


def compute_identity(path: str | Path) -> ContentIdentity:
    """Stat and hash a file."""
    path = Path(path)
    size = path.stat().st_size
    return ContentIdentity(hash=hash_file(path), size=size)
