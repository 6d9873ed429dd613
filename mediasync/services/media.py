"""Media file classification and directory walking."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List

VIDEO_EXTENSIONS = (
    ".mp4", ".mov", ".avi", ".mkv", ".webm", ".wmv", ".flv", ".m4v",
    ".3gp", ".mts", ".ts", ".m2ts", ".mpeg", ".mpg",
)

MEDIA_EXTENSIONS = (
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".heic",
    # Canon RAW
    ".cr2", ".cr3", ".crw",
    # Scientific imaging
    ".fit", ".fits", ".fts", ".dcm", ".nii", ".nii.gz", ".tif", ".tiff",
) + VIDEO_EXTENSIONS


def is_media_file(path: str | Path) -> bool:
    """Return True when the path ends with a supported media extension."""
    return str(path).lower().endswith(MEDIA_EXTENSIONS)


def is_video_file(path: str | Path) -> bool:
    return str(path).lower().endswith(VIDEO_EXTENSIONS)


def _raise_walk_error(error: OSError) -> None:
    raise error


def iter_media_files(root: str | Path) -> Iterator[Path]:
    """Yield absolute paths of media files under root, recursively.

    Symlinked directories are followed, each real directory at most once.
    Paths keep the spelling they were reached by, so they match paths
    written to logs. An unreadable directory raises instead of being skipped.
    """
    visited = set()
    top = os.path.abspath(os.path.expanduser(root))
    for dirpath, dirnames, filenames in os.walk(top, onerror=_raise_walk_error, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in visited:
            dirnames[:] = []
            continue
        visited.add(real)
        for name in filenames:
            if is_media_file(name):
                yield Path(dirpath) / name


def get_all_media_files(root: str | Path) -> List[Path]:
    return sorted(iter_media_files(root))
