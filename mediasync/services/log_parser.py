"""Parser for the text output of earlier upload runs."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from mediasync.utils.errors import InputError

UPLOADED_MARKER = "Uploaded: "
ALREADY_UPLOADED_MARKER = "Skipping already uploaded file: "
TRANSPORT_SEPARATOR = " -> "

STATUS_CODE_RE = re.compile(r"^(\d{3})\b")
# Prefix written by the rotating file sink, e.g.
# "2024-05-01 10:00:00 | INFO     | mediasync.services.synchronizer:run_sync:97 - "
FILE_SINK_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \| [A-Z]+\s*\| \S+ - ")


@dataclass(frozen=True)
class CompletedLogEntry:
    path: str
    status_code: Optional[int]


def _resolve(path: str) -> str:
    return os.path.abspath(os.path.expanduser(path))


def parse_completed_lines(lines: Iterable[str]) -> List[CompletedLogEntry]:
    """Extract uploaded paths from log lines.

    Entries are keyed by absolute path: the last line for a path decides its
    status code, the first one decides its position.
    """
    dedup: Dict[str, Optional[int]] = {}

    for raw_line in lines:
        line = FILE_SINK_PREFIX_RE.sub("", raw_line.strip(), count=1)

        if line.startswith(UPLOADED_MARKER):
            rest = line[len(UPLOADED_MARKER):]
            file_part, _, after_arrow = rest.partition(TRANSPORT_SEPARATOR)
            file_part = file_part.strip()
            if not file_part:
                continue

            status_code = None
            match = STATUS_CODE_RE.match(after_arrow)
            if match:
                status_code = int(match.group(1))

            dedup[_resolve(file_part)] = status_code
            continue

        if line.startswith(ALREADY_UPLOADED_MARKER):
            file_part = line[len(ALREADY_UPLOADED_MARKER):].strip()
            if file_part:
                path = _resolve(file_part)
                dedup[path] = dedup.get(path)

    return [CompletedLogEntry(path=path, status_code=code) for path, code in dedup.items()]


def parse_completed_entries(log_path: str | Path) -> List[CompletedLogEntry]:
    log_path = Path(log_path)
    if not log_path.is_file():
        raise InputError(f"Log file is not found: {log_path}")

    with log_path.open("r", encoding="utf-8", errors="replace") as f:
        return parse_completed_lines(f)
