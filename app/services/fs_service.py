from __future__ import annotations

import mimetypes
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from app.services.exceptions import FileNotFoundOnDiskError, PathOutsideRootError
from app.services.serve_root import resolve_chunk_size


@dataclass(frozen=True)
class FileStat:
    size: int


def stat_file(path: Path) -> FileStat:
    try:
        st = os.stat(path)
    except FileNotFoundError:
        raise FileNotFoundOnDiskError("file not found") from None
    if not stat.S_ISREG(st.st_mode):
        raise FileNotFoundOnDiskError("file not found")
    return FileStat(size=st.st_size)


def open_stream(
    path: Path,
    start: Optional[int] = None,
    end: Optional[int] = None,
    *,
    chunk_size: Optional[int] = None,
) -> Iterator[bytes]:
    """Byte stream over ``path`` from ``start`` to ``end`` inclusive.

    The file is opened on first iteration and closed once the stream is
    exhausted or ``close()`` is called on it. Without ``end`` it reads to EOF.
    """
    begin = start or 0
    remaining = None if end is None else end - begin + 1
    size = chunk_size or resolve_chunk_size()

    def _iterator():
        with open(path, "rb") as handle:
            if begin:
                handle.seek(begin)
            left = remaining
            while left is None or left > 0:
                read_len = size if left is None else min(size, left)
                data = handle.read(read_len)
                if not data:
                    break
                if left is not None:
                    left -= len(data)
                yield data

    return _iterator()


def guess_mime(path: Path) -> str:
    mime, _ = mimetypes.guess_type(path.name)
    return mime or "application/octet-stream"


@dataclass(frozen=True)
class ServedFile:
    path: Path
    stat: FileStat


def resolve_served_file(root: Path, relative_path: str) -> ServedFile:
    rel = (relative_path or "").lstrip("/")
    base = root.resolve(strict=False)
    candidate = (base / rel).resolve(strict=False)
    try:
        common = os.path.commonpath([candidate, base])
    except ValueError:
        raise PathOutsideRootError("invalid path") from None
    if common != str(base):
        raise PathOutsideRootError("path outside root")
    return ServedFile(path=candidate, stat=stat_file(candidate))
