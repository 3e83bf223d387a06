from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

from app.services import fs_service
from app.services.exceptions import (
    MalformedRangeError,
    RangeNotSatisfiableError,
    ServiceError,
    UnsupportedMultiRangeError,
)

_DIGITS = re.compile(r"[0-9]+")
# Larger than any file offset; longer bounds are rejected before int() conversion.
_MAX_OFFSET_DIGITS = 20
_TEXT_PLAIN = "text/plain; charset=utf-8"

MULTI_RANGE_MESSAGE = "multi-range not supported"
BAD_RANGE_MESSAGE = "bad range"
NOT_SATISFIABLE_MESSAGE = "Requested Range Not Satisfiable"


@dataclass(frozen=True)
class ParsedRange:
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1


@dataclass
class RangeFilePayload:
    status_code: int
    media_type: str
    headers: dict[str, str]
    stream: Iterator[bytes] | None = None
    body: bytes | None = None


def _range_tokens(range_header: str) -> List[str]:
    _, sep, spec = range_header.partition("=")
    if not sep:
        spec = ""
    if "," in spec:
        raise UnsupportedMultiRangeError(MULTI_RANGE_MESSAGE)
    if not spec:
        raise MalformedRangeError(BAD_RANGE_MESSAGE)
    return spec.split("-", 1)


def _parse_offset(token: Optional[str], total_size: int) -> Optional[int]:
    if token is None:
        return None
    value = token.strip()
    if not _DIGITS.fullmatch(value):
        return None
    if len(value.lstrip("0")) > _MAX_OFFSET_DIGITS:
        raise RangeNotSatisfiableError(NOT_SATISFIABLE_MESSAGE, total_size=total_size)
    return int(value)


def _bounds(tokens: List[str], total_size: int) -> ParsedRange:
    max_offset = total_size - 1
    # A missing or non-numeric start falls back to 0 rather than rejecting the request.
    start = _parse_offset(tokens[0], total_size)
    if start is None:
        start = 0
    end = _parse_offset(tokens[1] if len(tokens) > 1 else None, total_size)
    if end is None:
        end = max_offset
    if end > max_offset or start > max_offset or start > end:
        raise RangeNotSatisfiableError(NOT_SATISFIABLE_MESSAGE, total_size=total_size)
    return ParsedRange(start=start, end=end)


def parse_range(range_header: str, total_size: int) -> ParsedRange:
    """Parse a single ``bytes=<start>-<end>`` range against a file size.

    Raises ``UnsupportedMultiRangeError`` for comma separated ranges,
    ``MalformedRangeError`` for an empty specification and
    ``RangeNotSatisfiableError`` when the bounds fall outside the file.
    """
    return _bounds(_range_tokens(range_header), total_size)


def error_payload(exc: ServiceError) -> RangeFilePayload:
    headers = {"Accept-Ranges": "bytes"}
    if isinstance(exc, RangeNotSatisfiableError):
        headers["Content-Range"] = f"bytes {exc.total_size}"
    return RangeFilePayload(
        status_code=exc.status_code,
        media_type=_TEXT_PLAIN,
        headers=headers,
        body=str(exc).encode("utf-8"),
    )


def respond(
    path: Path,
    range_header: Optional[str],
    *,
    file_stat: Optional[fs_service.FileStat] = None,
) -> RangeFilePayload:
    """Build the response for serving ``path`` under an optional Range header.

    Range errors come back as 400/416 payloads. Filesystem errors propagate.
    The returned stream is owned by the caller. A ``file_stat`` already taken
    by the caller is reused instead of stating the file again.
    """
    media_type = fs_service.guess_mime(path)

    if not range_header:
        return RangeFilePayload(
            status_code=200,
            media_type=media_type,
            headers={"Accept-Ranges": "bytes"},
            stream=fs_service.open_stream(path),
        )

    try:
        tokens = _range_tokens(range_header)
        stat = file_stat if file_stat is not None else fs_service.stat_file(path)
        parsed = _bounds(tokens, stat.size)
    except (UnsupportedMultiRangeError, MalformedRangeError, RangeNotSatisfiableError) as exc:
        return error_payload(exc)

    headers = {
        "Accept-Ranges": "bytes",
        "Content-Range": f"bytes {parsed.start}-{parsed.end}/{stat.size}",
        "Content-Length": str(parsed.length),
    }
    return RangeFilePayload(
        status_code=206,
        media_type=media_type,
        headers=headers,
        stream=fs_service.open_stream(path, parsed.start, parsed.end),
    )
