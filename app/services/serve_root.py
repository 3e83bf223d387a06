"""Served root directory and streaming settings."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_SERVE_ROOT = Path("public")
ROOT_ENV_KEY = "RANGE_SERVER_ROOT"

DEFAULT_CHUNK_SIZE = 1024 * 1024
CHUNK_ENV_KEY = "RANGE_SERVER_CHUNK_SIZE"


def resolve_serve_root() -> Path:
    """Resolve the directory files are served from (env override)."""
    raw = os.environ.get(ROOT_ENV_KEY)
    base = Path(raw) if raw else DEFAULT_SERVE_ROOT
    return base.expanduser().resolve()


def resolve_chunk_size() -> int:
    raw = str(os.environ.get(CHUNK_ENV_KEY, "")).strip()
    if not raw:
        return DEFAULT_CHUNK_SIZE
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_CHUNK_SIZE
    return value if value > 0 else DEFAULT_CHUNK_SIZE
