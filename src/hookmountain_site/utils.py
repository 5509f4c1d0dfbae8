from __future__ import annotations

import re
from pathlib import Path

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def clean_name(path: Path | str) -> str:
    """Derive a canonical name from a raw upload filename."""
    stem = Path(path).stem.lower()
    return _NON_ALNUM.sub("-", stem).strip("-")


def format_size(num_bytes: int) -> str:
    """Render a byte count the way ``du -h`` does."""
    if abs(num_bytes) < 1024:
        return f"{num_bytes}B"
    value = float(num_bytes)
    for unit in ("K", "M"):
        value /= 1024
        if abs(value) < 1024:
            return f"{value:.1f}{unit}"
    return f"{value / 1024:.1f}G"
