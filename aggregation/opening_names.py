"""
Opening name canonicalization.

Lichess opening names carry the variation after a ":" (or "|") and sometimes
a trailing move-order marker such as "#2". The family name is what every
dashboard view groups on:

  "Italian Game: Giuoco Piano"   -> "Italian Game"
  "Sicilian Defense #3"          -> "Sicilian Defense"
"""

import re
from collections.abc import Iterable

from game_models import GameRecord

DELIMITER_RE = re.compile(r"[:|]")
MOVE_ORDER_MARKER_RE = re.compile(r"(?:\s*#\d+)+$")
VARIATION_WORD_RE = re.compile(r"\bvariation\b", re.IGNORECASE)


def normalize_opening_name(raw: str | None) -> str:
    """Return the opening family of a raw opening name. Never raises."""
    if not raw:
        return ""
    prefix = DELIMITER_RE.split(str(raw), maxsplit=1)[0].strip()
    return MOVE_ORDER_MARKER_RE.sub("", prefix).strip()


def clean_variation_name(raw: str) -> str:
    """Strip the word "variation" and any move-order marker from a variation label."""
    cleaned = " ".join(VARIATION_WORD_RE.sub("", raw).split())
    return MOVE_ORDER_MARKER_RE.sub("", cleaned).strip()


def split_opening_name(raw: str | None) -> tuple[str, str | None]:
    """Return (family, variation). Variation is None when the name carries none."""
    if not raw:
        return "", None
    parts = DELIMITER_RE.split(str(raw))
    family = normalize_opening_name(parts[0])
    if len(parts) < 2:
        return family, None
    variation = clean_variation_name(parts[1])
    return family, variation or None


def all_opening_names(records: Iterable[GameRecord], sort: bool = False) -> list[str]:
    """Distinct opening families, first-encountered order unless sort=True."""
    seen: dict[str, None] = {}
    for record in records:
        name = normalize_opening_name(record.opening_name)
        if name:
            seen.setdefault(name, None)
    names = list(seen)
    return sorted(names) if sort else names
