"""
Time Control Classification

Derives a coarse time-control category for each game. Datasets either carry
an explicit category, an increment code ("10+5": minutes + seconds per move),
or only start/end timestamps. The estimation method is picked once per
dataset so that two games of the same dataset are never classified with
different formulas.
"""

import logging
import re
from collections.abc import Iterable
from typing import Literal

from game_models import GameRecord

logger = logging.getLogger(__name__)

BULLET = "Bullet"
BLITZ = "Blitz"
RAPID = "Rapid"
CLASSICAL = "Classical"
UNKNOWN = "Unknown"

EstimationMethod = Literal["increment", "duration"]
ESTIMATION_METHODS = ("increment", "duration")

INCREMENT_CODE_RE = re.compile(r"^\s*(\d+)\s*\+\s*(\d+)\s*$")

# Estimated total seconds per player: initial * 60 + increment * turns
INCREMENT_THRESHOLDS: list[tuple[float, str]] = [
    (180, BULLET),
    (480, BLITZ),
    (1500, RAPID),
]

# Average seconds per move, inclusive upper bounds
DURATION_THRESHOLDS: list[tuple[float, str]] = [
    (3, BULLET),
    (10, BLITZ),
    (30, RAPID),
]


def parse_increment_code(code: str | None) -> tuple[int, int] | None:
    """Parse "<initial>+<increment>". Returns None when malformed."""
    if not code:
        return None
    m = INCREMENT_CODE_RE.match(code)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def classify_estimated_seconds(seconds: float) -> str:
    for limit, category in INCREMENT_THRESHOLDS:
        if seconds < limit:
            return category
    return CLASSICAL


def classify_seconds_per_move(seconds: float) -> str:
    for limit, category in DURATION_THRESHOLDS:
        if seconds <= limit:
            return category
    return CLASSICAL


def _by_increment(record: GameRecord) -> str:
    parsed = parse_increment_code(record.increment_code)
    if parsed is None:
        return UNKNOWN
    initial, increment = parsed
    return classify_estimated_seconds(initial * 60 + increment * (record.turns or 0))


def _by_duration(record: GameRecord) -> str:
    if record.created_at is None or record.last_move_at is None:
        return UNKNOWN
    # Timestamps are epoch milliseconds
    elapsed = (record.last_move_at - record.created_at) / 1000
    return classify_seconds_per_move(elapsed / max(record.turns or 0, 1))


def classify_time_control(record: GameRecord, method: EstimationMethod | None = None) -> str:
    """
    Return the time-control category of a game.

    An explicit time_control is passed through unchanged. Otherwise the given
    method is used; without one, the increment code wins over timestamps.
    """
    if record.time_control:
        return record.time_control
    if method is None:
        if record.increment_code:
            method = "increment"
        elif record.created_at is not None and record.last_move_at is not None:
            method = "duration"
        else:
            return UNKNOWN
    if method not in ESTIMATION_METHODS:
        raise ValueError(f"Unknown estimation method: {method!r}")
    if method == "increment":
        return _by_increment(record)
    return _by_duration(record)


def detect_estimation_method(records: Iterable[GameRecord]) -> EstimationMethod | None:
    """Pick one estimation method for the whole dataset."""
    has_timestamps = False
    for record in records:
        if record.increment_code:
            return "increment"
        if record.created_at is not None and record.last_move_at is not None:
            has_timestamps = True
    return "duration" if has_timestamps else None


def estimate_time_controls(records: Iterable[GameRecord]) -> list[GameRecord]:
    """
    Return new records with estimated_time_control set.

    The input records are left untouched; use the returned list.
    """
    records = list(records)
    method = detect_estimation_method(records)
    logger.debug("Estimating time controls for %d records (method=%s)", len(records), method)
    out = []
    for record in records:
        if record.time_control:
            out.append(record)
            continue
        category = classify_time_control(record, method) if method else UNKNOWN
        out.append(record.model_copy(update={"estimated_time_control": category}))
    return out


def effective_time_control(record: GameRecord) -> str:
    return record.time_control or record.estimated_time_control or UNKNOWN


def time_control_options(records: Iterable[GameRecord]) -> list[str]:
    """Distinct effective categories for the time-control dropdown, sorted."""
    return sorted({effective_time_control(r) for r in records})
