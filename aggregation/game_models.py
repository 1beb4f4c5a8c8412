"""Data models for the chess openings dashboard aggregation engine."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

logger = logging.getLogger(__name__)

Winner = Literal["white", "black", "draw"]
VictoryStatus = Literal["mate", "resign", "outoftime", "draw"]
Color = Literal["white", "black", "both"]

WINNERS: tuple[str, ...] = ("white", "black", "draw")
VICTORY_STATUSES: tuple[str, ...] = ("mate", "resign", "outoftime", "draw")


def coerce_rated(value: Any) -> bool:
    """
    Single coercion rule for the ``rated`` column.

    Booleans are kept, strings are true only for "true" (any case, surrounding
    whitespace ignored), None is false and anything else goes through bool().
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if result == result else None  # NaN


class GameRecord(BaseModel):
    """One played game, validated from a raw input row. Immutable."""

    model_config = ConfigDict(frozen=True)

    opening_name: str = ""
    winner: Winner | None = None
    victory_status: VictoryStatus | None = None
    rated: bool = False
    white_rating: int | None = None
    black_rating: int | None = None
    turns: int | None = None
    opening_ply: int | None = None
    increment_code: str | None = None
    created_at: float | None = None
    last_move_at: float | None = None
    time_control: str | None = None
    estimated_time_control: str | None = None

    @field_validator("opening_name", mode="before")
    @classmethod
    def _opening_name(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("winner", mode="before")
    @classmethod
    def _winner(cls, value: Any) -> str | None:
        if isinstance(value, str) and value.strip().lower() in WINNERS:
            return value.strip().lower()
        return None

    @field_validator("victory_status", mode="before")
    @classmethod
    def _victory_status(cls, value: Any) -> str | None:
        if isinstance(value, str) and value.strip().lower() in VICTORY_STATUSES:
            return value.strip().lower()
        return None

    @field_validator("rated", mode="before")
    @classmethod
    def _rated(cls, value: Any) -> bool:
        return coerce_rated(value)

    @field_validator("white_rating", "black_rating", mode="before")
    @classmethod
    def _rating(cls, value: Any) -> int | None:
        return _optional_int(value)

    @field_validator("turns", "opening_ply", mode="before")
    @classmethod
    def _move_count(cls, value: Any) -> int | None:
        count = _optional_int(value)
        if count is None or count < 0:
            return None
        return count

    @field_validator("created_at", "last_move_at", mode="before")
    @classmethod
    def _timestamp(cls, value: Any) -> float | None:
        return _optional_float(value)

    @field_validator("increment_code", "time_control", "estimated_time_control", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "GameRecord":
        """Build a record from a loader row keyed by the snake_case column names."""
        return cls.model_validate(dict(row))

    @property
    def has_ratings(self) -> bool:
        return self.white_rating is not None and self.black_rating is not None

    @property
    def average_rating(self) -> float | None:
        if not self.has_ratings:
            return None
        return (self.white_rating + self.black_rating) / 2


def records_from_rows(rows: Iterable[Any]) -> list[GameRecord]:
    """
    Validate loader rows into GameRecords.

    Unusable fields are coerced to None by the model validators; rows that are
    not mappings at all are skipped with a warning.
    """
    records = []
    for index, row in enumerate(rows):
        if isinstance(row, GameRecord):
            records.append(row)
            continue
        if not isinstance(row, Mapping):
            logger.warning("Skipping row %d: expected a mapping, got %s", index, type(row).__name__)
            continue
        try:
            records.append(GameRecord.from_row(row))
        except ValidationError as e:
            logger.warning("Skipping row %d: %s", index, e)
    return records


@dataclass
class OpeningCount:
    """Popularity of one opening family."""

    name: str
    count: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}


@dataclass
class OpeningWinRates:
    """Win/draw split for one opening family (optionally within one Elo band)."""

    name: str
    total: int = 0
    white_win_pct: float = 0.0
    black_win_pct: float = 0.0
    draw_pct: float = 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "total": self.total,
            "whiteWinPct": self.white_win_pct,
            "blackWinPct": self.black_win_pct,
            "drawPct": self.draw_pct,
        }


@dataclass
class OpeningResults:
    """How games in one opening family ended."""

    name: str
    total: int = 0
    mate_pct: float = 0.0
    resign_pct: float = 0.0
    outoftime_pct: float = 0.0
    draw_pct: float = 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "total": self.total,
            "matePct": self.mate_pct,
            "resignPct": self.resign_pct,
            "outoftimePct": self.outoftime_pct,
            "drawPct": self.draw_pct,
        }


@dataclass
class EloBandWinRates:
    """Dense row of the Elo x opening grid: every selected opening is present."""

    range: str
    openings: list[OpeningWinRates] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"range": self.range, "openings": [o.to_dict() for o in self.openings]}


@dataclass
class HeatmapCell:
    elo_range: str
    opening: str
    count: int = 0
    white_count: int = 0
    black_count: int = 0
    relative_count: float = 0.0

    def to_dict(self) -> dict:
        return {
            "eloRange": self.elo_range,
            "opening": self.opening,
            "count": self.count,
            "whiteCount": self.white_count,
            "blackCount": self.black_count,
            "relativeCount": self.relative_count,
        }


@dataclass
class OpeningUsageHeatmap:
    """Opening usage per player Elo band. Empty lists mean no data for the filters."""

    data: list[HeatmapCell] = field(default_factory=list)
    openings: list[str] = field(default_factory=list)
    elo_ranges: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "data": [c.to_dict() for c in self.data],
            "openings": list(self.openings),
            "eloRanges": list(self.elo_ranges),
        }


@dataclass
class OpeningMoveStats:
    """Scatter-plot input: move lengths against results for one opening family."""

    name: str
    total: int = 0
    average_turns: float = 0.0
    average_ply: float = 0.0
    white_win_pct: float = 0.0
    black_win_pct: float = 0.0
    draw_pct: float = 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "total": self.total,
            "averageTurns": self.average_turns,
            "averagePly": self.average_ply,
            "whiteWinPct": self.white_win_pct,
            "blackWinPct": self.black_win_pct,
            "drawPct": self.draw_pct,
        }


@dataclass
class VariationFamily:
    """Opening family with raw occurrence counts of its named variations."""

    name: str
    count: int = 0
    variations: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "count": self.count,
            "children": [{"name": k, "count": v} for k, v in self.variations.items()],
        }
