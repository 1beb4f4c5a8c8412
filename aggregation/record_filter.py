"""
Record Filtering

Applies the dashboard's filter selection to a record list. The selection is
an immutable FilterCriteria value passed into every call; every field is
optional and all active predicates are combined with AND.
"""

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from elo_bands import EloRange
from game_models import Color, GameRecord, coerce_rated
from opening_names import normalize_opening_name
from time_control import effective_time_control, estimate_time_controls

logger = logging.getLogger(__name__)

__all__ = ["FilterCriteria", "coerce_rated", "filter_records", "matches"]

ALL = "all"


class FilterCriteria(BaseModel):
    """Filter selection. Absent fields do not constrain."""

    model_config = ConfigDict(frozen=True)

    rated_only: bool | None = None
    time_control: str | None = None
    color: Color = "both"
    openings: frozenset[str] | None = None
    search: str = ""
    elo_range: EloRange | None = None

    @field_validator("rated_only", mode="before")
    @classmethod
    def _game_type(cls, value: Any) -> Any:
        # Accept the game-type dropdown values as well as booleans
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("", ALL):
                return None
            if key == "rated":
                return True
            if key == "casual":
                return False
            return coerce_rated(key)
        return value

    @field_validator("time_control", mode="before")
    @classmethod
    def _time_control(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in ("", ALL):
            return None
        return value

    @field_validator("openings", mode="before")
    @classmethod
    def _openings(cls, value: Any) -> Any:
        # The opening dropdown sends one family name or "all"
        if isinstance(value, str):
            name = value.strip()
            if name.lower() in ("", ALL):
                return None
            return frozenset({name})
        return value

    @field_validator("color", mode="before")
    @classmethod
    def _color(cls, value: Any) -> Any:
        if value is None:
            return "both"
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("search", mode="before")
    @classmethod
    def _search(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()


def _in_elo_range(record: GameRecord, elo_range: EloRange, color: str) -> bool:
    def inside(rating: int | None) -> bool:
        return rating is not None and elo_range.min <= rating <= elo_range.max

    if color == "white":
        return inside(record.white_rating)
    if color == "black":
        return inside(record.black_rating)
    return inside(record.white_rating) or inside(record.black_rating)


def matches(record: GameRecord, criteria: FilterCriteria) -> bool:
    """True if record passes every active predicate of criteria."""
    if criteria.rated_only is not None and record.rated != criteria.rated_only:
        return False
    if criteria.time_control is not None and effective_time_control(record) != criteria.time_control:
        return False
    if criteria.openings is not None and normalize_opening_name(record.opening_name) not in criteria.openings:
        return False
    if criteria.search and criteria.search.lower() not in record.opening_name.lower():
        return False
    if criteria.elo_range is not None and not _in_elo_range(record, criteria.elo_range, criteria.color):
        return False
    return True


def filter_records(records: Iterable[GameRecord], criteria: FilterCriteria | None = None) -> list[GameRecord]:
    """Return the records matching criteria, in input order. Never mutates input."""
    records = list(records)
    if criteria is None:
        return records
    if criteria.time_control is not None and not all(r.time_control or r.estimated_time_control for r in records):
        # Time controls are estimated per dataset; the output keeps the caller's records
        estimated = estimate_time_controls(records)
        out = [r for r, e in zip(records, estimated) if matches(e, criteria)]
    else:
        out = [r for r in records if matches(r, criteria)]
    logger.debug("Filter kept %d of %d records", len(out), len(records))
    return out
