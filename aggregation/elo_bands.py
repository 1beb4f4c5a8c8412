"""
Elo Binning

Ratings are grouped into fixed 100-point bands labelled "1200-1299". The
range helpers refuse empty input: callers must detect an empty record set
before binning instead of letting it turn into an unbounded range.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from game_models import GameRecord

ELO_BAND_WIDTH = 100


class EmptyInputError(ValueError):
    """Raised when an Elo range is requested for an empty set of ratings."""


def band_of(rating: float) -> int:
    """Start of the band containing rating."""
    return math.floor(rating / ELO_BAND_WIDTH) * ELO_BAND_WIDTH


def band_label(start: int) -> str:
    return f"{start}-{start + ELO_BAND_WIDTH - 1}"


@dataclass(frozen=True)
class EloBand:
    start: int

    @property
    def end(self) -> int:
        return self.start + ELO_BAND_WIDTH - 1

    @property
    def label(self) -> str:
        return band_label(self.start)

    def contains(self, rating: float | None) -> bool:
        return rating is not None and band_of(rating) == self.start


@dataclass(frozen=True)
class EloRange:
    """Rating bounds rounded outward to band boundaries."""

    min: int
    max: int

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max}


def _materialize(ratings: Iterable[float | None]) -> list[float]:
    values = [r for r in ratings if r is not None]
    if not values:
        raise EmptyInputError("no ratings to derive an Elo range from")
    return values


def range_of(ratings: Iterable[float | None]) -> EloRange:
    values = _materialize(ratings)
    return EloRange(
        min=band_of(min(values)),
        max=math.ceil(max(values) / ELO_BAND_WIDTH) * ELO_BAND_WIDTH,
    )


def player_ratings(records: Iterable[GameRecord]) -> list[int]:
    """Both players' ratings of every record, missing ratings skipped."""
    out = []
    for record in records:
        for rating in (record.white_rating, record.black_rating):
            if rating is not None:
                out.append(rating)
    return out


def elo_range(records: Iterable[GameRecord]) -> EloRange:
    """Overall band-aligned rating range of a record set (both colors)."""
    return range_of(player_ratings(records))


def bands_covering(ratings: Iterable[float | None]) -> list[EloBand]:
    """
    Contiguous bands from the band of the lowest rating through the band of
    the highest one.

    Same as stepping through [range.min, range.max) except that a maximum
    sitting exactly on a band boundary still gets its own band.
    """
    values = _materialize(ratings)
    low, high = band_of(min(values)), band_of(max(values))
    return [EloBand(start) for start in range(low, high + 1, ELO_BAND_WIDTH)]
