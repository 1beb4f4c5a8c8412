"""
Opening Aggregations

Groups filtered game records by opening family (and Elo band) and turns raw
counts into the percentage views drawn by the dashboard charts:

  top_n_openings                  popularity list
  top_n_openings_winners          white / black / draw split per opening
  top_n_openings_with_results     mate / resign / outoftime / draw split
  win_rate_by_opening_across_elo  dense Elo band x opening win-rate grid
  opening_usage_by_elo            heatmap keyed by each player's own rating
  opening_stats                   average game / opening length vs. results

Counts are accumulated first and converted to percentages once at the end.
A bucket with no games reports 0 for every percentage. Every function accepts
an empty record list and returns an empty structure.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Literal

from elo_bands import band_of, bands_covering
from game_models import (
    VICTORY_STATUSES,
    WINNERS,
    EloBandWinRates,
    GameRecord,
    HeatmapCell,
    OpeningCount,
    OpeningMoveStats,
    OpeningResults,
    OpeningUsageHeatmap,
    OpeningWinRates,
)
from opening_names import normalize_opening_name
from record_filter import FilterCriteria, filter_records

logger = logging.getLogger(__name__)

SortBy = Literal["popularity", "name"]
SORT_OPTIONS = ("popularity", "name")


def percentage(count: int, total: int) -> float:
    """count / total * 100, or 0.0 for an empty bucket."""
    if not total:
        return 0.0
    return count / total * 100


@dataclass
class OutcomeTally:
    """Running counts for one bucket, keyed by outcome."""

    outcomes: tuple[str, ...]
    total: int = 0
    counts: dict[str, int] = field(default_factory=dict)

    def add(self, outcome: str | None) -> None:
        if outcome not in self.outcomes:
            return
        self.total += 1
        self.counts[outcome] = self.counts.get(outcome, 0) + 1

    def pct(self, outcome: str) -> float:
        return percentage(self.counts.get(outcome, 0), self.total)


def validate_n(n: int | None) -> None:
    if n is None:
        return
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"n must be an int or None, got {type(n).__name__}")
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")


def _families(records: Iterable[GameRecord]) -> Iterator[tuple[str, GameRecord]]:
    """Yield (family, record), skipping records without a usable opening name."""
    skipped = 0
    for record in records:
        name = normalize_opening_name(record.opening_name)
        if not name:
            skipped += 1
            continue
        yield name, record
    if skipped:
        logger.debug("Skipped %d records without an opening name", skipped)


def _winner_rates(name: str, tally: OutcomeTally) -> OpeningWinRates:
    return OpeningWinRates(
        name=name,
        total=tally.total,
        white_win_pct=tally.pct("white"),
        black_win_pct=tally.pct("black"),
        draw_pct=tally.pct("draw"),
    )


def opening_counts(records: Iterable[GameRecord]) -> dict[str, int]:
    """Games per opening family, in first-encountered order."""
    counts: dict[str, int] = {}
    for name, _ in _families(records):
        counts[name] = counts.get(name, 0) + 1
    return counts


def top_n_openings(
    records: Iterable[GameRecord], n: int | None = None, sort_by: SortBy = "popularity"
) -> list[OpeningCount]:
    """
    The n most popular opening families.

    Ranked by count descending, ties kept in first-encountered order. With
    sort_by="name" the first n families in alphabetical order are returned.
    """
    validate_n(n)
    if sort_by not in SORT_OPTIONS:
        raise ValueError(f"sort_by must be one of {SORT_OPTIONS}, got {sort_by!r}")
    items = list(opening_counts(records).items())
    if sort_by == "name":
        items.sort(key=lambda item: item[0])
    else:
        items.sort(key=lambda item: -item[1])
    if n is not None:
        items = items[:n]
    return [OpeningCount(name=name, count=count) for name, count in items]


def top_n_openings_winners(records: Iterable[GameRecord], n: int | None = None) -> list[OpeningWinRates]:
    """Win/draw percentages of the n most played opening families."""
    validate_n(n)
    tallies: dict[str, OutcomeTally] = {}
    for name, record in _families(records):
        tally = tallies.setdefault(name, OutcomeTally(WINNERS))
        tally.add(record.winner)
    rows = [_winner_rates(name, tally) for name, tally in tallies.items()]
    rows.sort(key=lambda row: -row.total)
    return rows if n is None else rows[:n]


def top_n_openings_with_results(records: Iterable[GameRecord], n: int | None = None) -> list[OpeningResults]:
    """Victory-status percentages of the n most played opening families."""
    validate_n(n)
    tallies: dict[str, OutcomeTally] = {}
    for name, record in _families(records):
        tally = tallies.setdefault(name, OutcomeTally(VICTORY_STATUSES))
        tally.add(record.victory_status)
    rows = [
        OpeningResults(
            name=name,
            total=tally.total,
            mate_pct=tally.pct("mate"),
            resign_pct=tally.pct("resign"),
            outoftime_pct=tally.pct("outoftime"),
            draw_pct=tally.pct("draw"),
        )
        for name, tally in tallies.items()
    ]
    rows.sort(key=lambda row: -row.total)
    return rows if n is None else rows[:n]


def win_rate_by_opening_across_elo(records: Iterable[GameRecord], n: int | None = 5) -> list[EloBandWinRates]:
    """
    Win/draw percentages of the top n openings for every Elo band.

    Games are binned on the average of both players' ratings. The grid is
    dense: each band lists every selected opening, with total=0 when no game
    of that opening falls in the band.
    """
    validate_n(n)
    records = list(records)
    top = [o.name for o in top_n_openings(records, n)]
    if not top:
        logger.debug("No openings found for the Elo win-rate grid")
        return []

    selected = set(top)
    rated_games = [
        (name, record)
        for name, record in _families(records)
        if name in selected and record.has_ratings
    ]
    if not rated_games:
        logger.debug("No rated games left for the Elo win-rate grid")
        return []

    bands = bands_covering(record.average_rating for _, record in rated_games)
    grid: dict[int, dict[str, OutcomeTally]] = {
        band.start: {name: OutcomeTally(WINNERS) for name in top} for band in bands
    }
    for name, record in rated_games:
        grid[band_of(record.average_rating)][name].add(record.winner)

    return [
        EloBandWinRates(
            range=band.label,
            openings=[_winner_rates(name, grid[band.start][name]) for name in top],
        )
        for band in bands
    ]


def opening_usage_by_elo(
    records: Iterable[GameRecord],
    n: int | None = 10,
    criteria: FilterCriteria | None = None,
    sort_by: SortBy = "popularity",
) -> OpeningUsageHeatmap:
    """
    Heatmap of opening usage per player Elo band.

    criteria is applied first; its color decides which side's rating is
    counted. Each game adds one to the white cell of its white player's band
    and (with color="both") one to the black cell of its black player's band,
    so a band column may count more entries than it has games.

    relative_count is the cell's share, in percent, of its band column.
    """
    validate_n(n)
    color = criteria.color if criteria is not None else "both"
    records = filter_records(records, criteria)
    top = [o.name for o in top_n_openings(records, n, sort_by)]
    if not top:
        logger.debug("No openings found with the current filters")
        return OpeningUsageHeatmap()

    sides = [side for side in ("white", "black") if color in (side, "both")]
    selected = set(top)
    contributions: list[tuple[str, str, int]] = []
    for name, record in _families(records):
        if name not in selected:
            continue
        for side in sides:
            rating = record.white_rating if side == "white" else record.black_rating
            if rating is not None:
                contributions.append((name, side, rating))
    if not contributions:
        logger.debug("No rated games found with the current filters")
        return OpeningUsageHeatmap()

    bands = bands_covering(rating for _, _, rating in contributions)
    counts: dict[tuple[int, str], dict[str, int]] = {}
    for name, side, rating in contributions:
        cell = counts.setdefault((band_of(rating), name), {"white": 0, "black": 0})
        cell[side] += 1

    cells = []
    for band in bands:
        column = [counts.get((band.start, name), {"white": 0, "black": 0}) for name in top]
        column_total = sum(c["white"] + c["black"] for c in column)
        for name, c in zip(top, column):
            count = c["white"] + c["black"]
            cells.append(
                HeatmapCell(
                    elo_range=band.label,
                    opening=name,
                    count=count,
                    white_count=c["white"],
                    black_count=c["black"],
                    relative_count=percentage(count, column_total),
                )
            )

    return OpeningUsageHeatmap(
        data=cells,
        openings=top,
        elo_ranges=[band.label for band in bands],
    )


def opening_stats(records: Iterable[GameRecord]) -> list[OpeningMoveStats]:
    """Average turns / opening ply and results per opening family, most played first."""
    groups: dict[str, dict] = {}
    for name, record in _families(records):
        g = groups.setdefault(
            name,
            {"total": 0, "turns": [], "ply": [], "tally": OutcomeTally(WINNERS)},
        )
        g["total"] += 1
        if record.turns is not None:
            g["turns"].append(record.turns)
        if record.opening_ply is not None:
            g["ply"].append(record.opening_ply)
        g["tally"].add(record.winner)

    rows = []
    for name, g in groups.items():
        tally = g["tally"]
        rows.append(
            OpeningMoveStats(
                name=name,
                total=g["total"],
                average_turns=sum(g["turns"]) / len(g["turns"]) if g["turns"] else 0.0,
                average_ply=sum(g["ply"]) / len(g["ply"]) if g["ply"] else 0.0,
                white_win_pct=tally.pct("white"),
                black_win_pct=tally.pct("black"),
                draw_pct=tally.pct("draw"),
            )
        )
    rows.sort(key=lambda row: -row.total)
    return rows
