"""
Dashboard Views

Recomputes every chart's data for one filter selection. Nothing is cached:
each call takes the full record list and the current FilterCriteria and
returns fresh structures.

Usage:
  records = records_from_rows(rows)
  views = build_dashboard(records, FilterCriteria(rated_only=True, color="white"))
  payload = views.to_dict()
"""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field

from elo_bands import EloRange, EmptyInputError, elo_range
from game_models import (
    EloBandWinRates,
    GameRecord,
    OpeningCount,
    OpeningMoveStats,
    OpeningResults,
    OpeningUsageHeatmap,
    OpeningWinRates,
    VariationFamily,
)
from opening_names import all_opening_names
from opening_stats import (
    SortBy,
    opening_stats,
    opening_usage_by_elo,
    top_n_openings,
    top_n_openings_winners,
    top_n_openings_with_results,
    validate_n,
    win_rate_by_opening_across_elo,
)
from record_filter import FilterCriteria, filter_records
from time_control import estimate_time_controls, time_control_options
from variation_hierarchy import build_variation_hierarchy, to_packing_hierarchy

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = int(os.environ.get("DASHBOARD_TOP_N", "10"))
ELO_CHART_TOP_N = 5


@dataclass
class FilterOptions:
    """Choices offered by the filter controls, derived from the unfiltered data."""

    openings: list[str] = field(default_factory=list)
    time_controls: list[str] = field(default_factory=list)
    elo_range: EloRange | None = None

    def to_dict(self) -> dict:
        return {
            "openings": list(self.openings),
            "timeControls": list(self.time_controls),
            "eloRange": self.elo_range.to_dict() if self.elo_range else None,
        }


@dataclass
class DashboardViews:
    total_games: int = 0
    filtered_games: int = 0
    options: FilterOptions = field(default_factory=FilterOptions)
    popularity: list[OpeningCount] = field(default_factory=list)
    winners: list[OpeningWinRates] = field(default_factory=list)
    results: list[OpeningResults] = field(default_factory=list)
    elo_win_rates: list[EloBandWinRates] = field(default_factory=list)
    heatmap: OpeningUsageHeatmap = field(default_factory=OpeningUsageHeatmap)
    move_stats: list[OpeningMoveStats] = field(default_factory=list)
    variations: list[VariationFamily] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """No data available for the current filters."""
        return self.filtered_games == 0 or not self.popularity

    def to_dict(self) -> dict:
        return {
            "totalGames": self.total_games,
            "filteredGames": self.filtered_games,
            "isEmpty": self.is_empty,
            "options": self.options.to_dict(),
            "popularity": [o.to_dict() for o in self.popularity],
            "winners": [o.to_dict() for o in self.winners],
            "results": [o.to_dict() for o in self.results],
            "eloWinRates": [b.to_dict() for b in self.elo_win_rates],
            "heatmap": self.heatmap.to_dict(),
            "moveStats": [s.to_dict() for s in self.move_stats],
            "variations": to_packing_hierarchy(self.variations),
        }


def filter_options(records: list[GameRecord]) -> FilterOptions:
    try:
        bounds = elo_range(records)
    except EmptyInputError:
        bounds = None
    return FilterOptions(
        openings=all_opening_names(records, sort=True),
        time_controls=time_control_options(records),
        elo_range=bounds,
    )


def build_dashboard(
    records: Iterable[GameRecord],
    criteria: FilterCriteria | None = None,
    *,
    top_n: int | None = DEFAULT_TOP_N,
    elo_top_n: int | None = ELO_CHART_TOP_N,
    variation_top_n: int | None = DEFAULT_TOP_N,
    sort_by: SortBy = "popularity",
) -> DashboardViews:
    """Compute every dashboard view for records under criteria."""
    for value in (top_n, elo_top_n, variation_top_n):
        validate_n(value)
    records = estimate_time_controls(records)
    filtered = filter_records(records, criteria)
    logger.info("Rebuilding dashboard: %d of %d games match the filters", len(filtered), len(records))

    # Already filtered; only the color choice still matters for the heatmap
    heatmap_criteria = FilterCriteria(color=criteria.color) if criteria is not None else None

    return DashboardViews(
        total_games=len(records),
        filtered_games=len(filtered),
        options=filter_options(records),
        popularity=top_n_openings(filtered, top_n, sort_by),
        winners=top_n_openings_winners(filtered, top_n),
        results=top_n_openings_with_results(filtered, top_n),
        elo_win_rates=win_rate_by_opening_across_elo(filtered, elo_top_n),
        heatmap=opening_usage_by_elo(filtered, top_n, heatmap_criteria, sort_by),
        move_stats=opening_stats(filtered),
        variations=build_variation_hierarchy(filtered, variation_top_n),
    )
