"""Tests for elo_bands.py"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from elo_bands import (
    EloBand,
    EloRange,
    EmptyInputError,
    band_label,
    band_of,
    bands_covering,
    elo_range,
    player_ratings,
    range_of,
)
from game_models import GameRecord


def test_band_of():
    assert band_of(1050) == 1000
    assert band_of(1000) == 1000
    assert band_of(999) == 900
    assert band_of(1099.5) == 1000
    assert band_of(0) == 0


def test_band_of_is_monotonic():
    ratings = [784, 800, 999.5, 1000, 1001, 1450, 1499.99, 1500, 2723]
    bands = [band_of(r) for r in ratings]
    assert bands == sorted(bands)


def test_band_label_and_contains():
    band = EloBand(1200)
    assert band.label == band_label(1200) == "1200-1299"
    assert band.end == 1299
    assert band.contains(1299.5)
    assert not band.contains(1300)
    assert not band.contains(None)


def test_range_of_example():
    assert range_of([1050, 1180]) == EloRange(min=1000, max=1200)


def test_range_of_ignores_missing():
    assert range_of([None, 1500, None]) == EloRange(min=1500, max=1500)


def test_range_of_empty_raises():
    with pytest.raises(EmptyInputError):
        range_of([])
    with pytest.raises(ValueError):
        range_of([None])


def test_elo_range_uses_both_colors():
    records = [
        GameRecord(white_rating=1050, black_rating=1180),
        GameRecord(white_rating=1322, black_rating="n/a"),
    ]
    assert player_ratings(records) == [1050, 1180, 1322]
    assert elo_range(records).to_dict() == {"min": 1000, "max": 1400}


def test_elo_range_empty_raises():
    with pytest.raises(EmptyInputError):
        elo_range([])
    with pytest.raises(EmptyInputError):
        elo_range([GameRecord(opening_name="Slav Defense")])


def test_bands_covering_is_contiguous():
    bands = bands_covering([1050, 1180, 1420])
    assert [b.start for b in bands] == [1000, 1100, 1200, 1300, 1400]


def test_bands_covering_includes_boundary_maximum():
    # ceil(1200 / 100) * 100 == 1200, but a 1200 rating still needs the 1200-1299 band
    assert [b.label for b in bands_covering([1050, 1200])] == ["1000-1099", "1100-1199", "1200-1299"]


def test_bands_covering_matches_range_when_not_on_boundary():
    ratings = [1050, 1180]
    bounds = range_of(ratings)
    assert [b.start for b in bands_covering(ratings)] == list(range(bounds.min, bounds.max, 100))


def test_bands_covering_empty_raises():
    with pytest.raises(EmptyInputError):
        bands_covering([])
