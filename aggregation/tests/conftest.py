"""Pytest configuration."""

import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

# Packing-hierarchy assertions expect the default display factor
os.environ["VARIATION_INFLATION_FACTOR"] = "2.0"


@pytest.fixture
def lichess_rows() -> list[dict]:
    """Rows shaped like the Lichess games.csv export."""
    return [
        {
            "opening_name": "Italian Game: Giuoco Piano",
            "winner": "white",
            "victory_status": "mate",
            "rated": "TRUE",
            "white_rating": 1500,
            "black_rating": 1450,
            "turns": 40,
            "opening_ply": 6,
            "increment_code": "10+0",
        },
        {
            "opening_name": "Italian Game: Two Knights Defense",
            "winner": "black",
            "victory_status": "resign",
            "rated": "FALSE",
            "white_rating": 1210,
            "black_rating": 1290,
            "turns": 61,
            "opening_ply": 4,
            "increment_code": "15+15",
        },
        {
            "opening_name": "Sicilian Defense: Najdorf Variation",
            "winner": "draw",
            "victory_status": "draw",
            "rated": True,
            "white_rating": 1880,
            "black_rating": 1905,
            "turns": 90,
            "opening_ply": 10,
            "increment_code": "2+1",
        },
        {
            "opening_name": "Sicilian Defense",
            "winner": "white",
            "victory_status": "outoftime",
            "rated": "true",
            "white_rating": 1650,
            "black_rating": 1620,
            "turns": 55,
            "opening_ply": 2,
            "increment_code": "5+3",
        },
        {
            "opening_name": "Van't Kruijs Opening",
            "winner": "black",
            "victory_status": "resign",
            "rated": "false",
            "white_rating": 1102,
            "black_rating": 1186,
            "turns": 22,
            "opening_ply": 1,
            "increment_code": "30+0",
        },
    ]
