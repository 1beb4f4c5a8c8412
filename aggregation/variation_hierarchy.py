"""
Variation Hierarchy

Two-level opening -> variation counts for the circle-packing chart.
"""

import logging
import os
from collections.abc import Iterable

from game_models import GameRecord, VariationFamily
from opening_names import split_opening_name
from opening_stats import validate_n

logger = logging.getLogger(__name__)

# Display-only multiplier on variation leaves so they stay visible next to the
# family bubble. Never used for reported counts or percentages.
VARIATION_INFLATION_FACTOR = float(os.environ.get("VARIATION_INFLATION_FACTOR", "2.0"))


def build_variation_hierarchy(records: Iterable[GameRecord], n: int | None = None) -> list[VariationFamily]:
    """
    Count games per opening family and per named variation.

    Families are ordered by popularity (ties in first-encountered order) and
    truncated to n. A family whose games name no variation keeps an empty
    variations map.
    """
    validate_n(n)
    families: dict[str, VariationFamily] = {}
    for record in records:
        family, variation = split_opening_name(record.opening_name)
        if not family:
            continue
        node = families.setdefault(family, VariationFamily(name=family))
        node.count += 1
        if variation:
            node.variations[variation] = node.variations.get(variation, 0) + 1
    logger.debug("Variation hierarchy: %d families", len(families))

    ordered = sorted(families.values(), key=lambda f: -f.count)
    return ordered if n is None else ordered[:n]


def to_packing_hierarchy(
    families: Iterable[VariationFamily],
    inflation_factor: float = VARIATION_INFLATION_FACTOR,
) -> dict:
    """Nested {name, count, children} tree sized for the packing layout."""
    children = []
    for family in families:
        leaves = [
            {"name": name, "count": count * inflation_factor}
            for name, count in family.variations.items()
        ]
        children.append(
            {
                "name": family.name,
                "count": family.count + sum(leaf["count"] for leaf in leaves),
                "children": leaves,
            }
        )
    return {"name": "openings", "children": children}
