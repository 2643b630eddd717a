"""Turtle — domed green shell with scute pattern, stubby legs, and a head.

Parameters:
    scale: Uniform scale multiplier
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import (
    EYE_DARK,
    LEAF_DARK,
    LEAF_LIGHT,
    LEAF_MEDIUM,
    Prim,
    Species,
    cell_size,
    outlined,
    rect,
    scaled,
)

SPECIES = Species.TURTLE
LEGS = 4

SKIN_DARK = "#4ade80"
SHELL = "#15803d"


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a turtle (back legs, tail, shell dome + rim, head, front legs)."""
    prims = (
        outlined(4, 12, 2, 2, SKIN_DARK),
        outlined(10, 12, 2, 2, SKIN_DARK),
        outlined(1, 10, 2, 1, LEAF_LIGHT),
        # Shell dome with scutes
        outlined(4, 6, 8, 4, SHELL, rx=2),
        rect(6, 6.5, 4, 3, LEAF_MEDIUM, rx=1),
        # Shell rim
        outlined(3, 9, 10, 3, SHELL, rx=1),
        rect(3, 10.5, 10, 1, LEAF_DARK, opacity=0.3),
        # Head and neck
        outlined(12, 8, 4, 3, LEAF_LIGHT, rx=1),
        rect(11, 9, 2, 2, LEAF_LIGHT),
        # Front legs
        outlined(3, 13, 2.5, 2, LEAF_LIGHT),
        outlined(9.5, 13, 2.5, 2, LEAF_LIGHT),
        rect(14, 8.5, 1, 1, EYE_DARK),
        rect(14.5, 8.5, 0.5, 0.5, "#ffffff"),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "box turtle": Params(),
    "hatchling": Params(scale=0.75),
}
