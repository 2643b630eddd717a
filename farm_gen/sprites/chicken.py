"""Chicken — round white hen with a red comb and wattle.

Two orange legs with forward-pointing feet, a folded wing, and a short
stubby tail. Faces right; the beak overhangs the grid by a cell.

Parameters:
    scale: Uniform scale multiplier (1.0 = 16 cells of PIXEL_SCALE units)
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import (
    BERRY_RED,
    EYE_DARK,
    Prim,
    Species,
    cell_size,
    outlined,
    rect,
    scaled,
)

SPECIES = Species.CHICKEN
LEGS = 2

FOOT_DARK = "#d97706"
FOOT_LIGHT = "#f59e0b"
FEATHER = "#f8fafc"
FEATHER_SHADE = "#e2e8f0"
TAIL = "#f1f5f9"


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a chicken (legs, body, wing, tail, comb, beak, eye, wattle)."""
    prims = (
        # Legs
        outlined(6, 13, 2, 3, FOOT_DARK),
        outlined(6, 15, 3, 1, FOOT_DARK),
        outlined(9, 13, 2, 3, FOOT_LIGHT),
        outlined(9, 15, 3, 1, FOOT_LIGHT),
        # Body and wing
        outlined(3, 5, 10, 9, FEATHER, rx=1),
        outlined(5, 8, 5, 4, FEATHER_SHADE),
        # Tail
        outlined(1, 6, 2, 3, TAIL),
        outlined(2, 5, 1, 2, TAIL),
        # Comb
        outlined(7, 2, 2, 3, BERRY_RED),
        outlined(9, 3, 2, 2, BERRY_RED),
        # Beak, eye, wattle
        outlined(13, 7, 2, 2, FOOT_LIGHT),
        rect(11, 6, 1, 1, EYE_DARK),
        outlined(11, 9, 2, 1.5, BERRY_RED),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "hen": Params(),
    "bantam": Params(scale=0.75),
}
