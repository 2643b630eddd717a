"""Crane — tall white wading bird with black wing tips and a red crown.

Parameters:
    scale: Uniform scale multiplier
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

SPECIES = Species.CRANE
LEGS = 2

PLUMAGE = "#f8fafc"
WING_TIP = "#1f2937"
BEAK = "#f59e0b"


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a crane (long legs, body, neck, head, beak)."""
    prims = (
        outlined(7, 12, 1, 4, WING_TIP),
        outlined(9, 12, 1, 4, WING_TIP),
        outlined(4, 7, 9, 6, PLUMAGE),
        outlined(4, 9, 6, 3, WING_TIP),
        # Neck and head
        outlined(11, 4, 2, 4, PLUMAGE),
        outlined(11, 2, 4, 3, PLUMAGE),
        outlined(11, 2, 2, 1, BERRY_RED),
        # Beak overhangs the grid
        outlined(15, 3, 3, 1, BEAK),
        rect(13, 3, 1, 1, EYE_DARK),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "red-crowned": Params(),
    "chick": Params(scale=0.75),
}
