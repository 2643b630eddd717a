"""Dog — beagle puppy with a brown saddle, floppy ears, and a red collar.

The tail is tilted 15 degrees around its base so it reads as wagging.

Parameters:
    scale: Uniform scale multiplier
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import (
    BARK,
    BERRY_RED,
    OUTLINE,
    Prim,
    Species,
    cell_size,
    outlined,
    rect,
    scaled,
)

SPECIES = Species.DOG
LEGS = 4

FUR_BROWN = "#b45309"
FUR_WHITE = "#fef3c7"

_TAIL_TILT = (-15.0, 2.0, 10.0)


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a dog (tail, legs, body + saddle, head + muzzle, ears, collar)."""
    prims = (
        outlined(0.5, 7, 2, 4, FUR_BROWN, rotate=_TAIL_TILT),
        rect(0, 6, 1.5, 2, FUR_WHITE, rotate=_TAIL_TILT),
        # Back legs
        outlined(3, 13, 2, 2, FUR_WHITE),
        outlined(10, 13, 2, 2, FUR_WHITE),
        # Body with saddle
        outlined(3, 9, 10, 5, FUR_WHITE, rx=1),
        rect(4, 9, 6, 4, FUR_BROWN),
        # Front legs
        outlined(3, 14, 2, 2, FUR_WHITE),
        outlined(11, 14, 2, 2, FUR_WHITE),
        # Head and muzzle
        outlined(9, 5, 6, 6, FUR_BROWN),
        rect(10, 8, 4, 3, FUR_WHITE),
        # Ears
        outlined(8, 6, 2, 4, BARK),
        outlined(14, 6, 2, 4, BARK),
        rect(9, 10, 6, 1, BERRY_RED),
        # Eyes and nose
        rect(10.5, 7, 1, 1, OUTLINE),
        rect(13.5, 7, 1, 1, OUTLINE),
        rect(11.5, 9, 1.5, 1, OUTLINE),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "beagle": Params(),
    "puppy": Params(scale=0.75),
}
