"""Rabbit — white bunny with tall pink-lined ears and a cotton tail.

Parameters:
    scale: Uniform scale multiplier
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import (
    EYE_DARK,
    Prim,
    Species,
    cell_size,
    outlined,
    rect,
    scaled,
)

SPECIES = Species.RABBIT
LEGS = 4

FUR = "#ffffff"
FUR_SHADE = "#e5e7eb"
FUR_LIGHT = "#f1f5f9"
EAR_PINK = "#fbcfe8"


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a rabbit (back legs, body, front legs, head, ears, tail)."""
    prims = (
        outlined(2, 13, 2, 2, FUR_SHADE),
        outlined(11, 13, 2, 2, FUR_SHADE),
        outlined(2, 7, 11, 7, FUR),
        outlined(1, 14, 3, 2, FUR_LIGHT),
        outlined(12, 14, 2, 2, FUR_LIGHT),
        outlined(10, 5, 5, 6, FUR),
        # Ears with pink inner lining
        outlined(10, 1, 2, 5, FUR),
        rect(11, 2, 1, 3, EAR_PINK),
        outlined(13, 1, 2, 5, FUR),
        rect(14, 2, 1, 3, EAR_PINK),
        # Eye and nose
        rect(13, 7, 1, 1, EYE_DARK),
        rect(15, 8, 1, 1, EAR_PINK),
        outlined(0, 8, 2, 3, FUR_LIGHT),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "white rabbit": Params(),
    "kit": Params(scale=0.75),
}
