"""Bush — rounded two-tone shrub dotted with red berries.

Parameters:
    scale: Uniform scale multiplier
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import (
    BERRY_RED,
    LEAF_BRIGHT,
    LEAF_DARK,
    LEAF_LIGHT,
    DecorKind,
    Prim,
    cell_size,
    outlined,
    rect,
    scaled,
)

DECOR = DecorKind.BUSH


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    prims = (
        outlined(2, 5, 12, 5, LEAF_DARK, rx=1),
        outlined(3, 3, 10, 5, LEAF_BRIGHT, rx=1),
        rect(4, 4, 2, 1, LEAF_LIGHT),
        rect(10, 5, 1, 1, LEAF_LIGHT),
        rect(5, 6, 1, 1, BERRY_RED),
        rect(9, 7, 1, 1, BERRY_RED),
        rect(11, 5, 1, 1, BERRY_RED),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "berry bush": Params(),
}
