"""Tree — three stacked leaf tiers on a short trunk.

Major decoration: a solid obstacle that is kept clear of the cage.

Parameters:
    scale: Uniform scale multiplier
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import (
    BARK,
    LEAF_BRIGHT,
    LEAF_DARK,
    LEAF_LIGHT,
    LEAF_MEDIUM,
    DecorKind,
    Prim,
    cell_size,
    outlined,
    rect,
    scaled,
)

DECOR = DecorKind.TREE

BARK_SHADOW = "#451a03"


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a tree (trunk, three leaf tiers, two highlights)."""
    prims = (
        outlined(7, 12, 4, 6, BARK),
        rect(7, 13, 1, 4, BARK_SHADOW),
        outlined(3, 9, 12, 4, LEAF_DARK),
        outlined(2, 6, 14, 4, LEAF_MEDIUM),
        outlined(4, 2, 10, 5, LEAF_BRIGHT),
        rect(5, 3, 2, 2, LEAF_LIGHT, opacity=0.5),
        rect(10, 7, 2, 1, LEAF_LIGHT, opacity=0.3),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "oak": Params(),
}
