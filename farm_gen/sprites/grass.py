"""Grass — a three-blade tuft (minor clutter)."""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import (
    LEAF_BRIGHT,
    LEAF_MEDIUM,
    DecorKind,
    Prim,
    cell_size,
    rect,
    scaled,
)

DECOR = DecorKind.GRASS


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    prims = (
        rect(0, 2, 1, 2, LEAF_MEDIUM),
        rect(1, 1, 1, 3, LEAF_BRIGHT),
        rect(2, 2, 1, 2, LEAF_MEDIUM),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "tuft": Params(),
}
