"""Flower — tiny pink four-petal bloom on a stem (minor clutter)."""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import LEAF_BRIGHT, DecorKind, Prim, cell_size, rect, scaled

DECOR = DecorKind.FLOWER

PETAL = "#f472b6"
POLLEN = "#facc15"


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    prims = (
        rect(2, 3, 1, 2, LEAF_BRIGHT),
        rect(1, 1, 1, 1, PETAL),
        rect(3, 1, 1, 1, PETAL),
        rect(2, 0, 1, 1, PETAL),
        rect(2, 2, 1, 1, PETAL),
        rect(2, 1, 1, 1, POLLEN),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "pink flower": Params(),
}
