"""Rock — grey boulder with a highlight and a patch of moss.

Parameters:
    scale: Uniform scale multiplier
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import DecorKind, Prim, cell_size, outlined, rect, scaled

DECOR = DecorKind.ROCK

STONE_DARK = "#64748b"
STONE_LIGHT = "#94a3b8"
STONE_GLINT = "#cbd5e1"
MOSS = "#4ade80"


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    prims = (
        outlined(2, 5, 8, 3, STONE_DARK),
        outlined(3, 3, 6, 3, STONE_LIGHT),
        rect(4, 4, 2, 1, STONE_GLINT),
        rect(6, 3, 2, 2, MOSS, opacity=0.6),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "mossy rock": Params(),
}
