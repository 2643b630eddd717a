"""Shadow — flat translucent oval drawn under every animal.

Never mirrored: it is centered on the sprite grid.
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import Prim, cell_size, ellipse, scaled

SHADOW = True


@dataclass(frozen=True)
class Params:
    scale: float = 1.0
    darkness: float = 0.3


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    prims = (ellipse(8, 15, 6, 2, "#000000", fill_opacity=params.darkness),)
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "soft": Params(),
    "dark": Params(darkness=0.5),
}
