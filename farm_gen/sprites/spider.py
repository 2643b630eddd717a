"""Spider — dark eight-legged spider with glowing blue eyes.

Parameters:
    scale: Uniform scale multiplier
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import (
    Prim,
    Species,
    cell_size,
    outlined,
    polyline,
    rect,
    scaled,
)

SPECIES = Species.SPIDER
LEGS = 8

LIMB = "#111111"
ABDOMEN = "#374151"
CEPHALOTHORAX = "#111827"
EYE_GLOW = "#0A61EE"

# (x1, x2) of each leg; every leg runs from row 12 down to row 15
_LEG_SPANS = ((3, 1), (4, 3), (5, 5), (6, 7), (10, 12), (11, 13), (12, 14), (13, 15))


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate a spider (8 legs, abdomen, cephalothorax, 2 eyes)."""
    legs = tuple(polyline(((x1, 12), (x2, 15)), LIMB) for x1, x2 in _LEG_SPANS)
    body = (
        outlined(2, 8, 8, 6, ABDOMEN, rx=2),
        outlined(9, 10, 4, 4, CEPHALOTHORAX, rx=1),
        rect(11, 11, 1, 1, EYE_GLOW),
        rect(12, 11, 1, 1, EYE_GLOW),
    )
    return scaled(legs + body, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "house spider": Params(),
    "spiderling": Params(scale=0.75),
}
