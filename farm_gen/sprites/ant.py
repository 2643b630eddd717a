"""Ant — red fire ant with six legs and two antennae.

The far-side legs are drawn at reduced opacity to fake depth.

Parameters:
    scale: Uniform scale multiplier
"""

from dataclasses import dataclass
from functools import lru_cache

from farm_gen.primitives import (
    Prim,
    Species,
    cell_size,
    line,
    outlined,
    polyline,
    rect,
    scaled,
)

SPECIES = Species.ANT
LEGS = 6

LIMB = "#7f1d1d"
SHELL = "#9a3412"
THORAX = "#7c2d12"
EYE = "#111827"


@dataclass(frozen=True)
class Params:
    scale: float = 1.0


@lru_cache(maxsize=128)
def generate(params: Params = Params()) -> tuple[Prim, ...]:
    """Generate an ant (6 legs, abdomen, thorax, head, antennae, eye)."""
    prims = (
        # Near legs
        line(4, 12, 3, 15, LIMB),
        line(6, 12, 6, 15, LIMB),
        line(8, 12, 9, 15, LIMB),
        # Far legs
        line(5, 11, 4, 14, LIMB, opacity=0.6),
        line(7, 11, 7, 14, LIMB, opacity=0.6),
        line(9, 11, 10, 14, LIMB, opacity=0.6),
        # Abdomen, thorax, head
        outlined(2, 9, 5, 4, SHELL, rx=1),
        outlined(6.5, 10, 3, 3, THORAX, rx=1),
        outlined(9, 8, 4, 4, SHELL, rx=1),
        # Antennae
        polyline(((11, 8.5), (12, 6), (13, 5)), LIMB, width=0.8, linecap="round"),
        polyline(((12, 9), (13.5, 7), (15, 6)), LIMB, width=0.8, linecap="round"),
        rect(11, 9, 1, 1, EYE),
    )
    return scaled(prims, cell_size(params.scale))


VARIATIONS: dict[str, Params] = {
    "fire ant": Params(),
    "worker": Params(scale=0.75),
}
