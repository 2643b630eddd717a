"""Layout engine — where every sprite, mesh line and texture dot goes.

All functions are pure functions of their arguments. Randomized ones take an
explicit ``numpy.random.Generator`` so that callers decide between a seeded
(replayable) and an unseeded layout.

Canvas coordinates are Y-down with the origin top-left; a sprite's (x, y)
is the top-left corner of its 16x16 cell grid.

Usage:
    rng = np.random.default_rng(42)
    cage = cage_geometry(0.8)
    animals = place_animals(10, Species.CHICKEN, 5, Species.RABBIT, cage, rng)
    decor = place_decorations(cage, rng)
    mesh = mesh_lines(cage)
    dots = background_texture(rng)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from farm_gen.primitives import SPRITE_SIZE, DecorKind, Species

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Canvas and cage constants
# ---------------------------------------------------------------------------

CANVAS_W = 800
CANVAS_H = 600
BASE_CAGE_W = 600
BASE_CAGE_H = 450

# Animals stay this far inside the cage walls
CAGE_PADDING = 20
# Soft minimum distance between animal origins, as a fraction of sprite size
MIN_SEPARATION_FRAC = 0.7
MAX_PLACEMENT_ATTEMPTS = 50

MAJOR_DECOR_COUNT = 12
MINOR_DECOR_COUNT = 30
# Major decorations keep this gap from the cage rectangle
CAGE_BUFFER = 10
MAX_DECOR_ATTEMPTS = 200

MESH_STEP = 16

TEXTURE_DOTS = 400
TEXTURE_COLORS = ("#22c55e", "#86efac")

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CageGeometry:
    """The cage rectangle in canvas units."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class PlacedAnimal:
    """An animal sprite inside the cage.

    Attributes:
        id: Stable id within one layout ("animal-<n>")
        species: Which sprite to draw
        x, y: Top-left of the sprite grid
        facing_left: Mirror the sprite horizontally
    """

    id: str
    species: Species
    x: float
    y: float
    facing_left: bool = False


@dataclass(frozen=True)
class PlacedDecoration:
    """A decoration sprite on the meadow ("major-<n>" or "minor-<n>")."""

    id: str
    kind: DecorKind
    x: float
    y: float


@dataclass(frozen=True)
class MeshLine:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class BackgroundDot:
    x: float
    y: float
    size: float
    color: str
    opacity: float


# ---------------------------------------------------------------------------
# Cage
# ---------------------------------------------------------------------------


@lru_cache(maxsize=64)
def cage_geometry(cage_scale: float) -> CageGeometry:
    """Cage rectangle for a scale factor, centered on the canvas.

    Width and height are the base dimensions times ``cage_scale``.
    """
    if cage_scale <= 0:
        raise ValueError(f"cage_scale must be positive, got {cage_scale}")
    w = BASE_CAGE_W * cage_scale
    h = BASE_CAGE_H * cage_scale
    return CageGeometry(
        x=CANVAS_W / 2 - w / 2,
        y=CANVAS_H / 2 - h / 2,
        width=w,
        height=h,
    )


def animal_bounds(cage: CageGeometry) -> tuple[float, float, float, float]:
    """Sampling interval (x_min, x_span, y_min, y_span) for animal origins.

    Inset by the padding on every side and by the sprite footprint on the
    right/bottom. Spans are clamped at zero so tiny cages never produce an
    inverted range.
    """
    x_span = max(0.0, cage.width - SPRITE_SIZE - CAGE_PADDING * 2)
    y_span = max(0.0, cage.height - SPRITE_SIZE - CAGE_PADDING * 2)
    return (cage.x + CAGE_PADDING, x_span, cage.y + CAGE_PADDING, y_span)


# ---------------------------------------------------------------------------
# Animals
# ---------------------------------------------------------------------------


def place_animals(
    count1: int,
    type1: Species,
    count2: int,
    type2: Species,
    cage: CageGeometry,
    rng: np.random.Generator,
) -> tuple[PlacedAnimal, ...]:
    """Scatter ``count1 + count2`` animals inside the cage.

    Species tags are shuffled, then each animal is rejection-sampled: up to
    MAX_PLACEMENT_ATTEMPTS uniform draws inside the padded cage, accepting
    the first one at least MIN_SEPARATION_FRAC * SPRITE_SIZE away from every
    animal placed so far. When every attempt is too crowded, one more draw
    is taken regardless of overlap, so every animal is always placed.

    Returns the animals sorted by y (back to front).
    """
    if count1 < 0 or count2 < 0:
        raise ValueError(f"counts must be non-negative, got {count1}, {count2}")

    tags: list[Species] = [type1] * count1 + [type2] * count2
    rng.shuffle(tags)

    x_min, x_span, y_min, y_span = animal_bounds(cage)
    min_dist = SPRITE_SIZE * MIN_SEPARATION_FRAC

    def _draw() -> tuple[float, float]:
        return (
            float(x_min + rng.random() * x_span),
            float(y_min + rng.random() * y_span),
        )

    points = np.empty((len(tags), 2))
    placed: list[PlacedAnimal] = []
    for index, species in enumerate(tags):
        pos = None
        for _attempt in range(MAX_PLACEMENT_ATTEMPTS):
            cx, cy = _draw()
            if index == 0:
                pos = (cx, cy)
                break
            dist = np.hypot(points[:index, 0] - cx, points[:index, 1] - cy)
            if np.all(dist >= min_dist):
                pos = (cx, cy)
                break
        if pos is None:
            log.debug("animal %d: cage crowded, placing without separation", index)
            pos = _draw()

        points[index] = pos
        placed.append(
            PlacedAnimal(
                id=f"animal-{index}",
                species=species,
                x=pos[0],
                y=pos[1],
                facing_left=bool(rng.random() > 0.5),
            )
        )

    return tuple(sorted(placed, key=lambda a: a.y))


# ---------------------------------------------------------------------------
# Decorations
# ---------------------------------------------------------------------------


def overlaps_cage(x: float, y: float, cage: CageGeometry) -> bool:
    """Whether a sprite at (x, y) overlaps the cage expanded by CAGE_BUFFER.

    Touching edges do not count as overlap.
    """
    in_x = x > cage.x - SPRITE_SIZE - CAGE_BUFFER and x < cage.right + CAGE_BUFFER
    in_y = y > cage.y - SPRITE_SIZE - CAGE_BUFFER and y < cage.bottom + CAGE_BUFFER
    return in_x and in_y


def _free_strips(cage: CageGeometry) -> list[tuple[float, float, float, float]]:
    """Origin ranges (x0, x1, y0, y1) guaranteed clear of the expanded cage.

    One strip per side of the cage: left, right, top, bottom. Strips with an
    empty range are omitted.
    """
    max_x = CANVAS_W - SPRITE_SIZE
    max_y = CANVAS_H - SPRITE_SIZE
    strips = [
        (0.0, cage.x - CAGE_BUFFER - SPRITE_SIZE, 0.0, max_y),
        (cage.right + CAGE_BUFFER, max_x, 0.0, max_y),
        (0.0, max_x, 0.0, cage.y - CAGE_BUFFER - SPRITE_SIZE),
        (0.0, max_x, cage.bottom + CAGE_BUFFER, max_y),
    ]
    return [s for s in strips if s[1] >= s[0] and s[3] >= s[2]]


def _sample_major_position(
    cage: CageGeometry, rng: np.random.Generator
) -> tuple[float, float] | None:
    """Rejection-sample a major decoration origin outside the cage.

    After MAX_DECOR_ATTEMPTS misses, falls back to a uniform draw inside the
    roomiest free strip. Returns None when no strip exists at all.
    """
    for _attempt in range(MAX_DECOR_ATTEMPTS):
        x = float(rng.random() * (CANVAS_W - SPRITE_SIZE))
        y = float(rng.random() * (CANVAS_H - SPRITE_SIZE))
        if not overlaps_cage(x, y, cage):
            return (x, y)

    strips = _free_strips(cage)
    if not strips:
        return None
    x0, x1, y0, y1 = max(strips, key=lambda s: (s[1] - s[0] + 1) * (s[3] - s[2] + 1))
    log.debug("decor retries exhausted, using free strip %s", (x0, x1, y0, y1))
    return (
        float(x0 + rng.random() * (x1 - x0)),
        float(y0 + rng.random() * (y1 - y0)),
    )


def _major_kind(r: float) -> DecorKind:
    if r > 0.6:
        return DecorKind.TREE
    if r > 0.3:
        return DecorKind.BUSH
    return DecorKind.ROCK


def place_decorations(
    cage: CageGeometry,
    rng: np.random.Generator,
) -> tuple[PlacedDecoration, ...]:
    """Scatter decorations over the meadow, sorted by y.

    Major items (trees, bushes, rocks) never overlap the cage plus
    CAGE_BUFFER. Minor items (flowers, grass) go anywhere.
    """
    items: list[PlacedDecoration] = []

    for i in range(MAJOR_DECOR_COUNT):
        pos = _sample_major_position(cage, rng)
        if pos is None:
            log.warning("no room outside the cage for major decoration %d", i)
            continue
        kind = _major_kind(float(rng.random()))
        items.append(PlacedDecoration(id=f"major-{i}", kind=kind, x=pos[0], y=pos[1]))

    for i in range(MINOR_DECOR_COUNT):
        x = float(rng.random() * CANVAS_W)
        y = float(rng.random() * CANVAS_H)
        kind = DecorKind.FLOWER if rng.random() > 0.5 else DecorKind.GRASS
        items.append(PlacedDecoration(id=f"minor-{i}", kind=kind, x=x, y=y))

    return tuple(sorted(items, key=lambda d: d.y))


# ---------------------------------------------------------------------------
# Mesh and texture
# ---------------------------------------------------------------------------


@lru_cache(maxsize=64)
def mesh_lines(cage: CageGeometry, step: int = MESH_STEP) -> tuple[MeshLine, ...]:
    """Diagonal chain-link pattern covering the cage rectangle.

    The sweep offset runs from -height to +width so the diagonals cover
    the whole box; the renderer clips them to the cage. Forward diagonals
    (top-left to bottom-right) come first, then backward ones.
    """
    x, y, w, h = cage.x, cage.y, cage.width, cage.height
    n = math.floor((w + h) / step)
    offsets = [-h + k * step for k in range(n + 1)]

    forward = [MeshLine(x + i, y, x + i + h, y + h) for i in offsets]
    backward = [MeshLine(x + i, y + h, x + i + h, y) for i in offsets]
    return tuple(forward + backward)


def background_texture(
    rng: np.random.Generator, count: int = TEXTURE_DOTS
) -> tuple[BackgroundDot, ...]:
    """Grass speckle: square dots of random size, tint and opacity."""
    xs = rng.random(count) * CANVAS_W
    ys = rng.random(count) * CANVAS_H
    sizes = rng.random(count) * 3 + 1
    light = rng.random(count) > 0.5
    opacities = rng.random(count) * 0.4 + 0.1
    return tuple(
        BackgroundDot(
            x=float(xs[i]),
            y=float(ys[i]),
            size=float(sizes[i]),
            color=TEXTURE_COLORS[0] if light[i] else TEXTURE_COLORS[1],
            opacity=float(opacities[i]),
        )
        for i in range(count)
    )
