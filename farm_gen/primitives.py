"""Primitive shapes for the pixel-art sprite library.

These map directly to SVG elements. Sprites compose primitives to build
animals and decorations.

Coordinate convention:
    - Y-down (SVG default), origin at the top-left of the sprite's grid
    - A sprite is drawn on a 16x16 grid of cells; one cell is PIXEL_SCALE
      canvas units, so a sprite spans SPRITE_SIZE units at scale 1
    - Sprites are authored in cell units and converted with scaled()

Coordinate layout per shape (``Prim.coords``):
    - RECT:    (x, y, width, height)
    - LINE:    (x1, y1, x2, y2)
    - PATH:    (x0, y0, x1, y1, ...)  -- an open polyline
    - ELLIPSE: (cx, cy, rx, ry)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum

# Size of one sprite "pixel" in canvas units
PIXEL_SCALE = 4
# Sprites are authored on a 16x16 cell grid
GRID_CELLS = 16
SPRITE_SIZE = GRID_CELLS * PIXEL_SCALE


class Shape(Enum):
    """SVG element kinds a primitive can render as."""

    RECT = "rect"
    LINE = "line"
    PATH = "path"
    ELLIPSE = "ellipse"


class Species(str, Enum):
    """The animals that can live in the cage."""

    CHICKEN = "CHICKEN"
    CRANE = "CRANE"
    ANT = "ANT"
    RABBIT = "RABBIT"
    TURTLE = "TURTLE"
    SPIDER = "SPIDER"
    DOG = "DOG"


class DecorKind(str, Enum):
    """Decorations scattered outside the cage."""

    TREE = "TREE"
    BUSH = "BUSH"
    ROCK = "ROCK"
    FLOWER = "FLOWER"
    GRASS = "GRASS"


# Solid obstacles kept clear of the cage vs. ambient clutter
MAJOR_KINDS = (DecorKind.TREE, DecorKind.BUSH, DecorKind.ROCK)
MINOR_KINDS = (DecorKind.FLOWER, DecorKind.GRASS)


@dataclass(frozen=True)
class Prim:
    """A single primitive shape positioned relative to a sprite's origin.

    Attributes:
        shape: Element kind (rect, line, path, ellipse)
        coords: Geometry, layout depends on shape (see module doc)
        fill: Fill color as hex, None for no fill
        stroke: Stroke color as hex, None for no stroke
        stroke_width: Stroke width in the same units as coords
        rx: Corner radius (RECT only)
        opacity: Element opacity in [0, 1]
        fill_opacity: Fill opacity in [0, 1]
        rotate: Optional (degrees, cx, cy) rotation about a pivot
        linecap: Optional SVG stroke-linecap
    """

    shape: Shape
    coords: tuple[float, ...]
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float = 0.0
    rx: float = 0.0
    opacity: float = 1.0
    fill_opacity: float = 1.0
    rotate: tuple[float, float, float] | None = None
    linecap: str | None = None


# ---------------------------------------------------------------------------
# Common palette (use in sprites for a consistent look)
# ---------------------------------------------------------------------------

OUTLINE = "#1e293b"
OUTLINE_WIDTH = 0.5  # cells
EYE_DARK = "#0f172a"

LEAF_DARK = "#14532d"
LEAF_MEDIUM = "#166534"
LEAF_BRIGHT = "#22c55e"
LEAF_LIGHT = "#86efac"
BERRY_RED = "#ef4444"
BARK = "#78350f"

# ---------------------------------------------------------------------------
# Authoring helpers (cell units)
# ---------------------------------------------------------------------------


def rect(
    x: float,
    y: float,
    w: float,
    h: float,
    fill: str,
    rx: float = 0.0,
    opacity: float = 1.0,
    rotate: tuple[float, float, float] | None = None,
) -> Prim:
    """Plain filled rectangle (eyes, highlights, markings)."""
    return Prim(
        Shape.RECT, (x, y, w, h), fill=fill, rx=rx, opacity=opacity, rotate=rotate
    )


def outlined(
    x: float,
    y: float,
    w: float,
    h: float,
    fill: str,
    rx: float = 0.0,
    rotate: tuple[float, float, float] | None = None,
) -> Prim:
    """Rectangle with the dark cartoon outline used for body parts."""
    return Prim(
        Shape.RECT,
        (x, y, w, h),
        fill=fill,
        stroke=OUTLINE,
        stroke_width=OUTLINE_WIDTH,
        rx=rx,
        rotate=rotate,
    )


def line(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    stroke: str,
    width: float = 1.0,
    opacity: float = 1.0,
) -> Prim:
    return Prim(
        Shape.LINE, (x1, y1, x2, y2), stroke=stroke, stroke_width=width, opacity=opacity
    )


def polyline(
    points: tuple[tuple[float, float], ...],
    stroke: str,
    width: float = 1.0,
    linecap: str | None = None,
) -> Prim:
    coords = tuple(c for p in points for c in p)
    return Prim(
        Shape.PATH, coords, stroke=stroke, stroke_width=width, linecap=linecap
    )


def ellipse(
    cx: float, cy: float, rx: float, ry: float, fill: str, fill_opacity: float = 1.0
) -> Prim:
    return Prim(Shape.ELLIPSE, (cx, cy, rx, ry), fill=fill, fill_opacity=fill_opacity)


def cell_size(scale: float = 1.0) -> float:
    """Canvas units per sprite cell at the given sprite scale."""
    return PIXEL_SCALE * scale


def scaled(prims: tuple[Prim, ...], s: float) -> tuple[Prim, ...]:
    """Convert cell-unit primitives to canvas units (multiply geometry by s)."""
    out = []
    for p in prims:
        rot = None
        if p.rotate is not None:
            deg, cx, cy = p.rotate
            rot = (deg, cx * s, cy * s)
        out.append(
            replace(
                p,
                coords=tuple(c * s for c in p.coords),
                stroke_width=p.stroke_width * s,
                rx=p.rx * s,
                rotate=rot,
            )
        )
    return tuple(out)


# ---------------------------------------------------------------------------
# Geometry / bounding box utilities
# ---------------------------------------------------------------------------


def rotate_point(
    px: float, py: float, deg: float, cx: float, cy: float
) -> tuple[float, float]:
    """Rotate (px, py) around (cx, cy), SVG convention (clockwise, Y-down)."""
    a = math.radians(deg)
    c, s = math.cos(a), math.sin(a)
    dx, dy = px - cx, py - cy
    return (cx + dx * c - dy * s, cy + dx * s + dy * c)


def prim_points(p: Prim) -> list[tuple[float, float]]:
    """Extreme points of a primitive's geometry (stroke excluded).

    The bounding box of these points equals the SVG geometric bounding box
    of the element.
    """
    c = p.coords
    if p.shape == Shape.RECT:
        x, y, w, h = c
        pts = [(x, y), (x + w, y), (x, y + h), (x + w, y + h)]
        if p.rotate is not None:
            deg, cx, cy = p.rotate
            pts = [rotate_point(px, py, deg, cx, cy) for px, py in pts]
        return pts
    if p.shape == Shape.ELLIPSE:
        cx, cy, rx, ry = c
        return [(cx - rx, cy - ry), (cx + rx, cy + ry)]
    # LINE and PATH are both flat point lists
    return [(c[i], c[i + 1]) for i in range(0, len(c) - 1, 2)]


def bounds(
    prims: tuple[Prim, ...],
    offset: tuple[float, float] = (0.0, 0.0),
    mirror_width: float | None = None,
) -> tuple[float, float, float, float] | None:
    """Axis-aligned bounds (min_x, min_y, max_x, max_y) of a set of prims.

    ``mirror_width`` reflects x about the sprite's grid (x -> w - x) before
    the offset is applied, matching a horizontally flipped sprite group.
    Returns None for an empty set.
    """
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    ox, oy = offset
    for p in prims:
        for px, py in prim_points(p):
            if mirror_width is not None:
                px = mirror_width - px
            min_x = min(min_x, px + ox)
            max_x = max(max_x, px + ox)
            min_y = min(min_y, py + oy)
            max_y = max(max_y, py + oy)
    if min_x == float("inf"):
        return None
    return (min_x, min_y, max_x, max_y)


def footprint(prims: tuple[Prim, ...]) -> tuple[float, float]:
    """Width and height of the bounding box around a set of prims."""
    b = bounds(prims)
    if b is None:
        return (0.0, 0.0)
    return (b[2] - b[0], b[3] - b[1])
