"""Scene renderer — builds the SVG element tree for a FarmScene.

The scene is always drawn as eight named groups in a fixed z-order:

    grp-bg                    grass and speckle
    grp-cage-floor            tinted floor inside the cage
    grp-cage-structure-back   back rail (behind animals)
    grp-mesh-back             faint chain-link, clipped to the cage
    grp-decor                 trees, bushes, rocks, flowers, grass
    grp-animals               one tagged <g> per animal
    grp-mesh-front            chain-link in front of the animals
    grp-cage-structure-front  posts and bottom rail (in front of animals)

Export variants re-render from the same scene: pick a subset of groups and
optionally a Frame. A frame crops the output to a box: the viewBox becomes
``0 0 width height`` and all content is shifted by ``(-x, -y)``.

Usage:
    svg = to_svg(render_scene(scene))
    cage_only = to_svg(render_scene(scene, CAGE_GROUPS, frame=Frame(90, 100, 500, 400)))
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from farm_gen import sprites
from farm_gen.composer import FarmScene
from farm_gen.layout import CANVAS_H, CANVAS_W, PlacedAnimal
from farm_gen.primitives import SPRITE_SIZE, Prim, Shape

SVG_NS = "http://www.w3.org/2000/svg"
CAGE_CLIP_ID = "cage-clip"

GROUP_BG = "grp-bg"
GROUP_CAGE_FLOOR = "grp-cage-floor"
GROUP_CAGE_BACK = "grp-cage-structure-back"
GROUP_MESH_BACK = "grp-mesh-back"
GROUP_DECOR = "grp-decor"
GROUP_ANIMALS = "grp-animals"
GROUP_MESH_FRONT = "grp-mesh-front"
GROUP_CAGE_FRONT = "grp-cage-structure-front"

ALL_GROUPS = (
    GROUP_BG,
    GROUP_CAGE_FLOOR,
    GROUP_CAGE_BACK,
    GROUP_MESH_BACK,
    GROUP_DECOR,
    GROUP_ANIMALS,
    GROUP_MESH_FRONT,
    GROUP_CAGE_FRONT,
)
CAGE_GROUPS = (
    GROUP_CAGE_FLOOR,
    GROUP_CAGE_BACK,
    GROUP_MESH_BACK,
    GROUP_MESH_FRONT,
    GROUP_CAGE_FRONT,
)
BACKGROUND_GROUPS = (GROUP_BG, GROUP_DECOR)

GRASS = "#4ade80"
FLOOR = "#78350f"
FLOOR_EDGE = "#5c2b0b"
WOOD = "#92400e"
WOOD_GRAIN = "#78350f"
WIRE = "#1e293b"

MESH_BACK_OPACITY = 0.1
MESH_FRONT_OPACITY = 0.08


@dataclass(frozen=True)
class Frame:
    """Output crop box in canvas coordinates."""

    x: float
    y: float
    width: float
    height: float


def fmt(value: float) -> str:
    """Compact number formatting: at most 3 decimals, no trailing zeros."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _attrs(**kwargs) -> dict[str, str]:
    """SVG attribute dict; underscores become dashes, None values are dropped."""
    out = {}
    for key, value in kwargs.items():
        if value is None:
            continue
        if isinstance(value, float) or isinstance(value, int) and not isinstance(value, bool):
            value = fmt(value)
        out[key.rstrip("_").replace("_", "-")] = str(value)
    return out


# ---------------------------------------------------------------------------
# Sprites
# ---------------------------------------------------------------------------


def prim_element(parent: ET.Element, p: Prim) -> ET.Element:
    """Append one primitive as an SVG element."""
    c = p.coords
    opacity = p.opacity if p.opacity != 1.0 else None
    fill_opacity = p.fill_opacity if p.fill_opacity != 1.0 else None
    stroke_width = p.stroke_width if p.stroke else None

    if p.shape == Shape.RECT:
        transform = None
        if p.rotate is not None:
            deg, cx, cy = p.rotate
            transform = f"rotate({fmt(deg)}, {fmt(cx)}, {fmt(cy)})"
        return ET.SubElement(
            parent,
            "rect",
            _attrs(
                x=c[0],
                y=c[1],
                width=c[2],
                height=c[3],
                rx=p.rx or None,
                fill=p.fill,
                fill_opacity=fill_opacity,
                stroke=p.stroke,
                stroke_width=stroke_width,
                opacity=opacity,
                transform=transform,
            ),
        )
    if p.shape == Shape.LINE:
        return ET.SubElement(
            parent,
            "line",
            _attrs(
                x1=c[0],
                y1=c[1],
                x2=c[2],
                y2=c[3],
                stroke=p.stroke,
                stroke_width=stroke_width,
                stroke_linecap=p.linecap,
                opacity=opacity,
            ),
        )
    if p.shape == Shape.PATH:
        pts = [f"{fmt(c[i])},{fmt(c[i + 1])}" for i in range(0, len(c) - 1, 2)]
        d = "M" + " L".join(pts)
        return ET.SubElement(
            parent,
            "path",
            _attrs(
                d=d,
                fill=p.fill or "none",
                stroke=p.stroke,
                stroke_width=stroke_width,
                stroke_linecap=p.linecap,
                opacity=opacity,
            ),
        )
    # ELLIPSE
    return ET.SubElement(
        parent,
        "ellipse",
        _attrs(
            cx=c[0],
            cy=c[1],
            rx=c[2],
            ry=c[3],
            fill=p.fill,
            fill_opacity=fill_opacity,
            opacity=opacity,
        ),
    )


def sprite_group(
    parent: ET.Element,
    prims: tuple[Prim, ...],
    x: float,
    y: float,
    mirror: bool = False,
) -> ET.Element:
    """Append a sprite at (x, y); ``mirror`` flips it within its grid."""
    transform = f"translate({fmt(x)}, {fmt(y)})"
    if mirror:
        transform += f" scale(-1, 1) translate({fmt(-SPRITE_SIZE)}, 0)"
    g = ET.SubElement(parent, "g", {"transform": transform})
    for p in prims:
        prim_element(g, p)
    return g


def animal_node(parent: ET.Element, animal: PlacedAnimal) -> ET.Element:
    """Append one animal: shadow plus sprite, tagged with its species."""
    node = ET.SubElement(
        parent,
        "g",
        {"id": f"animal-node-{animal.id}", "data-type": animal.species.value},
    )
    shadow = sprites.shadow()
    sprite_group(node, shadow.generate(shadow.Params()), animal.x, animal.y)
    mod = sprites.for_species(animal.species)
    sprite_group(
        node, mod.generate(mod.Params()), animal.x, animal.y, mirror=animal.facing_left
    )
    return node


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


def _background(scene: FarmScene) -> ET.Element:
    g = ET.Element("g", {"id": GROUP_BG})
    ET.SubElement(g, "rect", _attrs(width=CANVAS_W, height=CANVAS_H, fill=GRASS))
    texture = ET.SubElement(g, "g", {"id": "bg-texture"})
    for dot in scene.texture:
        ET.SubElement(
            texture,
            "rect",
            _attrs(
                x=dot.x,
                y=dot.y,
                width=dot.size,
                height=dot.size,
                fill=dot.color,
                fill_opacity=dot.opacity,
            ),
        )
    return g


def _cage_floor(scene: FarmScene) -> ET.Element:
    c = scene.cage
    g = ET.Element("g", {"id": GROUP_CAGE_FLOOR})
    box = dict(x=c.x, y=c.y, width=c.width, height=c.height)
    ET.SubElement(
        g,
        "rect",
        _attrs(**box, fill=FLOOR, fill_opacity=0.2, stroke=FLOOR_EDGE, stroke_width=4),
    )
    ET.SubElement(
        g,
        "rect",
        _attrs(**box, fill="none", stroke="black", stroke_width=4, stroke_opacity=0.2),
    )
    return g


def _rail(parent: ET.Element, x: float, y: float, w: float, h: float) -> None:
    ET.SubElement(
        parent,
        "rect",
        _attrs(x=x, y=y, width=w, height=h, fill=WOOD, stroke="black", stroke_width=2),
    )


def _grain(parent: ET.Element, x1: float, y1: float, x2: float, y2: float) -> None:
    ET.SubElement(
        parent,
        "line",
        _attrs(x1=x1, y1=y1, x2=x2, y2=y2, stroke=WOOD_GRAIN, stroke_width=1),
    )


def _cage_back(scene: FarmScene) -> ET.Element:
    c = scene.cage
    g = ET.Element("g", {"id": GROUP_CAGE_BACK})
    _rail(g, c.x, c.y - 10, c.width, 20)
    _grain(g, c.x, c.y - 5, c.right, c.y - 5)
    _grain(g, c.x, c.y + 5, c.right, c.y + 5)
    return g


def _mesh(scene: FarmScene, group_id: str, opacity: float) -> ET.Element:
    attrs = {"id": group_id, "opacity": fmt(opacity)}
    if group_id == GROUP_MESH_FRONT:
        attrs["pointer-events"] = "none"
    attrs["clip-path"] = f"url(#{CAGE_CLIP_ID})"
    g = ET.Element("g", attrs)
    for ln in scene.mesh:
        ET.SubElement(
            g,
            "line",
            _attrs(
                x1=ln.x1,
                y1=ln.y1,
                x2=ln.x2,
                y2=ln.y2,
                stroke=WIRE,
                stroke_width=1.5,
                stroke_linecap="round",
            ),
        )
    return g


def _decor(scene: FarmScene) -> ET.Element:
    g = ET.Element("g", {"id": GROUP_DECOR})
    for item in scene.decorations:
        mod = sprites.for_decor(item.kind)
        holder = ET.SubElement(g, "g", {"data-kind": item.kind.value})
        sprite_group(holder, mod.generate(mod.Params()), item.x, item.y)
    return g


def _animals(scene: FarmScene) -> ET.Element:
    g = ET.Element("g", {"id": GROUP_ANIMALS})
    for animal in scene.animals:
        animal_node(g, animal)
    return g


def _cage_front(scene: FarmScene) -> ET.Element:
    c = scene.cage
    g = ET.Element("g", {"id": GROUP_CAGE_FRONT})
    left = ET.SubElement(g, "g")
    _rail(left, c.x - 10, c.y - 20, 20, c.height + 40)
    _grain(left, c.x, c.y - 20, c.x, c.bottom + 20)
    right = ET.SubElement(g, "g")
    _rail(right, c.right - 10, c.y - 20, 20, c.height + 40)
    _grain(right, c.right, c.y - 20, c.right, c.bottom + 20)
    bottom = ET.SubElement(g, "g")
    _rail(bottom, c.x, c.bottom - 10, c.width, 20)
    _grain(bottom, c.x, c.bottom, c.right, c.bottom)
    return g


_GROUP_BUILDERS = {
    GROUP_BG: _background,
    GROUP_CAGE_FLOOR: _cage_floor,
    GROUP_CAGE_BACK: _cage_back,
    GROUP_MESH_BACK: lambda s: _mesh(s, GROUP_MESH_BACK, MESH_BACK_OPACITY),
    GROUP_DECOR: _decor,
    GROUP_ANIMALS: _animals,
    GROUP_MESH_FRONT: lambda s: _mesh(s, GROUP_MESH_FRONT, MESH_FRONT_OPACITY),
    GROUP_CAGE_FRONT: _cage_front,
}


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def _svg_root(width: float, height: float) -> ET.Element:
    return ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "viewBox": f"0 0 {fmt(width)} {fmt(height)}",
            "width": fmt(width),
            "height": fmt(height),
            "preserveAspectRatio": "xMidYMid meet",
            "shape-rendering": "crispEdges",
        },
    )


def _defs(root: ET.Element, scene: FarmScene) -> None:
    c = scene.cage
    defs = ET.SubElement(root, "defs")
    clip = ET.SubElement(defs, "clipPath", {"id": CAGE_CLIP_ID})
    ET.SubElement(clip, "rect", _attrs(x=c.x, y=c.y, width=c.width, height=c.height))


def _content_parent(root: ET.Element, frame: Frame | None) -> ET.Element:
    if frame is None:
        return root
    return ET.SubElement(
        root, "g", {"transform": f"translate({fmt(-frame.x)}, {fmt(-frame.y)})"}
    )


def render_scene(
    scene: FarmScene,
    groups: tuple[str, ...] = ALL_GROUPS,
    frame: Frame | None = None,
) -> ET.Element:
    """Render the selected groups (always in canonical z-order).

    Raises KeyError for an unknown group id.
    """
    for gid in groups:
        if gid not in _GROUP_BUILDERS:
            raise KeyError(f"unknown group {gid!r}")
    if frame is None:
        root = _svg_root(CANVAS_W, CANVAS_H)
    else:
        root = _svg_root(frame.width, frame.height)
    _defs(root, scene)
    parent = _content_parent(root, frame)
    for gid in ALL_GROUPS:
        if gid in groups:
            parent.append(_GROUP_BUILDERS[gid](scene))
    return root


def render_animal(scene: FarmScene, animal: PlacedAnimal, frame: Frame) -> ET.Element:
    """Render one animal of ``scene`` alone, cropped to ``frame``."""
    root = _svg_root(frame.width, frame.height)
    _defs(root, scene)
    animal_node(_content_parent(root, frame), animal)
    return root


def to_svg(root: ET.Element) -> str:
    """Serialize an element tree to SVG text (deterministic)."""
    return ET.tostring(root, encoding="unicode")
