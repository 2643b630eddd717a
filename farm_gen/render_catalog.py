"""Render named variations of each sprite into labeled PNG grids.

Animals get an extra mirrored cell per variation (the facing-left pose).

Usage:
    python -m farm_gen.render_catalog              # all sprites
    python -m farm_gen.render_catalog chicken       # single sprite
    python -m farm_gen.render_catalog --out docs/   # custom output dir
"""

from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path

from PIL import Image, ImageColor, ImageDraw, ImageFont

from farm_gen import sprites
from farm_gen.primitives import SPRITE_SIZE, Prim, Shape, rotate_point

# Render settings
CELL_PX = 256
MARGIN_PX = 24
LABEL_H = 36
BG_COLOR = (74, 222, 128)  # meadow green, same as the scene background
LABEL_BG = (30, 32, 36)
LABEL_FG = (220, 220, 220)


def _rgba(color: str, alpha: float) -> tuple[int, int, int, int]:
    r, g, b = ImageColor.getrgb(color)[:3]
    return (r, g, b, int(round(max(0.0, min(1.0, alpha)) * 255)))


def _draw_prim(
    draw: ImageDraw.ImageDraw,
    p: Prim,
    zoom: float,
    origin: tuple[float, float],
    mirror: bool,
) -> None:
    """Rasterize one primitive (canvas units) into the cell at ``origin``."""
    ox, oy = origin

    def to_px(x: float, y: float) -> tuple[float, float]:
        if mirror:
            x = SPRITE_SIZE - x
        return (ox + x * zoom, oy + y * zoom)

    fill = _rgba(p.fill, p.opacity * p.fill_opacity) if p.fill else None
    stroke = _rgba(p.stroke, p.opacity) if p.stroke else None
    width = max(1, int(round(p.stroke_width * zoom))) if stroke else 0
    c = p.coords

    if p.shape == Shape.RECT:
        x, y, w, h = c
        corners = [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]
        if p.rotate is not None:
            deg, cx, cy = p.rotate
            corners = [rotate_point(px, py, deg, cx, cy) for px, py in corners]
            draw.polygon([to_px(*pt) for pt in corners], fill=fill, outline=stroke, width=width)
            return
        (x0, y0), (x1, y1) = to_px(x, y), to_px(x + w, y + h)
        box = [min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1)]
        if p.rx > 0:
            draw.rounded_rectangle(box, radius=p.rx * zoom, fill=fill, outline=stroke, width=width)
        else:
            draw.rectangle(box, fill=fill, outline=stroke, width=width)
    elif p.shape == Shape.ELLIPSE:
        cx, cy, rx, ry = c
        (x0, y0), (x1, y1) = to_px(cx - rx, cy - ry), to_px(cx + rx, cy + ry)
        draw.ellipse([min(x0, x1), y0, max(x0, x1), y1], fill=fill)
    else:
        pts = [to_px(c[i], c[i + 1]) for i in range(0, len(c) - 1, 2)]
        draw.line(pts, fill=stroke, width=width, joint="curve")


def render_sprite(prims: tuple[Prim, ...], cell_px: int = CELL_PX, mirror: bool = False) -> Image.Image:
    """Rasterize a sprite onto a square cell of ``cell_px`` pixels."""
    img = Image.new("RGB", (cell_px, cell_px), BG_COLOR)
    draw = ImageDraw.Draw(img, "RGBA")
    margin = cell_px * MARGIN_PX / CELL_PX
    zoom = (cell_px - 2 * margin) / SPRITE_SIZE
    for p in prims:
        _draw_prim(draw, p, zoom, (margin, margin), mirror)
    return img


def _try_load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Try to load a nice font, fall back to default."""
    candidates = [
        "/System/Library/Fonts/SFNSMono.ttf",
        "/System/Library/Fonts/Menlo.ttc",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    ]
    for path in candidates:
        if Path(path).exists():
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue
    return ImageFont.load_default()


def _cells(sprite_name: str) -> list[tuple[str, tuple[Prim, ...], bool]]:
    mod = sprites.get(sprite_name)
    variations: dict[str, object] = getattr(mod, "VARIATIONS", None) or {
        "default": mod.Params()
    }
    is_animal = hasattr(mod, "SPECIES")
    cells = []
    for name, params in variations.items():
        prims = mod.generate(params)
        cells.append((name, prims, False))
        if is_animal:
            cells.append((f"{name} (left)", prims, True))
    return cells


def render_sprite_sheet(sprite_name: str, out_dir: Path, cell_px: int = CELL_PX) -> Path:
    """Render all variations of a sprite into a labeled grid PNG."""
    cells = _cells(sprite_name)
    n = len(cells)
    cols = min(4, n)
    rows = math.ceil(n / cols)

    cell_total_h = cell_px + LABEL_H
    grid = Image.new("RGB", (cols * cell_px, rows * cell_total_h), LABEL_BG)
    draw = ImageDraw.Draw(grid)
    font = _try_load_font(18)

    for idx, (name, prims, mirror) in enumerate(cells):
        x = (idx % cols) * cell_px
        y = (idx // cols) * cell_total_h
        grid.paste(render_sprite(prims, cell_px, mirror), (x, y))

        # Label below the render
        label_y = y + cell_px
        bbox = font.getbbox(name)
        tw = bbox[2] - bbox[0]
        tx = x + (cell_px - tw) // 2
        ty = label_y + (LABEL_H - (bbox[3] - bbox[1])) // 2
        draw.text((tx, ty), name, fill=LABEL_FG, font=font)

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{sprite_name}.png"
    grid.save(out_path)
    return out_path


def render_catalog(
    out_dir: Path, names: list[str] | None = None, cell_px: int = CELL_PX
) -> list[Path]:
    """Render a sheet per sprite. Raises KeyError for an unknown name."""
    available = sprites.list_sprites()
    targets = names or available
    for name in targets:
        if name not in available:
            raise KeyError(f"unknown sprite '{name}'. Available: {', '.join(available)}")
    return [render_sprite_sheet(name, out_dir, cell_px) for name in targets]


def main():
    parser = argparse.ArgumentParser(description="Render sprite variation catalogs")
    parser.add_argument("sprites", nargs="*", help="Sprite names (default: all)")
    parser.add_argument("--out", default="docs/sprites", help="Output directory")
    parser.add_argument("--cell-px", type=int, default=CELL_PX, help="Cell size in pixels")
    args = parser.parse_args()

    try:
        paths = render_catalog(Path(args.out), args.sprites, args.cell_px)
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        sys.exit(1)

    for path in paths:
        print(f"  -> {path}")
    print("Done.")


if __name__ == "__main__":
    main()
