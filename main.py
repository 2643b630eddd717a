"""
Pixel Farm - single entry point for all modes.

Usage:
    python main.py render   --type1 DOG --count1 3 --seed 42   # Full-scene SVG
    python main.py export   --count1 10 --count2 5              # Layered ZIP
    python main.py describe --seed 7                            # Text summary
    python main.py catalog  --out docs/sprites                  # Sprite sheets
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from config import Config
from farm_gen import (
    ExportError,
    FarmComposer,
    LayerExporter,
    Species,
    describe_scene,
    scene_id,
    write_single_image,
)
from farm_gen.render_catalog import render_catalog

log = logging.getLogger(__name__)

SPECIES_CHOICES = [s.value for s in Species]


def _setup_logging() -> None:
    """Configure root logger level and handler, and install an excepthook.

    The excepthook makes unhandled exceptions show up in the log before
    Python prints its own traceback.
    """
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root.addHandler(handler)

    # Capture unhandled exceptions to the log
    _original_excepthook = sys.excepthook

    def _logging_excepthook(exc_type, exc_value, exc_tb):
        if not issubclass(exc_type, KeyboardInterrupt):
            logging.critical(
                "Unhandled exception", exc_info=(exc_type, exc_value, exc_tb)
            )
        _original_excepthook(exc_type, exc_value, exc_tb)

    sys.excepthook = _logging_excepthook


def _add_scene_args(p: argparse.ArgumentParser) -> None:
    """Scene parameters shared by every scene-producing subcommand."""
    p.add_argument("--type1", type=str.upper, choices=SPECIES_CHOICES, default=None, help="First species (default: CHICKEN)")
    p.add_argument("--count1", type=int, default=None, help="How many of type1, 0-50 (default: 10)")
    p.add_argument("--type2", type=str.upper, choices=SPECIES_CHOICES, default=None, help="Second species (default: RABBIT)")
    p.add_argument("--count2", type=int, default=None, help="How many of type2, 0-50 (default: 5)")
    p.add_argument("--cage-scale", type=float, default=None, help="Cage size 0.3-1.0 in 0.05 steps (default: 0.8)")
    p.add_argument("--seed", type=int, default=None, help="Reroll value (default: random)")
    p.add_argument("--smoketest", action="store_true", help="Use the tiny smoketest preset")


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="main.py",
        description="Pixel Farm - single entry point for all modes",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # render
    p_render = sub.add_parser("render", help="Write the full scene as one SVG")
    _add_scene_args(p_render)
    p_render.add_argument("--out", type=str, default=None, help="Output directory (default: exports)")

    # export
    p_export = sub.add_parser("export", help="Write the layered ZIP archive")
    _add_scene_args(p_export)
    p_export.add_argument("--out", type=str, default=None, help="Output directory (default: exports)")
    p_export.add_argument("--stored", action="store_true", help="Store layers uncompressed")

    # describe
    p_desc = sub.add_parser("describe", help="Print human-readable scene summary")
    _add_scene_args(p_desc)

    # catalog
    p_cat = sub.add_parser("catalog", help="Render sprite variation sheets (PNG)")
    p_cat.add_argument("sprites", nargs="*", help="Sprite names (default: all)")
    p_cat.add_argument("--out", type=str, default=None, help="Output directory (default: docs/sprites)")
    p_cat.add_argument("--cell-px", type=int, default=None, help="Cell size in pixels")

    return parser


def _resolve_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Config:
    """Start from a preset and apply command-line overrides."""
    cfg = Config.for_smoketest() if getattr(args, "smoketest", False) else Config.default()

    overrides = {}
    for name in ("count1", "count2", "seed"):
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value
    for name in ("type1", "type2"):
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = Species(value)
    if getattr(args, "cage_scale", None) is not None:
        overrides["cage_scale"] = args.cage_scale
    cfg.farm = dataclasses.replace(cfg.farm, **overrides)

    if getattr(args, "out", None) is not None:
        if args.command == "catalog":
            cfg.export.catalog_dir = args.out
        else:
            cfg.export.out_dir = args.out
    if getattr(args, "stored", False):
        cfg.export.compression = "stored"
    if getattr(args, "cell_px", None) is not None:
        cfg.export.catalog_cell_px = args.cell_px

    if args.command != "catalog" and cfg.farm.type1 == cfg.farm.type2:
        parser.error("--type1 and --type2 must be different species")
    try:
        cfg.validate()
    except ValueError as e:
        parser.error(str(e))
    return cfg


def _run_export(composer: FarmComposer, cfg: Config) -> int:
    """Run the layered export on the background worker and wait for it."""
    result: dict[str, object] = {}
    exporter = LayerExporter(
        cfg.export.out_dir,
        compression=cfg.export.compression,
        on_done=lambda path: result.setdefault("path", path),
        on_error=lambda exc: result.setdefault("error", exc),
    )
    exporter.start(composer.scene)
    exporter.wait()

    if "path" not in result:
        print(f"Export failed: {result.get('error', 'no archive was written')}")
        return 1
    print(f"Wrote {result['path']}")
    return 0


def main():
    _setup_logging()

    parser = _build_parser()
    args = parser.parse_args()
    cfg = _resolve_config(args, parser)
    log.info("Config: %s", cfg.to_flat_dict())

    if args.command == "catalog":
        try:
            paths = render_catalog(
                Path(cfg.export.catalog_dir), args.sprites, cfg.export.catalog_cell_px
            )
        except KeyError as e:
            parser.error(e.args[0])
        for path in paths:
            print(f"  -> {path}")
        return

    composer = FarmComposer()
    scene = composer.update(cfg.farm)
    log.info("Scene #%s (seed=%d)", scene_id(scene.config.seed), scene.config.seed)

    if args.command == "render":
        try:
            path = write_single_image(scene, cfg.export.out_dir)
        except (OSError, ExportError) as e:
            print(f"Render failed: {e}")
            sys.exit(1)
        print(f"Wrote {path}")

    elif args.command == "export":
        sys.exit(_run_export(composer, cfg))

    elif args.command == "describe":
        print(describe_scene(scene))


if __name__ == "__main__":
    main()
