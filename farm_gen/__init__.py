"""Procedural pixel-art farm scenes.

Generates a meadow with a cage of animals from parametric sprites. Each
sprite (chicken, tree, rock, etc.) is a pure function: frozen params ->
primitives. Results are cached via @lru_cache, so re-rendering a scene
only re-runs the layout.

Usage:
    from farm_gen import FarmComposer, FarmConfig, Species, render_scene, to_svg

    composer = FarmComposer()
    scene = composer.update(FarmConfig(type1=Species.DOG, count1=3, seed=42))
    svg = to_svg(render_scene(scene))     # full 800x600 scene
    write_archive(scene, "exports")       # layered ZIP
"""

from farm_gen.composer import (
    FarmComposer,
    FarmConfig,
    FarmScene,
    compose,
    describe_scene,
    scene_id,
)
from farm_gen.export import (
    ExportError,
    ExportPreconditionError,
    LayerExporter,
    MeasurementError,
    build_manifest,
    write_archive,
    write_single_image,
)
from farm_gen.primitives import DecorKind, Prim, Species
from farm_gen.renderer import Frame, render_scene, to_svg

__all__ = [
    "FarmComposer",
    "FarmConfig",
    "FarmScene",
    "Species",
    "DecorKind",
    "Prim",
    "Frame",
    "compose",
    "describe_scene",
    "scene_id",
    "render_scene",
    "to_svg",
    "build_manifest",
    "write_archive",
    "write_single_image",
    "LayerExporter",
    "MeasurementError",
    "ExportError",
    "ExportPreconditionError",
]
