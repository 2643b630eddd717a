"""Export transform — decomposes a scene into layered SVG artifacts.

Manifest (in archive order):

    full_scene.svg         every group, full canvas
    background_decor.svg   grass and decorations only, full canvas
    cage.svg               the five cage groups, cropped around the posts
    <SPECIES>.svg          one cutout per configured species present,
                           cropped to the first animal of that species

Every artifact is re-rendered from the FarmScene with a group subset and a
crop frame; nothing is copied out of an already-rendered tree.

Usage:
    manifest = build_manifest(scene)
    path = write_archive(scene, "exports")

    exporter = LayerExporter("exports", on_done=print)
    exporter.start(scene)      # False if an export is already running
    exporter.wait()
"""

from __future__ import annotations

import importlib.util
import logging
import math
import os
import tempfile
import threading
import time
import zipfile
from typing import Callable

from farm_gen import sprites
from farm_gen.composer import FarmScene
from farm_gen.layout import PlacedAnimal
from farm_gen.primitives import SPRITE_SIZE, bounds
from farm_gen.renderer import (
    BACKGROUND_GROUPS,
    CAGE_GROUPS,
    Frame,
    render_animal,
    render_scene,
    to_svg,
)

log = logging.getLogger(__name__)

# Cage crop reaches past the posts (10 px wide each side) and rails (20 px)
CAGE_MARGIN_X = 10
CAGE_MARGIN_Y = 20
# Transparent margin around a species cutout
CUTOUT_PADDING = 20

COMPRESSION_MODES = {
    "deflate": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


class MeasurementError(ValueError):
    """A sprite's bounding box could not be determined."""


class ExportError(RuntimeError):
    """Building or writing an export artifact failed."""


class ExportPreconditionError(ExportError):
    """Export requested without what it needs (a scene, a codec)."""


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------


def cage_frame(scene: FarmScene) -> Frame:
    c = scene.cage
    return Frame(
        x=c.x - CAGE_MARGIN_X,
        y=c.y - CAGE_MARGIN_Y,
        width=c.width + CAGE_MARGIN_X * 2,
        height=c.height + CAGE_MARGIN_Y * 2,
    )


def animal_bounds(animal: PlacedAnimal) -> tuple[float, float, float, float]:
    """Tight geometric box (x, y, w, h) of an animal node in canvas units.

    Covers the shadow and the (possibly mirrored) sprite; strokes are not
    included. Raises MeasurementError on empty, degenerate or non-finite
    geometry.
    """
    shadow = sprites.shadow()
    mod = sprites.for_species(animal.species)
    origin = (animal.x, animal.y)

    parts = [
        bounds(shadow.generate(shadow.Params()), origin),
        bounds(
            mod.generate(mod.Params()),
            origin,
            mirror_width=SPRITE_SIZE if animal.facing_left else None,
        ),
    ]
    parts = [b for b in parts if b is not None]
    if not parts:
        raise MeasurementError(f"{animal.id}: no geometry")

    min_x = min(b[0] for b in parts)
    min_y = min(b[1] for b in parts)
    max_x = max(b[2] for b in parts)
    max_y = max(b[3] for b in parts)
    if not all(math.isfinite(v) for v in (min_x, min_y, max_x, max_y)):
        raise MeasurementError(f"{animal.id}: non-finite bounds")
    w, h = max_x - min_x, max_y - min_y
    if w <= 0 or h <= 0:
        raise MeasurementError(f"{animal.id}: degenerate bounds {w}x{h}")
    return (min_x, min_y, w, h)


def cutout_frame(animal: PlacedAnimal) -> Frame:
    bx, by, bw, bh = animal_bounds(animal)
    return Frame(
        x=bx - CUTOUT_PADDING,
        y=by - CUTOUT_PADDING,
        width=bw + CUTOUT_PADDING * 2,
        height=bh + CUTOUT_PADDING * 2,
    )


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


def build_manifest(scene: FarmScene) -> dict[str, str]:
    """All export artifacts as {file name: SVG text}, in archive order.

    A species whose cutout cannot be measured is skipped with a warning;
    the other artifacts are unaffected.
    """
    manifest = {
        "full_scene.svg": to_svg(render_scene(scene)),
        "background_decor.svg": to_svg(render_scene(scene, BACKGROUND_GROUPS)),
        "cage.svg": to_svg(render_scene(scene, CAGE_GROUPS, frame=cage_frame(scene))),
    }

    index = scene.species_index
    for species in scene.config.active_species():
        animal = index.get(species)
        if animal is None:
            continue
        try:
            frame = cutout_frame(animal)
        except MeasurementError as e:
            log.warning("skipping %s cutout: %s", species.value, e)
            continue
        manifest[f"{species.value}.svg"] = to_svg(render_animal(scene, animal, frame))

    return manifest


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


def single_image_name(scene: FarmScene) -> str:
    cfg = scene.config
    return (
        f"pixel-farm-{cfg.count1}-{cfg.type1.value}-{cfg.count2}-{cfg.type2.value}.svg"
    )


def archive_name(timestamp_ms: int | None = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"pixel-farm-layers-{timestamp_ms}.zip"


def _check_preconditions(scene: FarmScene | None, compression: str) -> None:
    if scene is None:
        raise ExportPreconditionError("nothing to export: no scene has been generated")
    if compression not in COMPRESSION_MODES:
        raise ExportPreconditionError(
            f"unknown compression {compression!r}, expected one of {sorted(COMPRESSION_MODES)}"
        )
    if compression == "deflate" and importlib.util.find_spec("zlib") is None:
        raise ExportPreconditionError("deflate compression requires zlib")


def write_single_image(scene: FarmScene, out_dir: str) -> str:
    """Write the full scene as one SVG file. Returns its path."""
    if scene is None:
        raise ExportPreconditionError("nothing to export: no scene has been generated")
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, single_image_name(scene))
    with open(path, "w", encoding="utf-8") as f:
        f.write(to_svg(render_scene(scene)))
    log.info("Wrote %s", path)
    return path


def write_archive(
    scene: FarmScene,
    out_dir: str,
    compression: str = "deflate",
    timestamp_ms: int | None = None,
) -> str:
    """Package the manifest as a ZIP in ``out_dir``. Returns the archive path.

    The archive is written to a temporary file and renamed into place, so
    a failure never leaves a partial archive behind.
    """
    _check_preconditions(scene, compression)
    path = os.path.join(out_dir, archive_name(timestamp_ms))

    tmp_path = None
    try:
        os.makedirs(out_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".pixel-farm-", suffix=".zip.tmp", dir=out_dir)
        os.close(fd)
        manifest = build_manifest(scene)
        with zipfile.ZipFile(tmp_path, "w", compression=COMPRESSION_MODES[compression]) as zf:
            for name, svg in manifest.items():
                zf.writestr(name, svg)
        os.replace(tmp_path, path)
    except Exception as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise ExportError(f"failed to write {path}: {e}") from e

    log.info("Wrote %s (%d layers)", path, len(manifest))
    return path


# ---------------------------------------------------------------------------
# Background exporter
# ---------------------------------------------------------------------------


class LayerExporter:
    """Runs write_archive on a background thread, one job at a time.

    A start() while a job is running is rejected, not queued. Outcomes are
    reported through ``on_done(path)`` or ``on_error(exc)``; both run on
    the worker thread.
    """

    def __init__(
        self,
        out_dir: str,
        compression: str = "deflate",
        on_done: Callable[[str], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ):
        self.out_dir = out_dir
        self.compression = compression
        self.on_done = on_done
        self.on_error = on_error
        self._lock = threading.Lock()
        self._busy = False
        self._thread: threading.Thread | None = None

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    def start(self, scene: FarmScene | None) -> bool:
        """Begin exporting ``scene``. Returns False if a job is in flight."""
        _check_preconditions(scene, self.compression)
        with self._lock:
            if self._busy:
                log.info("Export already in progress, request ignored")
                return False
            self._busy = True
            thread = threading.Thread(
                target=self._run, args=(scene,), name="layer-export", daemon=True
            )
            self._thread = thread
        thread.start()
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Join the in-flight job. Returns True once no job is running."""
        with self._lock:
            thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return not self.busy

    def _run(self, scene: FarmScene) -> None:
        try:
            path = write_archive(scene, self.out_dir, self.compression)
        except Exception as e:
            log.exception("Layer export failed")
            if not isinstance(e, ExportError):
                wrapped = ExportError(f"layer export failed: {e}")
                wrapped.__cause__ = e
                e = wrapped
            if self.on_error is not None:
                self.on_error(e)
        else:
            if self.on_done is not None:
                self.on_done(path)
        finally:
            with self._lock:
                self._busy = False
