"""Tests for the layered export: manifest, frames, archive writing, worker."""

import math
import os
import threading
import xml.etree.ElementTree as ET
import zipfile

import pytest

from farm_gen import export
from farm_gen.composer import FarmConfig, compose
from farm_gen.export import (
    CUTOUT_PADDING,
    ExportError,
    ExportPreconditionError,
    LayerExporter,
    MeasurementError,
    animal_bounds,
    archive_name,
    build_manifest,
    cage_frame,
    cutout_frame,
    single_image_name,
    write_archive,
    write_single_image,
)
from farm_gen.layout import PlacedAnimal
from farm_gen.primitives import Species
from farm_gen.renderer import fmt, render_scene, to_svg

NS = {"svg": "http://www.w3.org/2000/svg"}


@pytest.fixture(scope="module")
def scene():
    return compose(
        FarmConfig(type1=Species.CHICKEN, count1=10, type2=Species.RABBIT, count2=5, seed=42)
    )


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------


class TestFrames:
    def test_cage_frame(self, scene):
        frame = cage_frame(scene)
        assert (frame.x, frame.y, frame.width, frame.height) == pytest.approx(
            (150, 100, 500, 400)
        )

    def test_animal_bounds_cover_shadow(self):
        animal = PlacedAnimal("animal-0", Species.DOG, 200.0, 150.0)
        bx, by, bw, bh = animal_bounds(animal)
        # Shadow ellipse spans x 8..56, y 52..68 in sprite units
        assert bx <= 208 and by <= 202
        assert bx + bw >= 256 and by + bh >= 218
        assert bw > 0 and bh > 0

    def test_mirrored_bounds_reflect(self):
        right = animal_bounds(PlacedAnimal("a", Species.CHICKEN, 100.0, 100.0, False))
        left = animal_bounds(PlacedAnimal("a", Species.CHICKEN, 100.0, 100.0, True))
        assert right[2:] == pytest.approx(left[2:])

    def test_cutout_frame_padding(self):
        animal = PlacedAnimal("animal-0", Species.TURTLE, 300.0, 250.0, True)
        bx, by, bw, bh = animal_bounds(animal)
        frame = cutout_frame(animal)
        assert frame.x == pytest.approx(bx - CUTOUT_PADDING)
        assert frame.y == pytest.approx(by - CUTOUT_PADDING)
        assert frame.width == pytest.approx(bw + 2 * CUTOUT_PADDING)
        assert frame.height == pytest.approx(bh + 2 * CUTOUT_PADDING)

    def test_non_finite_position_fails_measurement(self):
        with pytest.raises(MeasurementError):
            animal_bounds(PlacedAnimal("a", Species.ANT, math.nan, 10.0))

    def test_measurement_error_is_value_error(self):
        assert issubclass(MeasurementError, ValueError)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class TestManifest:
    def test_fifteen_animals_give_five_entries(self, scene):
        manifest = build_manifest(scene)
        assert list(manifest) == [
            "full_scene.svg",
            "background_decor.svg",
            "cage.svg",
            "CHICKEN.svg",
            "RABBIT.svg",
        ]

    def test_empty_scene_has_no_cutouts(self):
        empty = compose(FarmConfig(count1=0, count2=0, seed=1))
        assert list(build_manifest(empty)) == [
            "full_scene.svg",
            "background_decor.svg",
            "cage.svg",
        ]

    def test_missing_species_skipped(self):
        only_dogs = compose(
            FarmConfig(type1=Species.DOG, count1=3, type2=Species.ANT, count2=0, seed=3)
        )
        assert "DOG.svg" in build_manifest(only_dogs)
        assert "ANT.svg" not in build_manifest(only_dogs)

    def test_duplicate_species_collapsed(self):
        twins = compose(
            FarmConfig(type1=Species.DOG, count1=2, type2=Species.DOG, count2=2, seed=3)
        )
        names = list(build_manifest(twins))
        assert names.count("DOG.svg") == 1

    def test_cage_artifact_frame(self, scene):
        root = ET.fromstring(build_manifest(scene)["cage.svg"])
        assert root.get("viewBox") == "0 0 500 400"
        wrapper = root.find("svg:g", NS)
        assert wrapper.get("transform") == "translate(-150, -100)"

    def test_cutout_frame_and_content(self, scene):
        manifest = build_manifest(scene)
        for species in (Species.CHICKEN, Species.RABBIT):
            animal = scene.species_index[species]
            bx, by, bw, bh = animal_bounds(animal)
            root = ET.fromstring(manifest[f"{species.value}.svg"])
            assert root.get("viewBox") == f"0 0 {fmt(bw + 40)} {fmt(bh + 40)}"
            wrapper = root.find("svg:g", NS)
            assert wrapper.get("transform") == f"translate({fmt(-(bx - 20))}, {fmt(-(by - 20))})"
            nodes = wrapper.findall("svg:g", NS)
            assert len(nodes) == 1
            assert nodes[0].get("data-type") == species.value

    def test_full_scene_untouched_by_cutouts(self, scene):
        assert build_manifest(scene)["full_scene.svg"] == to_svg(render_scene(scene))

    def test_manifest_idempotent(self, scene):
        assert build_manifest(scene) == build_manifest(scene)

    def test_measurement_failure_skips_cutout(self, scene, monkeypatch, caplog):
        def failing(animal):
            raise MeasurementError("boom")

        monkeypatch.setattr(export, "cutout_frame", failing)
        manifest = build_manifest(scene)
        assert list(manifest) == ["full_scene.svg", "background_decor.svg", "cage.svg"]
        assert "skipping CHICKEN cutout" in caplog.text


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


class TestWriters:
    def test_single_image_name(self, scene):
        assert single_image_name(scene) == "pixel-farm-10-CHICKEN-5-RABBIT.svg"

    def test_write_single_image(self, scene, tmp_path):
        path = write_single_image(scene, str(tmp_path))
        assert os.path.basename(path) == "pixel-farm-10-CHICKEN-5-RABBIT.svg"
        with open(path, encoding="utf-8") as f:
            assert f.read().startswith("<svg")

    def test_archive_name(self):
        assert archive_name(1700000000123) == "pixel-farm-layers-1700000000123.zip"

    def test_write_archive(self, scene, tmp_path):
        path = write_archive(scene, str(tmp_path), timestamp_ms=123)
        assert os.path.basename(path) == "pixel-farm-layers-123.zip"
        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == list(build_manifest(scene))
            assert zf.read("full_scene.svg").decode() == build_manifest(scene)["full_scene.svg"]
        assert os.listdir(tmp_path) == ["pixel-farm-layers-123.zip"]

    def test_stored_compression(self, scene, tmp_path):
        path = write_archive(scene, str(tmp_path), compression="stored")
        with zipfile.ZipFile(path) as zf:
            assert all(i.compress_type == zipfile.ZIP_STORED for i in zf.infolist())

    def test_no_scene_is_precondition_error(self, tmp_path):
        with pytest.raises(ExportPreconditionError):
            write_archive(None, str(tmp_path))
        assert os.listdir(tmp_path) == []

    def test_missing_zlib_is_precondition_error(self, scene, tmp_path, monkeypatch):
        real_find_spec = export.importlib.util.find_spec
        monkeypatch.setattr(
            export.importlib.util,
            "find_spec",
            lambda name, *a, **kw: None if name == "zlib" else real_find_spec(name, *a, **kw),
        )
        with pytest.raises(ExportPreconditionError):
            write_archive(scene, str(tmp_path))
        # Stored archives need no codec
        write_archive(scene, str(tmp_path), compression="stored")

    def test_out_dir_is_a_file(self, scene, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied")
        with pytest.raises(ExportError) as excinfo:
            write_archive(scene, str(blocker))
        assert not isinstance(excinfo.value, ExportPreconditionError)
        assert os.listdir(tmp_path) == ["not-a-dir"]

    def test_failure_leaves_no_partial_file(self, scene, tmp_path, monkeypatch):
        def broken_writestr(self, name, data, *args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(zipfile.ZipFile, "writestr", broken_writestr)
        with pytest.raises(ExportError) as excinfo:
            write_archive(scene, str(tmp_path))
        assert not isinstance(excinfo.value, ExportPreconditionError)
        assert os.listdir(tmp_path) == []


# ---------------------------------------------------------------------------
# Background exporter
# ---------------------------------------------------------------------------


class TestLayerExporter:
    def test_success_callback(self, scene, tmp_path):
        done = []
        exporter = LayerExporter(str(tmp_path), on_done=done.append)
        assert exporter.start(scene)
        assert exporter.wait(timeout=30)
        assert len(done) == 1
        assert os.path.exists(done[0])
        assert not exporter.busy

    def test_rejects_while_busy(self, scene, tmp_path, monkeypatch):
        release = threading.Event()
        entered = threading.Event()
        calls = []

        def slow_write(scene, out_dir, compression="deflate"):
            calls.append(out_dir)
            entered.set()
            release.wait(timeout=30)
            return os.path.join(out_dir, "slow.zip")

        monkeypatch.setattr(export, "write_archive", slow_write)
        exporter = LayerExporter(str(tmp_path))
        assert exporter.start(scene)
        assert entered.wait(timeout=30)
        assert exporter.busy
        assert exporter.start(scene) is False
        release.set()
        assert exporter.wait(timeout=30)
        assert len(calls) == 1
        # Free again once the first job finished
        assert exporter.start(scene)
        exporter.wait(timeout=30)
        assert len(calls) == 2

    def test_error_callback_clears_busy(self, scene, tmp_path, monkeypatch, caplog):
        def failing_write(scene, out_dir, compression="deflate"):
            raise ExportError("boom")

        errors = []
        monkeypatch.setattr(export, "write_archive", failing_write)
        exporter = LayerExporter(str(tmp_path), on_error=errors.append)
        assert exporter.start(scene)
        assert exporter.wait(timeout=30)
        assert len(errors) == 1
        assert isinstance(errors[0], ExportError)
        assert not exporter.busy
        assert "Layer export failed" in caplog.text

    def test_start_without_scene_raises(self, tmp_path):
        exporter = LayerExporter(str(tmp_path))
        with pytest.raises(ExportPreconditionError):
            exporter.start(None)
        assert not exporter.busy

    def test_wait_without_job(self, tmp_path):
        assert LayerExporter(str(tmp_path)).wait(timeout=1)

    def test_unwritable_out_dir_reports_error(self, scene, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied")
        errors, done = [], []
        exporter = LayerExporter(str(blocker), on_done=done.append, on_error=errors.append)
        assert exporter.start(scene)
        assert exporter.wait(timeout=30)
        assert done == []
        assert len(errors) == 1
        assert isinstance(errors[0], ExportError)
        assert not exporter.busy

    def test_unexpected_error_wrapped(self, scene, tmp_path, monkeypatch):
        def crashing_write(scene, out_dir, compression="deflate"):
            raise OSError("device gone")

        errors = []
        monkeypatch.setattr(export, "write_archive", crashing_write)
        exporter = LayerExporter(str(tmp_path), on_error=errors.append)
        assert exporter.start(scene)
        assert exporter.wait(timeout=30)
        (err,) = errors
        assert isinstance(err, ExportError)
        assert isinstance(err.__cause__, OSError)
        assert not exporter.busy
