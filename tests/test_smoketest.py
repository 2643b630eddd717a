"""
Fast end-to-end smoketest for the scene pipeline.

Validates that config, composer, renderer, export, catalog and the
command-line driver all work together. Runs in seconds.
"""

import os
import sys
import zipfile

import pytest

import main
from config import Config, ExportConfig
from farm_gen import FarmComposer, build_manifest, sprites, write_archive
from farm_gen.primitives import Species
from farm_gen.render_catalog import render_catalog, render_sprite


def _smoketest_config():
    return Config.for_smoketest()


def _run_main(monkeypatch, *argv):
    """Invoke main.main() with argv; returns the SystemExit code (0 if none)."""
    monkeypatch.setattr(sys, "argv", ["main.py", *argv])
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    try:
        main.main()
    except SystemExit as e:
        return e.code or 0
    return 0


class TestConfig:
    def test_default_valid(self):
        Config.default().validate()

    def test_smoketest_valid(self):
        cfg = _smoketest_config()
        cfg.validate()
        assert cfg.farm.seed == 0
        assert cfg.export.compression == "stored"

    def test_flat_dict(self):
        flat = Config.default().to_flat_dict()
        assert flat["farm/type1"] == "CHICKEN"
        assert flat["farm/count1"] == 10
        assert flat["farm/cage_scale"] == 0.8
        assert flat["export/out_dir"] == "exports"
        assert all("/" in key for key in flat)

    def test_bad_compression_rejected(self):
        cfg = Config(export=ExportConfig(compression="bzip2"))
        with pytest.raises(ValueError):
            cfg.validate()


class TestEndToEnd:
    """Full pipeline integration test."""

    def test_full_pipeline(self, tmp_path):
        cfg = _smoketest_config()
        composer = FarmComposer()
        scene = composer.update(cfg.farm)
        assert len(scene.animals) == cfg.farm.count1 + cfg.farm.count2

        path = write_archive(scene, str(tmp_path), compression=cfg.export.compression)
        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == list(build_manifest(scene))
            assert "DOG.svg" in zf.namelist()

        scene = composer.reroll()
        assert len(scene.animals) == 3

    def test_catalog(self, tmp_path):
        paths = render_catalog(tmp_path, ["chicken", "tree"], cell_px=64)
        assert [p.name for p in paths] == ["chicken.png", "tree.png"]
        assert all(p.exists() for p in paths)

    def test_catalog_unknown_sprite(self, tmp_path):
        with pytest.raises(KeyError):
            render_catalog(tmp_path, ["unicorn"])

    def test_mirrored_raster_differs(self):
        mod = sprites.for_species(Species.DOG)
        prims = mod.generate(mod.Params())
        right = render_sprite(prims, 64)
        left = render_sprite(prims, 64, mirror=True)
        assert right.size == left.size == (64, 64)
        assert right.tobytes() != left.tobytes()


class TestCommandLine:
    def test_render(self, tmp_path, monkeypatch, capsys):
        code = _run_main(monkeypatch, "render", "--smoketest", "--out", str(tmp_path))
        assert code == 0
        assert os.listdir(tmp_path) == ["pixel-farm-2-CHICKEN-1-DOG.svg"]

    def test_export(self, tmp_path, monkeypatch):
        code = _run_main(monkeypatch, "export", "--smoketest", "--out", str(tmp_path))
        assert code == 0
        (name,) = os.listdir(tmp_path)
        assert name.startswith("pixel-farm-layers-") and name.endswith(".zip")

    def test_export_failure_exits_nonzero(self, tmp_path, monkeypatch, capsys):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied")
        code = _run_main(monkeypatch, "export", "--smoketest", "--out", str(blocker))
        assert code == 1
        assert "Export failed" in capsys.readouterr().out

    def test_describe(self, monkeypatch, capsys):
        code = _run_main(monkeypatch, "describe", "--seed", "42", "--type1", "dog", "--count1", "3")
        assert code == 0
        out = capsys.readouterr().out
        assert out.startswith("Scene #00002a (seed=42)")
        assert "heads 8  legs 32" in out

    def test_catalog(self, tmp_path, monkeypatch):
        code = _run_main(monkeypatch, "catalog", "shadow", "--out", str(tmp_path), "--cell-px", "64")
        assert code == 0
        assert os.listdir(tmp_path) == ["shadow.png"]

    def test_identical_species_refused(self, monkeypatch):
        code = _run_main(monkeypatch, "describe", "--type1", "DOG", "--type2", "DOG")
        assert code == 2

    def test_out_of_range_refused(self, monkeypatch):
        code = _run_main(monkeypatch, "describe", "--count1", "51")
        assert code == 2
