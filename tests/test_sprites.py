"""Fast tests for the sprite library.

Validates that:
- Every registered sprite generates valid primitives
- Every sprite has a VARIATIONS dict and exactly one role
- Every species and decoration kind has a sprite
- Sprites fit their 16x16 cell grid
- Bounding boxes follow mirroring and rotation
"""

import math

import pytest

from farm_gen import sprites
from farm_gen.primitives import (
    GRID_CELLS,
    PIXEL_SCALE,
    SPRITE_SIZE,
    DecorKind,
    Prim,
    Shape,
    Species,
    bounds,
    ellipse,
    footprint,
    outlined,
    prim_points,
    rect,
    scaled,
)

# ---------------------------------------------------------------------------
# Sprite validation
# ---------------------------------------------------------------------------


class TestSprites:
    """Every sprite module must generate valid prims."""

    @pytest.fixture(params=sprites.list_sprites())
    def sprite_name(self, request):
        return request.param

    def test_has_params_and_generate(self, sprite_name):
        mod = sprites.get(sprite_name)
        assert hasattr(mod, "Params"), f"{sprite_name} missing Params dataclass"
        assert hasattr(mod, "generate"), f"{sprite_name} missing generate()"

    def test_has_variations(self, sprite_name):
        mod = sprites.get(sprite_name)
        variations = getattr(mod, "VARIATIONS", None)
        assert variations is not None, f"{sprite_name} missing VARIATIONS dict"
        assert len(variations) >= 1, f"{sprite_name} VARIATIONS is empty"

    def test_has_exactly_one_role(self, sprite_name):
        mod = sprites.get(sprite_name)
        roles = [hasattr(mod, "SPECIES"), hasattr(mod, "DECOR"), getattr(mod, "SHADOW", False)]
        assert sum(roles) == 1, f"{sprite_name}: roles {roles}"

    def test_default_generates_valid_prims(self, sprite_name):
        mod = sprites.get(sprite_name)
        prims = mod.generate(mod.Params())
        assert isinstance(prims, tuple), "generate() must return a tuple"
        assert len(prims) >= 1, "generate() must return at least 1 prim"
        for p in prims:
            assert isinstance(p, Prim)
            assert isinstance(p.shape, Shape)
            assert all(math.isfinite(c) for c in p.coords)
            assert 0 <= p.opacity <= 1
            assert 0 <= p.fill_opacity <= 1
            assert p.fill or p.stroke, f"{sprite_name}: invisible prim {p}"

    def test_all_variations_generate(self, sprite_name):
        mod = sprites.get(sprite_name)
        for var_name, params in mod.VARIATIONS.items():
            prims = mod.generate(params)
            assert isinstance(prims, tuple), f"{sprite_name}/{var_name}: not a tuple"
            assert len(prims) >= 1, f"{sprite_name}/{var_name}: no prims"

    def test_generate_is_cached(self, sprite_name):
        mod = sprites.get(sprite_name)
        assert mod.generate(mod.Params()) is mod.generate(mod.Params())

    def test_footprint_positive(self, sprite_name):
        mod = sprites.get(sprite_name)
        w, h = footprint(mod.generate(mod.Params()))
        assert w > 0, f"{sprite_name}: footprint w={w}"
        assert h > 0, f"{sprite_name}: footprint h={h}"

    def test_fits_cell_grid(self, sprite_name):
        mod = sprites.get(sprite_name)
        min_x, min_y, max_x, max_y = bounds(mod.generate(mod.Params()))
        lo, hi = -1 * PIXEL_SCALE, (GRID_CELLS + 2) * PIXEL_SCALE
        assert lo <= min_x and max_x <= hi, f"{sprite_name}: x in [{min_x}, {max_x}]"
        assert lo <= min_y and max_y <= hi, f"{sprite_name}: y in [{min_y}, {max_y}]"

    def test_scale_shrinks_footprint(self, sprite_name):
        mod = sprites.get(sprite_name)
        w1, h1 = footprint(mod.generate(mod.Params()))
        w2, h2 = footprint(mod.generate(mod.Params(scale=0.5)))
        assert w2 == pytest.approx(w1 * 0.5)
        assert h2 == pytest.approx(h1 * 0.5)


class TestRegistry:
    """Role lookups over the registry."""

    @pytest.mark.parametrize("species", list(Species))
    def test_every_species_has_sprite(self, species):
        mod = sprites.for_species(species)
        assert mod.SPECIES == species

    @pytest.mark.parametrize("kind", list(DecorKind))
    def test_every_decor_kind_has_sprite(self, kind):
        mod = sprites.for_decor(kind)
        assert mod.DECOR == kind

    def test_shadow_registered(self):
        mod = sprites.shadow()
        prims = mod.generate(mod.Params())
        assert len(prims) == 1
        assert prims[0].shape == Shape.ELLIPSE
        assert prims[0].fill_opacity == pytest.approx(0.3)

    def test_leg_counts(self):
        expected = {
            Species.CHICKEN: 2,
            Species.CRANE: 2,
            Species.ANT: 6,
            Species.RABBIT: 4,
            Species.TURTLE: 4,
            Species.SPIDER: 8,
            Species.DOG: 4,
        }
        assert {s: sprites.legs(s) for s in Species} == expected

    def test_unknown_name_raises(self):
        with pytest.raises(KeyError):
            sprites.get("unicorn")


# ---------------------------------------------------------------------------
# Geometry helpers
# ---------------------------------------------------------------------------


class TestGeometry:
    def test_sprite_size(self):
        assert SPRITE_SIZE == 64

    def test_scaled_multiplies_geometry(self):
        (p,) = scaled((outlined(1, 2, 3, 4, "#fff", rx=1),), 4)
        assert p.coords == (4, 8, 12, 16)
        assert p.rx == 4
        assert p.stroke_width == pytest.approx(2.0)

    def test_rect_points(self):
        p = rect(1, 2, 3, 4, "#fff")
        assert prim_points(p) == [(1, 2), (4, 2), (1, 6), (4, 6)]

    def test_rotated_rect_points(self):
        p = rect(0, 0, 2, 0, "#fff", rotate=(90.0, 0.0, 0.0))
        (x0, y0), (x1, y1) = prim_points(p)[:2]
        assert (x0, y0) == pytest.approx((0, 0))
        assert (x1, y1) == pytest.approx((0, 2))

    def test_ellipse_bounds(self):
        assert bounds((ellipse(8, 15, 6, 2, "#000"),)) == (2, 13, 14, 17)

    def test_bounds_offset_and_mirror(self):
        prims = (rect(0, 0, 10, 5, "#fff"),)
        assert bounds(prims, offset=(100, 50)) == (100, 50, 110, 55)
        # Mirrored within a 64-wide grid: x -> 64 - x
        assert bounds(prims, offset=(100, 50), mirror_width=64) == (154, 50, 164, 55)

    def test_bounds_empty(self):
        assert bounds(()) is None
        assert footprint(()) == (0.0, 0.0)
