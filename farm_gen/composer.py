"""Farm composer — turns scene parameters into a FarmScene.

The composer holds the current parameters and recomputes only the parts of
the layout whose inputs changed:

    animals      <- species, counts, cage scale, seed
    decorations  <- cage scale, seed
    texture      <- seed
    mesh         <- cage scale

Every layer draws from its own random stream derived from (seed, stream),
so changing the animal count never reshuffles the trees and a stored seed
replays the whole scene.

Usage:
    composer = FarmComposer()
    scene = composer.update(FarmConfig(count1=10, count2=5, seed=7))
    scene = composer.reroll()          # new random seed, new layout
    print(describe_scene(scene))
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

import numpy as np

from farm_gen import sprites
from farm_gen.layout import (
    BackgroundDot,
    CageGeometry,
    MeshLine,
    PlacedAnimal,
    PlacedDecoration,
    background_texture,
    cage_geometry,
    mesh_lines,
    place_animals,
    place_decorations,
)
from farm_gen.primitives import Species

# Parameter limits (the UI sliders' ranges)
MIN_COUNT = 0
MAX_COUNT = 50
MIN_CAGE_SCALE = 0.3
MAX_CAGE_SCALE = 1.0
CAGE_SCALE_STEP = 0.05

# Independent random streams per layout layer
_ANIMAL_STREAM = 0
_DECOR_STREAM = 1
_TEXTURE_STREAM = 2

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FarmConfig:
    """Scene parameters.

    Attributes:
        type1, type2: The two species in the cage (the driver keeps them
            distinct; the layout does not care)
        count1, count2: How many of each, 0..50
        cage_scale: Cage size factor, 0.3..1.0 in steps of 0.05
        seed: Reroll value. None = keep the current seed, or draw a fresh
            one on the first update
    """

    type1: Species = Species.CHICKEN
    count1: int = 10
    type2: Species = Species.RABBIT
    count2: int = 5
    cage_scale: float = 0.8
    seed: int | None = None

    def validate(self) -> None:
        """Raise ValueError if any parameter is out of range."""
        for name in ("type1", "type2"):
            value = getattr(self, name)
            if not isinstance(value, Species):
                raise ValueError(f"{name} must be a Species, got {value!r}")
        for name in ("count1", "count2"):
            value = getattr(self, name)
            if (
                not isinstance(value, int)
                or isinstance(value, bool)
                or not MIN_COUNT <= value <= MAX_COUNT
            ):
                raise ValueError(
                    f"{name} must be an integer in [{MIN_COUNT}, {MAX_COUNT}], got {value!r}"
                )
        if not MIN_CAGE_SCALE - 1e-9 <= self.cage_scale <= MAX_CAGE_SCALE + 1e-9:
            raise ValueError(
                f"cage_scale must be in [{MIN_CAGE_SCALE}, {MAX_CAGE_SCALE}], "
                f"got {self.cage_scale}"
            )
        steps = self.cage_scale / CAGE_SCALE_STEP
        if abs(steps - round(steps)) > 1e-6:
            raise ValueError(
                f"cage_scale must be a multiple of {CAGE_SCALE_STEP}, got {self.cage_scale}"
            )
        if self.seed is not None and (
            not isinstance(self.seed, int) or isinstance(self.seed, bool) or self.seed < 0
        ):
            raise ValueError(f"seed must be a non-negative integer, got {self.seed!r}")

    def active_species(self) -> tuple[Species, ...]:
        """The configured species with duplicates collapsed, order kept."""
        return tuple(dict.fromkeys((self.type1, self.type2)))


@dataclass(frozen=True)
class FarmScene:
    """One fully laid-out scene — the canonical data model for rendering.

    Attributes:
        config: Parameters the scene was built from (seed always set)
        cage: Cage rectangle
        animals: Animals sorted by y
        decorations: Decorations sorted by y
        mesh: Chain-link lines over the cage
        texture: Background speckle
    """

    config: FarmConfig
    cage: CageGeometry
    animals: tuple[PlacedAnimal, ...]
    decorations: tuple[PlacedDecoration, ...]
    mesh: tuple[MeshLine, ...]
    texture: tuple[BackgroundDot, ...]

    @property
    def species_index(self) -> dict[Species, PlacedAnimal]:
        """First animal of each species in draw order."""
        index: dict[Species, PlacedAnimal] = {}
        for animal in self.animals:
            index.setdefault(animal.species, animal)
        return index


# ---------------------------------------------------------------------------
# Composer
# ---------------------------------------------------------------------------


def _stream_rng(seed: int, stream: int) -> np.random.Generator:
    return np.random.default_rng([seed, stream])


def random_seed() -> int:
    """A fresh reroll value from OS entropy."""
    return int(np.random.default_rng().integers(0, 2**32))


class FarmComposer:
    """Keeps the current scene and rebuilds only what a parameter change touches."""

    def __init__(self, config: FarmConfig | None = None):
        self._config: FarmConfig | None = None
        self._scene: FarmScene | None = None
        if config is not None:
            self.update(config)

    @property
    def config(self) -> FarmConfig | None:
        return self._config

    @property
    def scene(self) -> FarmScene | None:
        """The current scene, or None before the first update()."""
        return self._scene

    def update(self, config: FarmConfig) -> FarmScene:
        """Apply new parameters and return the resulting scene."""
        config.validate()
        prev = self._config
        if config.seed is None:
            seed = prev.seed if prev is not None else random_seed()
            config = dataclasses.replace(config, seed=seed)

        cage = cage_geometry(config.cage_scale)
        old = self._scene
        reseeded = prev is None or prev.seed != config.seed
        resized = prev is None or prev.cage_scale != config.cage_scale
        recount = prev is None or (
            (prev.type1, prev.count1, prev.type2, prev.count2)
            != (config.type1, config.count1, config.type2, config.count2)
        )

        if old is None or reseeded or resized or recount:
            animals = place_animals(
                config.count1,
                config.type1,
                config.count2,
                config.type2,
                cage,
                _stream_rng(config.seed, _ANIMAL_STREAM),
            )
        else:
            animals = old.animals

        if old is None or reseeded or resized:
            decorations = place_decorations(
                cage, _stream_rng(config.seed, _DECOR_STREAM)
            )
        else:
            decorations = old.decorations

        if old is None or reseeded:
            texture = background_texture(_stream_rng(config.seed, _TEXTURE_STREAM))
        else:
            texture = old.texture

        self._config = config
        self._scene = FarmScene(
            config=config,
            cage=cage,
            animals=animals,
            decorations=decorations,
            mesh=mesh_lines(cage),
            texture=texture,
        )
        return self._scene

    def reroll(self, seed: int | None = None) -> FarmScene:
        """Regenerate every randomized layer with a new (or given) seed."""
        if self._config is None:
            raise RuntimeError("reroll() called before the first update()")
        if seed is None:
            seed = random_seed()
            while seed == self._config.seed:
                seed = random_seed()
        return self.update(dataclasses.replace(self._config, seed=seed))


def compose(config: FarmConfig) -> FarmScene:
    """One-shot scene from parameters."""
    return FarmComposer(config).scene


# ---------------------------------------------------------------------------
# Scene description & identity
# ---------------------------------------------------------------------------


def scene_id(seed: int) -> str:
    """Short hex identifier for a scene seed (6 chars)."""
    return f"{seed & 0xFFFFFF:06x}"


def head_count(config: FarmConfig) -> int:
    return config.count1 + config.count2


def leg_count(config: FarmConfig) -> int:
    return config.count1 * sprites.legs(config.type1) + config.count2 * sprites.legs(
        config.type2
    )


def describe_scene(scene: FarmScene) -> str:
    """Multi-line textual description of a full scene.

    Example output:
        Scene #00002a (seed=42)  15 animals, 42 decorations
          heads 15  legs 40
          cage at (160, 120) size 480x360 (scale 0.80)
          [0] RABBIT at (+201.3, +141.0) facing right
          ...
    """
    cfg = scene.config
    cage = scene.cage
    lines = [
        f"Scene #{scene_id(cfg.seed)} (seed={cfg.seed})  "
        f"{len(scene.animals)} animals, {len(scene.decorations)} decorations",
        f"  heads {head_count(cfg)}  legs {leg_count(cfg)}",
        f"  cage at ({cage.x:.0f}, {cage.y:.0f}) size "
        f"{cage.width:.0f}x{cage.height:.0f} (scale {cfg.cage_scale:.2f})",
    ]
    for i, a in enumerate(scene.animals):
        facing = "left" if a.facing_left else "right"
        lines.append(
            f"  [{i}] {a.species.value} at ({a.x:+.1f}, {a.y:+.1f}) facing {facing}"
        )
    for d in scene.decorations:
        lines.append(f"  - {d.kind.value.lower()} at ({d.x:+.1f}, {d.y:+.1f})")
    return "\n".join(lines)
