"""Sprite registry — auto-discovers sprite modules in this package.

=== HOW TO ADD A NEW SPRITE ===

Each sprite is a single Python file in this directory. It must define:

1. A frozen dataclass called `Params` with sensible defaults
2. A function `generate(params: Params) -> tuple[Prim, ...]`
   decorated with @lru_cache
3. Exactly one role marker:
   - `SPECIES = Species.X` for an animal (plus `LEGS = n`)
   - `DECOR = DecorKind.X` for a decoration
   - `SHADOW = True` for the drop shadow drawn under animals

Drop the file here and it's auto-discovered.

Example (farm_gen/sprites/pebble.py):

    from dataclasses import dataclass
    from functools import lru_cache

    from farm_gen.primitives import Prim, cell_size, outlined, scaled

    @dataclass(frozen=True)
    class Params:
        scale: float = 1.0

    @lru_cache(maxsize=128)
    def generate(params: Params = Params()) -> tuple[Prim, ...]:
        return scaled((outlined(6, 12, 4, 2, "#94a3b8"),), cell_size(params.scale))

=== CONVENTIONS ===

Coordinate system:
    - Y-down, origin at the top-left of a 16x16 cell grid
    - Animals face right; the renderer mirrors them for facing-left

Keep it simple:
    - Author geometry in cells, return scaled(prims, cell_size(scale))
    - generate() should return a tuple (for hashability / lru_cache)
"""

from __future__ import annotations

import importlib
import pkgutil

from farm_gen.primitives import DecorKind, Species

_registry: dict[str, object] = {}


def _discover():
    """Auto-discover sprite modules that define Params + generate."""
    for info in pkgutil.iter_modules(__path__):
        mod = importlib.import_module(f".{info.name}", __package__)
        if hasattr(mod, "generate") and hasattr(mod, "Params"):
            _registry[info.name] = mod


_discover()


def get(name: str):
    """Get a sprite module by name. Raises KeyError if not found."""
    return _registry[name]


def list_sprites() -> list[str]:
    """List all available sprite names."""
    return sorted(_registry.keys())


def all_sprites() -> dict[str, object]:
    """Return the full registry {name: module}."""
    return dict(_registry)


def for_species(species: Species):
    """The sprite module drawing an animal species."""
    for mod in _registry.values():
        if getattr(mod, "SPECIES", None) == species:
            return mod
    raise KeyError(f"no sprite for species {species.value}")


def for_decor(kind: DecorKind):
    """The sprite module drawing a decoration kind."""
    for mod in _registry.values():
        if getattr(mod, "DECOR", None) == kind:
            return mod
    raise KeyError(f"no sprite for decoration {kind.value}")


def shadow():
    """The drop-shadow sprite module."""
    for mod in _registry.values():
        if getattr(mod, "SHADOW", False):
            return mod
    raise KeyError("no shadow sprite registered")


def legs(species: Species) -> int:
    """Leg count of a species (for scene statistics)."""
    return int(getattr(for_species(species), "LEGS", 0))
