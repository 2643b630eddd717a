"""
Centralized configuration for scene generation and export.

All settings in one place.
Automatically converts to a flat dict for logging.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Literal

from farm_gen.composer import FarmConfig
from farm_gen.export import COMPRESSION_MODES
from farm_gen.primitives import Species


@dataclass
class ExportConfig:
    """Where and how artifacts are written."""

    out_dir: str = "exports"
    compression: Literal["deflate", "stored"] = "deflate"

    # Sprite catalog
    catalog_dir: str = "docs/sprites"
    catalog_cell_px: int = 256

    def validate(self) -> None:
        if self.compression not in COMPRESSION_MODES:
            raise ValueError(
                f"compression must be one of {sorted(COMPRESSION_MODES)}, got {self.compression!r}"
            )
        if self.catalog_cell_px < 32:
            raise ValueError(f"catalog_cell_px must be >= 32, got {self.catalog_cell_px}")


@dataclass
class Config:
    """Complete configuration: scene parameters plus export settings."""

    farm: FarmConfig = field(default_factory=FarmConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    def validate(self) -> None:
        """Raise ValueError on any out-of-range setting."""
        self.farm.validate()
        self.export.validate()

    def to_flat_dict(self) -> dict:
        """
        Convert to flat dict for logging.

        Prefixes each section's keys with section name.
        Example: farm.count1 -> "farm/count1"
        """
        result = {}
        for section_name, section in [
            ("farm", self.farm),
            ("export", self.export),
        ]:
            for key, value in asdict(section).items():
                if isinstance(value, Enum):
                    value = value.value
                result[f"{section_name}/{key}"] = value
        return result

    @classmethod
    def default(cls) -> Config:
        """Ten chickens and five rabbits in a 0.8 cage, unseeded."""
        return cls()

    @classmethod
    def for_smoketest(cls) -> Config:
        """Config for fast end-to-end validation. Runs in well under a second."""
        return cls(
            farm=FarmConfig(
                type1=Species.CHICKEN,
                count1=2,
                type2=Species.DOG,
                count2=1,
                cage_scale=0.5,
                seed=0,  # Reproducible
            ),
            export=ExportConfig(
                compression="stored",
                catalog_cell_px=64,  # Tiny sheets
            ),
        )
