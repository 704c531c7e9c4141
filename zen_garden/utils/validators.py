"""YAML schema validation and config loading.

Provides pydantic models for the sand garden config (sand_garden.v1.yaml):
    - sand_area: placement, footprint, size preset and grid resolution
    - rake: initial rake style, rake mode, optional jitter seed
    - decay: "sand settling" fade rate
    - render: mark thresholds for the line renderer
    - logging: level / file / json switches passed to setup_logging()

All loaders fail fast with pydantic ValidationError messages naming the
offending key and the allowed range.

Units:
    - Geometry: sand-area length units (pixels in a canvas host)
    - Intensity: [0.0, 1.0]

Usage:
    from zen_garden.utils import validators

    cfg = validators.load_sand_garden_config("configs/sand_garden.v1.yaml")
    cfg.sand_area.cell_size  # 4.0
"""

from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


RAKE_STYLE_NAMES = ("simple", "wide", "curved", "fine")

SAND_AREA_SIZE_SCALE = {"small": 0.6, "medium": 1.0, "large": 1.4}
"""Footprint multiplier for each sand area size preset."""


class SandAreaConfig(BaseModel):
    """Sand area placement (top-left x/y), medium-size footprint, size preset and cell size.

    The raked region is ``width × height`` scaled by the ``size`` preset.
    """
    x: float = Field(default=0.0, description="Top-left x in world units")
    y: float = Field(default=0.0, description="Top-left y in world units")
    width: float = Field(default=400.0, ge=0.0, description="Area width at medium size")
    height: float = Field(default=300.0, ge=0.0, description="Area height at medium size")
    size: Literal["small", "medium", "large"] = Field(default="medium", description="Size preset")
    cell_size: float = Field(default=4.0, gt=0.0, description="Grid cell edge length")

    @property
    def display_width(self) -> float:
        return self.width * SAND_AREA_SIZE_SCALE[self.size]

    @property
    def display_height(self) -> float:
        return self.height * SAND_AREA_SIZE_SCALE[self.size]

    @model_validator(mode='after')
    def validate_grid_fits(self) -> 'SandAreaConfig':
        """Reject areas smaller than one cell (the grid would be empty)."""
        if self.display_width < self.cell_size or self.display_height < self.cell_size:
            raise ValueError(
                f"Sand area {self.display_width}x{self.display_height} ({self.size}) "
                f"is smaller than one cell (cell_size={self.cell_size})"
            )
        return self


class RakeConfig(BaseModel):
    """Initial rake settings."""
    style: str = Field(default="simple", description="One of simple/wide/curved/fine")
    rake_mode: bool = Field(default=True, description="Accept pointer input on start")
    seed: Optional[int] = Field(default=None, ge=0, description="Jitter RNG seed (None = unseeded)")

    @field_validator('style')
    @classmethod
    def validate_style(cls, v: str) -> str:
        v = v.lower()
        if v not in RAKE_STYLE_NAMES:
            raise ValueError(f"style must be one of {RAKE_STYLE_NAMES}, got {v!r}")
        return v


class DecayConfig(BaseModel):
    """Per-step fade applied by smooth_patterns()."""
    rate: float = Field(default=0.01, ge=0.0, le=1.0)


class RenderConfig(BaseModel):
    """Thresholds for converting grid values into line marks."""
    mark_threshold: float = Field(default=0.0, ge=0.0, le=1.0)
    reinforce_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    reinforce_offset: float = Field(default=2.0, ge=0.0)

    @model_validator(mode='after')
    def validate_threshold_order(self) -> 'RenderConfig':
        if self.reinforce_threshold < self.mark_threshold:
            raise ValueError(
                f"reinforce_threshold ({self.reinforce_threshold}) must be >= "
                f"mark_threshold ({self.mark_threshold})"
            )
        return self


class LoggingConfig(BaseModel):
    """Arguments forwarded to logging_config.setup_logging()."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_lines: bool = Field(default=False, alias="json")

    model_config = ConfigDict(populate_by_name=True)


class SandGardenV1(BaseModel):
    """Sand garden configuration (sand_garden.v1.yaml schema)."""
    schema_version: str = Field(default="sand_garden.v1", alias="schema")
    sand_area: SandAreaConfig = Field(default_factory=SandAreaConfig)
    rake: RakeConfig = Field(default_factory=RakeConfig)
    decay: DecayConfig = Field(default_factory=DecayConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "sand_garden.v1":
            raise ValueError(f"schema must be 'sand_garden.v1', got {v!r}")
        return v


def load_sand_garden_config(path: Union[str, Path]) -> SandGardenV1:
    """Load and validate a sand garden config from YAML.

    Parameters
    ----------
    path : str or Path
        Path to a sand_garden.v1.yaml file

    Returns
    -------
    SandGardenV1
        Validated config model

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    pydantic.ValidationError
        If any value is out of range
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sand garden config not found: {path}")

    cfg = fs.load_yaml(path) or {}
    return SandGardenV1(**cfg)
