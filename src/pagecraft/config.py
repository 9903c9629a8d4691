"""Configuration loading and validation for pagecraft."""

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from pagecraft.constants import MAX_SCALE, MIN_CROP_FRACTION, MIN_SCALE
from pagecraft.exceptions import ConfigError
from pagecraft.recipe import PrintOptions


# ============================================================================
# Enums for constrained string values
# ============================================================================


class PaperSize(str, Enum):
    """Supported paper sizes."""

    A4 = "A4"
    A3 = "A3"
    LETTER = "LETTER"
    LEGAL = "LEGAL"


class ColorMode(str, Enum):
    """Print color modes."""

    COLOR = "color"
    GRAYSCALE = "grayscale"


class Quality(str, Enum):
    """Print quality levels."""

    DRAFT = "draft"
    NORMAL = "normal"
    HIGH = "high"


class PagesPerSheet(int, Enum):
    """N-up layouts."""

    ONE = 1
    TWO = 2
    FOUR = 4


def _parse_enum(
    enum_class: type[Enum],
    value: Any,
    field: str | None = None,
) -> Enum:
    """Parse a raw value into an enum with validation.

    Args:
        enum_class: The enum class to parse into.
        value: The value to parse.
        field: Field name for error context.

    Returns:
        The parsed enum value.

    Raises:
        ConfigError: If the value is not a valid enum member.
    """
    if isinstance(value, str) and enum_class is PaperSize:
        value = value.upper()
    try:
        return enum_class(value)
    except ValueError:
        valid = ", ".join(str(e.value) for e in enum_class)
        raise ConfigError(
            f"Invalid value '{value}'",
            context={"field": field, "suggestion": f"Valid values are: {valid}"},
        )


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping", context={"field": name})
    return section


def _number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ConfigError(f"Expected a number, got {value!r}", context={"field": field})
    return float(value)


@dataclass
class EngineConfig:
    """Limits applied by the edit engine."""
    min_crop_fraction: float = MIN_CROP_FRACTION
    min_scale: float = MIN_SCALE
    max_scale: float = MAX_SCALE


@dataclass
class PrintConfig:
    """Default print settings for exported recipes."""
    paper_size: PaperSize = PaperSize.A4
    color_mode: ColorMode = ColorMode.COLOR
    pages_per_sheet: PagesPerSheet = PagesPerSheet.ONE
    copies: int = 1
    duplex: bool = False
    quality: Quality = Quality.NORMAL
    shop_id: str | None = None

    def to_options(self) -> PrintOptions:
        """Plain print options as they appear in a recipe."""
        return PrintOptions(
            paper_size=self.paper_size.value,
            color_mode=self.color_mode.value,
            duplex=self.duplex,
            copies=self.copies,
            pages_per_sheet=self.pages_per_sheet.value,
            quality=self.quality.value,
            shop_id=self.shop_id,
        )


@dataclass
class Config:
    """Root configuration object."""
    version: int = 1
    engine: EngineConfig = field(default_factory=EngineConfig)
    print: PrintConfig = field(default_factory=PrintConfig)


def parse_engine(data: dict[str, Any]) -> EngineConfig:
    """Parse the engine section."""
    engine = EngineConfig(
        min_crop_fraction=_number(
            data.get("min_crop_fraction", MIN_CROP_FRACTION), "engine.min_crop_fraction"
        ),
        min_scale=_number(data.get("min_scale", MIN_SCALE), "engine.min_scale"),
        max_scale=_number(data.get("max_scale", MAX_SCALE), "engine.max_scale"),
    )

    if not 0 < engine.min_crop_fraction < 1:
        raise ConfigError(
            "min_crop_fraction must be between 0 and 1",
            context={"field": "engine.min_crop_fraction", "suggestion": "Use e.g. 0.05"},
        )
    if engine.min_scale <= 0:
        raise ConfigError("min_scale must be positive", context={"field": "engine.min_scale"})
    if engine.min_scale >= engine.max_scale:
        raise ConfigError(
            f"min_scale ({engine.min_scale:g}) must be below max_scale ({engine.max_scale:g})",
            context={"field": "engine.max_scale"},
        )
    return engine


def parse_print(data: dict[str, Any]) -> PrintConfig:
    """Parse the print section."""
    copies = data.get("copies", 1)
    if isinstance(copies, bool) or not isinstance(copies, int) or copies < 1:
        raise ConfigError(
            f"copies must be a positive integer, got {copies!r}",
            context={"field": "print.copies"},
        )

    shop_id = data.get("shop_id")
    return PrintConfig(
        paper_size=_parse_enum(PaperSize, data.get("paper_size", "A4"), field="print.paper_size"),
        color_mode=_parse_enum(ColorMode, data.get("color_mode", "color"), field="print.color_mode"),
        pages_per_sheet=_parse_enum(
            PagesPerSheet, data.get("pages_per_sheet", 1), field="print.pages_per_sheet"
        ),
        copies=copies,
        duplex=bool(data.get("duplex", False)),
        quality=_parse_enum(Quality, data.get("quality", "normal"), field="print.quality"),
        shop_id=str(shop_id) if shop_id is not None else None,
    )


def parse_config(data: Any) -> Config:
    """Build a Config from already-loaded YAML data.

    Raises:
        ConfigError: If any value is invalid
    """
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML dictionary")

    return Config(
        version=data.get("version", 1),
        engine=parse_engine(_section(data, "engine")),
        print=parse_print(_section(data, "print")),
    )


def load_config(config_path: Path) -> Config:
    """Load and validate a configuration file."""
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", context={"file": str(config_path)}) from e

    return parse_config(data)
