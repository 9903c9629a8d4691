"""Edit commands.

A closed set of immutable command values. Each command names one store
mutation; the orchestrator dispatches on the command's type.
"""

from dataclasses import dataclass
from typing import Union

from pagecraft.model import CropBox


@dataclass(frozen=True)
class Crop:
    """Set the crop. ``box`` must already be in absolute content space."""

    box: CropBox


@dataclass(frozen=True)
class Rotate:
    """Rotate relative to the current rotation (+90, -90 or 180)."""

    delta: int = 90


@dataclass(frozen=True)
class SetRotation:
    """Set an absolute rotation. Safe to retry, unlike ``Rotate``."""

    value: int


@dataclass(frozen=True)
class Scale:
    """Set the scale percentage."""

    percent: float


@dataclass(frozen=True)
class Translate:
    """Move the content by a relative offset."""

    dx: float
    dy: float


@dataclass(frozen=True)
class Reset:
    """Restore identity transforms."""


EditCommand = Union[Crop, Rotate, SetRotation, Scale, Translate, Reset]

COMMAND_TYPES: tuple[type, ...] = (Crop, Rotate, SetRotation, Scale, Translate, Reset)
