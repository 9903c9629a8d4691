"""Transform data model for pagecraft.

Transform order: CROP -> ROTATE -> SCALE -> TRANSLATE. Content is first
cropped, then rotated, then scaled, then translated, before being placed
into a display slot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any

from pagecraft.constants import DEFAULT_SCALE


@dataclass(frozen=True)
class CropBox:
    """A box normalized to the unit square of some reference frame.

    Coordinates are fractions of the frame: x=0 is the left edge, y=0 is the
    top edge. Which frame (absolute content, committed crop window, or screen)
    depends on where the box is used.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def as_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CropBox":
        """Build a box from a mapping, accepting ``w``/``h`` as short keys."""
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            width=float(data.get("width", data.get("w", 1.0))),
            height=float(data.get("height", data.get("h", 1.0))),
        )


FULL_PAGE_BOX = CropBox(0.0, 0.0, 1.0, 1.0)


class Rotation(IntEnum):
    """Discrete page rotation in degrees. Never a continuous angle."""

    R0 = 0
    R90 = 90
    R180 = 180
    R270 = 270

    @classmethod
    def normalize(cls, degrees: float) -> "Rotation":
        """Reduce any angle to a quarter turn.

        The angle is first wrapped into [0, 360); values that are not a
        multiple of 90 snap to the nearest quarter turn.
        """
        wrapped = ((degrees % 360) + 360) % 360
        if wrapped < 45:
            return cls.R0
        if wrapped < 135:
            return cls.R90
        if wrapped < 225:
            return cls.R180
        if wrapped < 315:
            return cls.R270
        return cls.R0

    @property
    def is_quarter_turn(self) -> bool:
        """True for 90 and 270, where width and height swap."""
        return self in (Rotation.R90, Rotation.R270)


@dataclass(frozen=True)
class PageDimensions:
    """Page size in page-content units (PDF points), not pixels."""

    width: float
    height: float

    @property
    def aspect_ratio(self) -> float:
        """Width over height, or 1.0 for degenerate dimensions."""
        if self.height > 0 and self.width > 0:
            ratio = self.width / self.height
            if math.isfinite(ratio):
                return ratio
        return 1.0

    def rotated(self, rotation: Rotation) -> "PageDimensions":
        if Rotation.normalize(rotation).is_quarter_turn:
            return PageDimensions(self.height, self.width)
        return self

    def as_dict(self) -> dict[str, float]:
        return {"width": self.width, "height": self.height}


@dataclass
class PageTransforms:
    """Per-page edit state. Offsets are in display pixels."""

    crop: CropBox | None = None
    rotation: Rotation = Rotation.R0
    scale: float = DEFAULT_SCALE
    offset_x: float = 0.0
    offset_y: float = 0.0

    def is_identity(self) -> bool:
        """Check if these transforms do nothing (all default values)."""
        return (
            self.crop is None
            and self.rotation == Rotation.R0
            and self.scale == DEFAULT_SCALE
            and self.offset_x == 0.0
            and self.offset_y == 0.0
        )

    def copy(self) -> "PageTransforms":
        # CropBox is frozen, so a shallow replace is a deep copy
        return replace(self)

    def as_dict(self) -> dict[str, Any]:
        return {
            "crop": self.crop.as_dict() if self.crop else None,
            "rotation": int(self.rotation),
            "scale": self.scale,
            "offsetX": self.offset_x,
            "offsetY": self.offset_y,
        }


@dataclass
class PageMetadata:
    """Everything the store knows about one page."""

    page_number: int
    original_dimensions: PageDimensions
    transforms: PageTransforms = field(default_factory=PageTransforms)
    edited: bool = False
    is_cropped: bool = False
    fit_crop_to_page: bool = False

    def copy(self) -> "PageMetadata":
        return replace(self, transforms=self.transforms.copy())

    def as_dict(self) -> dict[str, Any]:
        return {
            "pageNumber": self.page_number,
            "originalDimensions": self.original_dimensions.as_dict(),
            "transforms": self.transforms.as_dict(),
            "hasEdits": self.edited,
            "isCropped": self.is_cropped,
            "fitCropToPage": self.fit_crop_to_page,
        }
