"""Shared helpers for the coordinate transform engine."""

import math

from pagecraft.logging_config import get_logger
from pagecraft.model import CropBox, Rotation

logger = get_logger(__name__)

Point = tuple[float, float]


def safe_aspect_ratio(value: float | None) -> float:
    """Return ``value`` if it is a usable aspect ratio, otherwise 1.0.

    A zero, negative or non-finite ratio would turn the quarter-turn math
    into a division by zero, so it is replaced by a unit ratio.
    """
    if isinstance(value, (int, float)) and math.isfinite(value) and value > 0:
        return float(value)
    logger.debug("Substituting unit aspect ratio for %r", value)
    return 1.0


def rotate_point(point: Point, rotation: Rotation) -> Point:
    """Rotate a unit-square point clockwise around the center (0.5, 0.5).

    For a 90 degree turn the content's left edge appears at the top of the
    screen: (0, 0) -> (1, 0), (1, 0) -> (1, 1), (x, y) -> (1 - y, x).
    """
    x, y = point
    rotation = Rotation.normalize(rotation)
    if rotation == Rotation.R90:
        return 1 - y, x
    if rotation == Rotation.R180:
        return 1 - x, 1 - y
    if rotation == Rotation.R270:
        return y, 1 - x
    return x, y


def unrotate_point(point: Point, rotation: Rotation) -> Point:
    """Inverse of :func:`rotate_point`."""
    return rotate_point(point, Rotation.normalize(360 - Rotation.normalize(rotation)))


def box_corners(box: CropBox) -> list[Point]:
    return [
        (box.x, box.y),
        (box.right, box.y),
        (box.x, box.bottom),
        (box.right, box.bottom),
    ]


def bounding_box(points: list[Point]) -> CropBox:
    """Axis-aligned bounding box of a set of points."""
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    min_x, min_y = min(xs), min(ys)
    return CropBox(min_x, min_y, max(xs) - min_x, max(ys) - min_y)


def rotate_box(box: CropBox, rotation: Rotation) -> CropBox:
    return bounding_box([rotate_point(c, rotation) for c in box_corners(box)])


def unrotate_box(box: CropBox, rotation: Rotation) -> CropBox:
    return bounding_box([unrotate_point(c, rotation) for c in box_corners(box)])
