"""Crop composition algebra.

A committed crop is expressed in absolute content space. A draft crop drawn
on top of an already-cropped page is expressed relative to the committed
window, so re-cropping works in the coordinates the user currently sees.
``compose_crop`` and ``decompose_crop`` convert between the two without
accumulating drift.
"""

from pagecraft.constants import CROP_HANDLES, MIN_CROP_FRACTION
from pagecraft.model import FULL_PAGE_BOX, CropBox


def compose_crop(committed: CropBox | None, draft: CropBox) -> CropBox:
    """Express a draft crop (relative to ``committed``) in absolute content space.

    Example:
        committed = CropBox(0.2, 0.2, 0.6, 0.6)  # center 60% is visible
        draft = CropBox(0.25, 0.25, 0.5, 0.5)    # center half of what is visible
        compose_crop(committed, draft) == CropBox(0.35, 0.35, 0.3, 0.3)

    With no committed window this is the identity on ``draft``.
    """
    if committed is None:
        return draft
    return CropBox(
        x=committed.x + draft.x * committed.width,
        y=committed.y + draft.y * committed.height,
        width=draft.width * committed.width,
        height=draft.height * committed.height,
    )


def decompose_crop(committed: CropBox | None, absolute: CropBox) -> CropBox:
    """Inverse of :func:`compose_crop`.

    Converts an absolute crop back to coordinates relative to the committed
    window. A zero-size window has no interior, so the full box is returned.
    """
    if committed is None:
        return absolute
    if committed.width == 0 or committed.height == 0:
        return FULL_PAGE_BOX
    return CropBox(
        x=(absolute.x - committed.x) / committed.width,
        y=(absolute.y - committed.y) / committed.height,
        width=absolute.width / committed.width,
        height=absolute.height / committed.height,
    )


def clamp_box(box: CropBox, min_fraction: float = MIN_CROP_FRACTION) -> CropBox:
    """Clamp a box into the unit square with a minimum edge length.

    The origin is clamped to [0, 1 - min_fraction] so there is always room
    for the minimum size; the size is then raised to ``min_fraction`` and
    capped at the remaining distance to the far edge. The result satisfies
    ``x + width <= 1`` and ``y + height <= 1``, and clamping twice gives the
    same box as clamping once.
    """
    x = max(0.0, min(1.0 - min_fraction, box.x))
    y = max(0.0, min(1.0 - min_fraction, box.y))
    width = min(1.0 - x, max(min_fraction, box.width))
    height = min(1.0 - y, max(min_fraction, box.height))
    return CropBox(x, y, width, height)


def centered_crop(fraction: float = 0.1, min_fraction: float = MIN_CROP_FRACTION) -> CropBox:
    """A default draft inset by ``fraction`` on every side."""
    inset = max(0.0, min(0.5 - min_fraction / 2, fraction))
    return clamp_box(CropBox(inset, inset, 1 - 2 * inset, 1 - 2 * inset), min_fraction)


def adjust_crop_by_handle(
    box: CropBox,
    handle: str,
    dx: float,
    dy: float,
    min_fraction: float = MIN_CROP_FRACTION,
) -> CropBox:
    """Move one edge or corner of ``box`` by a normalized delta.

    Handles are compass points: ``nw ne sw se`` move a corner, ``n s e w``
    move a single edge. Unknown handles leave the box unchanged (clamped).
    """
    x, y, width, height = box.x, box.y, box.width, box.height
    if handle not in CROP_HANDLES:
        return clamp_box(box, min_fraction)

    if "w" in handle:
        x += dx
        width -= dx
    elif "e" in handle:
        width += dx

    if "n" in handle:
        y += dy
        height -= dy
    elif "s" in handle:
        height += dy

    return clamp_box(CropBox(x, y, width, height), min_fraction)


def move_crop(
    box: CropBox,
    dx: float,
    dy: float,
    min_fraction: float = MIN_CROP_FRACTION,
) -> CropBox:
    """Translate the whole box, keeping its size where the frame allows."""
    x = max(0.0, min(1.0 - box.width, box.x + dx))
    y = max(0.0, min(1.0 - box.height, box.y + dy))
    return clamp_box(CropBox(x, y, box.width, box.height), min_fraction)
