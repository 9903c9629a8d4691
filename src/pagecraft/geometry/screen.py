"""Mapping between content space and screen space.

Content space is the untransformed page normalized to [0, 1]. Screen space
is the display slot normalized to [0, 1], after the content has been
rotated, fit into the slot, scaled by the user's percentage, centered and
translated. The slot may be shaped differently from the page (half of an
N-up sheet, for example), so both aspect ratios take part in the math.

All functions here are pure and never raise for degenerate input: unusable
aspect ratios become 1.0 and unusable scales become 100%.
"""

import math

from pagecraft.constants import DEFAULT_SCALE
from pagecraft.geometry._utils import Point, rotate_box, safe_aspect_ratio, unrotate_box
from pagecraft.model import FULL_PAGE_BOX, CropBox, Rotation


def _safe_scale(scale: float) -> float:
    if isinstance(scale, (int, float)) and math.isfinite(scale) and scale > 0:
        return scale / 100.0
    return DEFAULT_SCALE / 100.0


def _natural_size(rotation: Rotation, content_ar: float, slot_ar: float) -> tuple[float, float]:
    """Size of the rotated content in slot-normalized units before fitting.

    Unrotated content spans the slot's width; its height follows from the
    ratio between the two aspect ratios. A quarter turn swaps the content's
    edges, so the width becomes the old height and vice versa.
    """
    if Rotation.normalize(rotation).is_quarter_turn:
        return 1.0 / content_ar, slot_ar
    return 1.0, slot_ar / content_ar


def auto_fit_scale(
    rotation: Rotation,
    content_aspect_ratio: float = 1.0,
    slot_aspect_ratio: float = 1.0,
) -> float:
    """Factor that shrinks the rotated content to fit the slot.

    ``min(slot_w / content_w, slot_h / content_h, 1.0)``: content is never
    enlarged beyond its natural size, only shrunk to fit.
    """
    ar = safe_aspect_ratio(content_aspect_ratio)
    sar = safe_aspect_ratio(slot_aspect_ratio)
    width, height = _natural_size(rotation, ar, sar)
    return min(1.0 / width, 1.0 / height, 1.0)


def content_bounds(
    rotation: Rotation,
    scale: float = DEFAULT_SCALE,
    content_aspect_ratio: float = 1.0,
    slot_aspect_ratio: float = 1.0,
) -> CropBox:
    """Where the rotated, fit and scaled content sits in the slot.

    The result is centered and not clamped: it extends past the slot
    (negative origin, size above 1) when the user scale exceeds 100%.
    """
    ar = safe_aspect_ratio(content_aspect_ratio)
    sar = safe_aspect_ratio(slot_aspect_ratio)
    factor = _safe_scale(scale) * auto_fit_scale(rotation, ar, sar)
    natural_w, natural_h = _natural_size(rotation, ar, sar)
    width = natural_w * factor
    height = natural_h * factor
    return CropBox((1 - width) / 2, (1 - height) / 2, width, height)


def forward_transform_box(
    content_box: CropBox,
    rotation: Rotation,
    scale: float = DEFAULT_SCALE,
    content_aspect_ratio: float = 1.0,
    slot_aspect_ratio: float = 1.0,
    offset: Point = (0.0, 0.0),
) -> CropBox:
    """Map a content-space box to the box an observer sees on screen.

    Args:
        content_box: Box in absolute content coordinates
        rotation: Page rotation (0, 90, 180, 270)
        scale: User scale percentage (100 = natural size)
        content_aspect_ratio: Page width / height
        slot_aspect_ratio: Display slot width / height
        offset: Normalized translation applied after centering

    Returns:
        Box in screen (slot) coordinates
    """
    bounds = content_bounds(rotation, scale, content_aspect_ratio, slot_aspect_ratio)
    rotated = rotate_box(content_box, rotation)
    return CropBox(
        x=bounds.x + rotated.x * bounds.width + offset[0],
        y=bounds.y + rotated.y * bounds.height + offset[1],
        width=rotated.width * bounds.width,
        height=rotated.height * bounds.height,
    )


def inverse_transform_box(
    screen_box: CropBox,
    rotation: Rotation,
    scale: float = DEFAULT_SCALE,
    content_aspect_ratio: float = 1.0,
    slot_aspect_ratio: float = 1.0,
    offset: Point = (0.0, 0.0),
) -> CropBox:
    """Exact inverse of :func:`forward_transform_box`.

    Converts a box dragged on screen back into absolute content coordinates.
    """
    bounds = content_bounds(rotation, scale, content_aspect_ratio, slot_aspect_ratio)
    x = screen_box.x - offset[0]
    y = screen_box.y - offset[1]
    rotated = CropBox(
        x=(x - bounds.x) / bounds.width,
        y=(y - bounds.y) / bounds.height,
        width=screen_box.width / bounds.width,
        height=screen_box.height / bounds.height,
    )
    return unrotate_box(rotated, rotation)


def visible_content_window(
    rotation: Rotation,
    scale: float = DEFAULT_SCALE,
    content_aspect_ratio: float = 1.0,
    slot_aspect_ratio: float = 1.0,
) -> CropBox:
    """Portion of the content visible in the slot, in content coordinates.

    At 100% the whole page is visible. At 200% only the central half of each
    axis is: roughly ``CropBox(0.25, 0.25, 0.5, 0.5)`` for a square page.
    """
    screen = clip_to_unit(
        forward_transform_box(
            FULL_PAGE_BOX, rotation, scale, content_aspect_ratio, slot_aspect_ratio
        )
    )
    return clip_to_unit(
        inverse_transform_box(
            screen, rotation, scale, content_aspect_ratio, slot_aspect_ratio
        )
    )


def clip_to_unit(box: CropBox) -> CropBox:
    """Clip a box to the unit square without imposing a minimum size.

    Used to keep overlay handles on screen when the content overflows the
    slot at high zoom.
    """
    x = max(0.0, min(1.0, box.x))
    y = max(0.0, min(1.0, box.y))
    width = max(0.0, min(1.0 - x, box.right - x))
    height = max(0.0, min(1.0 - y, box.bottom - y))
    return CropBox(x, y, width, height)
