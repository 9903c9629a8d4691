"""Coordinate transform engine for pagecraft.

Pure, stateless functions over the data model:

    from pagecraft.geometry import compose_crop, forward_transform_box

    absolute = compose_crop(committed, draft)
    on_screen = forward_transform_box(absolute, Rotation.R90, 100, 1.41, 1.41)
"""

from pagecraft.geometry.crop import (
    adjust_crop_by_handle,
    centered_crop,
    clamp_box,
    compose_crop,
    decompose_crop,
    move_crop,
)
from pagecraft.geometry.overlay import OverlayFrame
from pagecraft.geometry.screen import (
    auto_fit_scale,
    clip_to_unit,
    content_bounds,
    forward_transform_box,
    inverse_transform_box,
    visible_content_window,
)
from pagecraft.geometry._utils import rotate_point, safe_aspect_ratio, unrotate_point
from pagecraft.model import FULL_PAGE_BOX

__all__ = [
    # Crop algebra
    "FULL_PAGE_BOX",
    "compose_crop",
    "decompose_crop",
    "clamp_box",
    "centered_crop",
    "adjust_crop_by_handle",
    "move_crop",
    # Screen mapping
    "auto_fit_scale",
    "content_bounds",
    "forward_transform_box",
    "inverse_transform_box",
    "visible_content_window",
    "clip_to_unit",
    # Overlay
    "OverlayFrame",
    # Utilities
    "rotate_point",
    "unrotate_point",
    "safe_aspect_ratio",
]
