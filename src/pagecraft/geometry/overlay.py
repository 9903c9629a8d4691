"""Crop overlay math for the interactive editor.

The UI paints crop handles at ``screen_box(draft)`` and, while the user
drags, turns each new screen box back into a draft with
``draft_from_screen``. When the user confirms, ``commit`` yields the
absolute box to send as a ``Crop`` command.

Drafts are relative to the committed crop window, so re-cropping an
already-cropped page starts from what the user currently sees.
"""

from dataclasses import dataclass

from pagecraft.constants import DEFAULT_SCALE, MIN_CROP_FRACTION
from pagecraft.geometry.crop import centered_crop, clamp_box, compose_crop, decompose_crop
from pagecraft.geometry.screen import clip_to_unit, forward_transform_box, inverse_transform_box
from pagecraft.model import FULL_PAGE_BOX, CropBox, Rotation


@dataclass(frozen=True)
class OverlayFrame:
    """The display state an overlay gesture is interpreted in."""

    rotation: Rotation = Rotation.R0
    scale: float = DEFAULT_SCALE
    content_aspect_ratio: float = 1.0
    slot_aspect_ratio: float = 1.0
    committed_crop: CropBox | None = None

    def initial_draft(self) -> CropBox:
        """Starting draft when entering crop mode.

        A page that is already cropped starts with the whole visible window;
        an uncropped page starts with a centered draft inset 10% per side.
        """
        if self.committed_crop is not None:
            return FULL_PAGE_BOX
        return centered_crop(0.1)

    def screen_box(self, draft: CropBox) -> CropBox:
        """Where to paint the handles for ``draft``, clipped to the slot."""
        absolute = compose_crop(self.committed_crop, draft)
        return clip_to_unit(
            forward_transform_box(
                absolute,
                self.rotation,
                self.scale,
                self.content_aspect_ratio,
                self.slot_aspect_ratio,
            )
        )

    def draft_from_screen(
        self,
        screen_box: CropBox,
        min_fraction: float = MIN_CROP_FRACTION,
    ) -> CropBox:
        """Convert a dragged screen box into a clamped draft."""
        absolute = inverse_transform_box(
            screen_box,
            self.rotation,
            self.scale,
            self.content_aspect_ratio,
            self.slot_aspect_ratio,
        )
        return clamp_box(decompose_crop(self.committed_crop, absolute), min_fraction)

    def commit(self, draft: CropBox) -> CropBox:
        """Absolute content box for a confirmed draft."""
        return compose_crop(self.committed_crop, draft)
