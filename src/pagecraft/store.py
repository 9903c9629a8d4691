"""Per-page metadata store.

Single source of truth for every page's transform state, keyed by page
number. Stores transforms in the order CROP -> ROTATE -> SCALE -> TRANSLATE.

The store is permissive: setters on a page that has not been registered are
silently ignored, because UI events can race page registration during
progressive loading. Every getter returns a copy; no caller can mutate store
state through a returned value.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime, timezone

from pagecraft.constants import DEFAULT_SCALE, MAX_SCALE, MIN_SCALE
from pagecraft.logging_config import get_logger
from pagecraft.model import CropBox, PageDimensions, PageMetadata, PageTransforms, Rotation

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MetadataStore:
    """Owns one PageMetadata record per page number.

    Create one store per open document and pass it to the components that
    need it.

    Args:
        min_scale: Lower scale bound in percent
        max_scale: Upper scale bound in percent
        clock: Returns the current time; used for ``last_modified``
    """

    def __init__(
        self,
        min_scale: float = MIN_SCALE,
        max_scale: float = MAX_SCALE,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.min_scale = min_scale
        self.max_scale = max_scale
        self._clock = clock
        self._metadata: dict[int, PageMetadata] = {}
        self._original_dimensions: dict[int, PageDimensions] = {}
        self.revision = 0
        self.last_modified = clock()

    def __contains__(self, page_number: object) -> bool:
        return page_number in self._metadata

    def __len__(self) -> int:
        return len(self._metadata)

    def _touch(self) -> None:
        self.revision += 1
        self.last_modified = self._clock()

    def _lookup(self, page_number: int, operation: str) -> PageMetadata | None:
        meta = self._metadata.get(page_number)
        if meta is None:
            logger.debug("Ignoring %s for unknown page %s", operation, page_number)
        return meta

    def _update_flags(self, meta: PageMetadata) -> None:
        meta.is_cropped = meta.transforms.crop is not None
        meta.edited = not meta.transforms.is_identity()

    # ============================================
    # Registration and reads
    # ============================================

    def init_page(self, page_number: int, dimensions: PageDimensions) -> None:
        """Register a page, or refresh the dimensions of a known one.

        Transforms of a known page are left untouched.
        """
        self._original_dimensions[page_number] = dimensions
        meta = self._metadata.get(page_number)
        if meta is None:
            self._metadata[page_number] = PageMetadata(
                page_number=page_number,
                original_dimensions=dimensions,
            )
        else:
            meta.original_dimensions = dimensions
        self._touch()

    def get(self, page_number: int) -> PageMetadata | None:
        meta = self._metadata.get(page_number)
        return meta.copy() if meta else None

    def get_transforms(self, page_number: int) -> PageTransforms:
        """Transforms for a page; identity transforms for an unknown page."""
        meta = self._metadata.get(page_number)
        if meta is None:
            return PageTransforms()
        return meta.transforms.copy()

    def get_original_dimensions(self, page_number: int) -> PageDimensions | None:
        return self._original_dimensions.get(page_number)

    def get_crop(self, page_number: int) -> CropBox | None:
        meta = self._metadata.get(page_number)
        return meta.transforms.crop if meta else None

    def get_rotation(self, page_number: int) -> Rotation:
        meta = self._metadata.get(page_number)
        return meta.transforms.rotation if meta else Rotation.R0

    def get_scale(self, page_number: int) -> float:
        meta = self._metadata.get(page_number)
        return meta.transforms.scale if meta else DEFAULT_SCALE

    def get_offset(self, page_number: int) -> tuple[float, float]:
        meta = self._metadata.get(page_number)
        if meta is None:
            return 0.0, 0.0
        return meta.transforms.offset_x, meta.transforms.offset_y

    def get_fit_crop_to_page(self, page_number: int) -> bool:
        meta = self._metadata.get(page_number)
        return meta.fit_crop_to_page if meta else False

    # ============================================
    # Crop
    # ============================================

    def set_crop(self, page_number: int, crop: CropBox) -> None:
        meta = self._lookup(page_number, "set_crop")
        if meta is None:
            return
        meta.transforms.crop = crop
        self._update_flags(meta)
        self._touch()

    def clear_crop(self, page_number: int) -> None:
        """Remove the crop; an otherwise untouched page is no longer edited."""
        meta = self._lookup(page_number, "clear_crop")
        if meta is None:
            return
        meta.transforms.crop = None
        self._update_flags(meta)
        self._touch()

    # ============================================
    # Rotation
    # ============================================

    def set_rotation(self, page_number: int, rotation: int) -> None:
        meta = self._lookup(page_number, "set_rotation")
        if meta is None:
            return
        meta.transforms.rotation = Rotation.normalize(rotation)
        self._update_flags(meta)
        self._touch()

    def add_rotation(self, page_number: int, delta: int) -> Rotation | None:
        """Rotate relative to the current rotation.

        Returns:
            The new rotation, or None if the page is unknown
        """
        meta = self._lookup(page_number, "add_rotation")
        if meta is None:
            return None
        rotation = Rotation.normalize(meta.transforms.rotation + delta)
        self.set_rotation(page_number, rotation)
        return rotation

    # ============================================
    # Scale
    # ============================================

    def clamp_scale(self, scale: float) -> float:
        return max(self.min_scale, min(self.max_scale, scale))

    def set_scale(self, page_number: int, scale: float) -> None:
        """Set the scale percentage, clamped to [min_scale, max_scale]."""
        meta = self._lookup(page_number, "set_scale")
        if meta is None:
            return
        if not math.isfinite(scale):
            logger.debug("Ignoring non-finite scale %r for page %s", scale, page_number)
            return
        meta.transforms.scale = float(self.clamp_scale(scale))
        self._update_flags(meta)
        self._touch()

    # ============================================
    # Translate
    # ============================================

    def set_offset(self, page_number: int, offset_x: float, offset_y: float) -> None:
        meta = self._lookup(page_number, "set_offset")
        if meta is None:
            return
        if not (math.isfinite(offset_x) and math.isfinite(offset_y)):
            logger.debug(
                "Ignoring non-finite offset (%r, %r) for page %s", offset_x, offset_y, page_number
            )
            return
        meta.transforms.offset_x = float(offset_x)
        meta.transforms.offset_y = float(offset_y)
        self._update_flags(meta)
        self._touch()

    def add_offset(self, page_number: int, dx: float, dy: float) -> None:
        if page_number not in self._metadata:
            self._lookup(page_number, "add_offset")
            return
        offset_x, offset_y = self.get_offset(page_number)
        self.set_offset(page_number, offset_x + dx, offset_y + dy)

    # ============================================
    # Fit crop to page
    # ============================================

    def set_fit_crop_to_page(self, page_number: int, fit: bool) -> None:
        meta = self._lookup(page_number, "set_fit_crop_to_page")
        if meta is None:
            return
        meta.fit_crop_to_page = bool(fit)
        self._touch()

    # ============================================
    # Reset
    # ============================================

    def reset_page(self, page_number: int) -> None:
        """Restore identity transforms, keeping the original dimensions."""
        meta = self._lookup(page_number, "reset_page")
        if meta is None:
            return
        dimensions = self._original_dimensions.get(page_number, meta.original_dimensions)
        self._metadata[page_number] = PageMetadata(
            page_number=page_number,
            original_dimensions=dimensions,
        )
        self._touch()

    def reset_all(self) -> None:
        for page_number in list(self._metadata):
            self.reset_page(page_number)

    def clear(self) -> None:
        """Forget every page."""
        self._metadata.clear()
        self._original_dimensions.clear()
        self._touch()

    # ============================================
    # Batch
    # ============================================

    def clone_transforms(self, from_page: int, to_page: int) -> None:
        """Copy one page's full transform state onto another."""
        source = self._metadata.get(from_page)
        target = self._metadata.get(to_page)
        if source is None or target is None:
            logger.debug("Ignoring clone_transforms %s -> %s: unknown page", from_page, to_page)
            return
        target.transforms = source.transforms.copy()
        target.fit_crop_to_page = source.fit_crop_to_page
        self._update_flags(target)
        self._touch()

    def apply_to_all(self, source_page: int) -> None:
        """Clone the source page's transforms onto every other known page."""
        if self._lookup(source_page, "apply_to_all") is None:
            return
        for page_number in self._metadata:
            if page_number != source_page:
                self.clone_transforms(source_page, page_number)

    # ============================================
    # Queries
    # ============================================

    def is_edited(self, page_number: int) -> bool:
        meta = self._metadata.get(page_number)
        return meta.edited if meta else False

    def has_any_edits(self) -> bool:
        return any(meta.edited for meta in self._metadata.values())

    def page_count(self) -> int:
        return len(self._metadata)

    def page_numbers(self) -> list[int]:
        return sorted(self._metadata)

    def all_metadata(self) -> list[PageMetadata]:
        return [self._metadata[n].copy() for n in self.page_numbers()]
