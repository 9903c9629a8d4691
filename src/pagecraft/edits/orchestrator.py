"""Edit orchestrator.

Single entry point for every edit. Commands are dispatched through the
command registry to exactly one store mutation each. The store keeps the
transforms in the order CROP -> ROTATE -> SCALE -> TRANSLATE, so the order
in which commands arrive never changes how the result is rendered; for the
same axis the last write wins.
"""

from collections.abc import Iterable

from pagecraft.constants import MIN_CROP_FRACTION
from pagecraft.edits.base import EditContext
from pagecraft.edits.commands import (
    COMMAND_TYPES,
    Crop,
    EditCommand,
    Reset,
    Rotate,
    Scale,
)
from pagecraft.edits.registry import CommandRegistry
from pagecraft.exceptions import CommandError
from pagecraft.logging_config import get_logger
from pagecraft.model import CropBox, PageDimensions, PageTransforms, Rotation
from pagecraft.store import MetadataStore

# Import handlers to trigger registration
from pagecraft.edits import handlers  # noqa: F401

logger = get_logger(__name__)


class EditOrchestrator:
    """Dispatches edit commands to the metadata store.

    The orchestrator holds no page state of its own.

    Args:
        store: The document's metadata store
        min_crop_fraction: Smallest crop edge accepted by Crop commands

    Raises:
        CommandError: If any command kind has no registered handler
    """

    def __init__(self, store: MetadataStore, min_crop_fraction: float = MIN_CROP_FRACTION):
        missing = CommandRegistry.missing()
        if missing:
            names = ", ".join(t.__name__ for t in missing)
            raise CommandError(
                f"Edit commands without a handler: {names}",
                context={"missing": names},
            )
        self.store = store
        self.context = EditContext(min_crop_fraction=min_crop_fraction)

    def apply_edit(
        self,
        page_number: int,
        command: EditCommand,
        apply_to_all: bool = False,
    ) -> PageTransforms:
        """Apply one command to a page.

        Args:
            page_number: Target page (1-indexed); unknown pages are ignored
            command: The edit to apply
            apply_to_all: After editing ``page_number``, copy its transforms
                onto every other page

        Returns:
            The page's transforms after the edit

        Raises:
            CommandError: If ``command`` is not an edit command
        """
        if not isinstance(command, COMMAND_TYPES):
            raise CommandError(
                f"Not an edit command: {command!r}",
                context={"page": page_number, "type": type(command).__name__},
            )

        handler = CommandRegistry.get_instance(type(command))
        logger.debug(
            "Page %s: %s%s",
            page_number,
            handler.describe(command),
            " (all pages)" if apply_to_all else "",
        )
        handler.apply(self.store, page_number, command, self.context)

        if apply_to_all:
            self.store.apply_to_all(page_number)

        return self.store.get_transforms(page_number)

    def apply_edits(self, page_number: int, commands: Iterable[EditCommand]) -> PageTransforms:
        """Apply several commands to one page, in sequence."""
        for command in commands:
            self.apply_edit(page_number, command)
        return self.store.get_transforms(page_number)

    def get_transforms(self, page_number: int) -> PageTransforms:
        return self.store.get_transforms(page_number)

    def describe(self, command: EditCommand) -> str:
        """One-line description of a command.

        Raises:
            CommandError: If ``command`` is not an edit command
        """
        if not isinstance(command, COMMAND_TYPES):
            raise CommandError(f"Not an edit command: {command!r}")
        return CommandRegistry.get_instance(type(command)).describe(command)

    # ============================================
    # Convenience methods
    # ============================================

    def set_crop(self, page_number: int, crop: CropBox) -> CropBox | None:
        """Crop a page. Returns the stored (clamped) box, or None for an unknown page."""
        self.apply_edit(page_number, Crop(crop))
        return self.store.get_crop(page_number)

    def clear_crop(self, page_number: int) -> None:
        self.store.clear_crop(page_number)

    def rotate_clockwise(self, page_number: int) -> Rotation:
        return self.apply_edit(page_number, Rotate(90)).rotation

    def rotate_counter_clockwise(self, page_number: int) -> Rotation:
        return self.apply_edit(page_number, Rotate(-90)).rotation

    def set_scale(self, page_number: int, scale: float) -> float:
        """Scale a page. Returns the stored (clamped) percentage."""
        return self.apply_edit(page_number, Scale(scale)).scale

    def set_offset(self, page_number: int, offset_x: float, offset_y: float) -> None:
        self.store.set_offset(page_number, offset_x, offset_y)

    def set_fit_crop_to_page(self, page_number: int, fit: bool) -> None:
        self.store.set_fit_crop_to_page(page_number, fit)

    def reset_page(self, page_number: int) -> None:
        self.apply_edit(page_number, Reset())

    def reset_all(self) -> None:
        logger.debug("Resetting all %d pages", self.store.page_count())
        self.store.reset_all()

    def apply_to_all(self, source_page: int) -> None:
        """Copy one page's transforms onto every other page."""
        self.store.apply_to_all(source_page)

    def apply_to_pages(self, source_page: int, target_pages: Iterable[int]) -> None:
        """Copy one page's transforms onto selected pages."""
        for target in target_pages:
            if target != source_page:
                self.store.clone_transforms(source_page, target)

    # ============================================
    # State queries
    # ============================================

    def has_edits(self, page_number: int) -> bool:
        return self.store.is_edited(page_number)

    def has_any_edits(self) -> bool:
        return self.store.has_any_edits()

    def effective_dimensions(self, page_number: int) -> PageDimensions | None:
        """Page dimensions after rotation (width and height swap on quarter turns)."""
        dimensions = self.store.get_original_dimensions(page_number)
        if dimensions is None:
            return None
        return dimensions.rotated(self.store.get_rotation(page_number))
