"""Recipe export.

A recipe is the versioned JSON document handed to the external renderer.
It lists every included page with its original dimensions and transforms,
plus the print settings and source file details. Keys are camelCase because
the renderer parses the document structurally.

Export is a read-only projection of the metadata store: exporting twice
without edits in between gives byte-identical JSON.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pagecraft.constants import DEFAULT_FILE_TYPE, RECIPE_TYPE, RECIPE_VERSION
from pagecraft.exceptions import RecipeError
from pagecraft.logging_config import get_logger
from pagecraft.model import PageMetadata

if TYPE_CHECKING:
    from pagecraft.pages import PageState
    from pagecraft.store import MetadataStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class SourceInfo:
    """The uploaded file a recipe refers to."""

    file_name: str
    file_size: int
    total_pages: int
    file_type: str = DEFAULT_FILE_TYPE

    def as_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileType": self.file_type,
            "totalPages": self.total_pages,
        }


@dataclass
class PrintOptions:
    """Print settings and destination shop."""

    paper_size: str = "A4"
    color_mode: str = "color"
    duplex: bool = False
    copies: int = 1
    pages_per_sheet: int = 1
    quality: str = "normal"
    shop_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """The ``print`` section. ``shop_id`` goes to ``destination`` instead."""
        return {
            "paperSize": self.paper_size,
            "colorMode": self.color_mode,
            "duplex": self.duplex,
            "copies": self.copies,
            "pagesPerSheet": self.pages_per_sheet,
            "quality": self.quality,
        }


@dataclass
class Recipe:
    """A complete print job description."""

    generated_at: datetime
    source: SourceInfo
    options: PrintOptions
    pages: list[PageMetadata] = field(default_factory=list)
    version: str = RECIPE_VERSION
    type: str = RECIPE_TYPE

    def as_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "type": self.type,
            "generatedAt": format_timestamp(self.generated_at),
            "source": self.source.as_dict(),
            "print": self.options.as_dict(),
            "pages": [page.as_dict() for page in self.pages],
            "destination": {"shopId": self.options.shop_id},
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.as_dict(), indent=indent)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


_OPTION_NAMES = frozenset(f.name for f in fields(PrintOptions))


class RecipeExporter:
    """Builds recipes from a metadata store.

    Args:
        store: The document's metadata store
        page_state: Page order and inclusion; without one every store page
            is exported in ascending order
        defaults: Print options restored by ``reset_options``
    """

    def __init__(
        self,
        store: MetadataStore,
        page_state: PageState | None = None,
        defaults: PrintOptions | None = None,
    ):
        self.store = store
        self.page_state = page_state
        self._defaults = replace(defaults) if defaults else PrintOptions()
        self._options = replace(self._defaults)
        self._source: SourceInfo | None = None

    # ============================================
    # Source and options
    # ============================================

    def set_source(
        self,
        file_name: str,
        file_size: int,
        total_pages: int | None = None,
        file_type: str | None = None,
    ) -> SourceInfo:
        """Record the source file. ``total_pages`` defaults to the document's page count."""
        if total_pages is None:
            total_pages = (
                self.page_state.total_pages if self.page_state else self.store.page_count()
            )
        self._source = SourceInfo(
            file_name=file_name,
            file_size=int(file_size),
            total_pages=int(total_pages),
            file_type=file_type or DEFAULT_FILE_TYPE,
        )
        return self._source

    @property
    def source(self) -> SourceInfo | None:
        return self._source

    def set_options(self, **overrides: Any) -> PrintOptions:
        """Update print options by field name.

        Raises:
            RecipeError: If an option name is unknown
        """
        unknown = sorted(set(overrides) - _OPTION_NAMES)
        if unknown:
            raise RecipeError(
                f"Unknown print option(s): {', '.join(unknown)}. "
                f"Available: {', '.join(sorted(_OPTION_NAMES))}",
                context={"options": ", ".join(unknown)},
            )
        self._options = replace(self._options, **overrides)
        return self.get_options()

    def get_options(self) -> PrintOptions:
        return replace(self._options)

    def reset_options(self) -> None:
        self._options = replace(self._defaults)

    # ============================================
    # Export
    # ============================================

    def page_numbers(self) -> list[int]:
        """Pages to export, in output order."""
        if self.page_state is not None:
            return [n for n in self.page_state.included() if n in self.store]
        return self.store.page_numbers()

    def export_recipe(self, generated_at: datetime | None = None) -> Recipe:
        """Snapshot the store into a recipe.

        Args:
            generated_at: Timestamp to record; defaults to the store's last
                modification so unchanged documents export identically

        Raises:
            RecipeError: If no source file has been set
        """
        if self._source is None:
            raise RecipeError("Source file info not set")

        pages = []
        for page_number in self.page_numbers():
            meta = self.store.get(page_number)
            if meta is not None:
                pages.append(meta)

        logger.debug("Exporting recipe with %d page(s)", len(pages))
        return Recipe(
            generated_at=generated_at or self.store.last_modified,
            source=self._source,
            options=self.get_options(),
            pages=pages,
        )

    def to_json(self, indent: int | None = 2, generated_at: datetime | None = None) -> str:
        return self.export_recipe(generated_at).to_json(indent)

    def summary(self) -> dict[str, Any]:
        """Counts and a one-line description of the print settings."""
        numbers = self.page_numbers()
        total = self.page_state.total_pages if self.page_state else self.store.page_count()
        options = self._options
        return {
            "total_pages": total,
            "included_pages": len(numbers),
            "edited_pages": sum(1 for n in numbers if self.store.is_edited(n)),
            "print_settings": (
                f"{options.paper_size}, {options.color_mode}, {options.copies} copies"
            ),
        }
