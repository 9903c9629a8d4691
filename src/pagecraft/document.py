"""One open document and everything that edits it.

A Document owns exactly one metadata store and wires the page state, edit
orchestrator and recipe exporter to it, so "apply to all" and "reset all"
always see the same pages.
"""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from pagecraft.config import Config
from pagecraft.constants import DEFAULT_FILE_TYPE
from pagecraft.edits import EditCommand, EditOrchestrator
from pagecraft.geometry import OverlayFrame
from pagecraft.layout import SheetLayout
from pagecraft.logging_config import get_logger
from pagecraft.model import PageTransforms
from pagecraft.page_source import PageSource, PdfPageSource
from pagecraft.pages import PageState
from pagecraft.recipe import Recipe, RecipeExporter
from pagecraft.store import MetadataStore
from pagecraft.validation import RecipeValidator, ValidationResult

logger = get_logger(__name__)


class Document:
    """Edit state for one open document.

    Args:
        config: Engine limits and default print options
        clock: Time source for the store's ``last_modified``
    """

    def __init__(
        self,
        config: Config | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config or Config()
        engine = self.config.engine
        store_kwargs = {"clock": clock} if clock is not None else {}
        self.store = MetadataStore(engine.min_scale, engine.max_scale, **store_kwargs)
        self.page_state = PageState()
        self.orchestrator = EditOrchestrator(self.store, engine.min_crop_fraction)
        self.exporter = RecipeExporter(
            self.store,
            self.page_state,
            defaults=self.config.print.to_options(),
        )
        self.source: PageSource | None = None

    @classmethod
    def from_page_source(
        cls,
        source: PageSource,
        file_name: str,
        file_size: int,
        config: Config | None = None,
        file_type: str = DEFAULT_FILE_TYPE,
        clock: Callable[[], datetime] | None = None,
    ) -> "Document":
        """Create a document and register every page of ``source``."""
        document = cls(config, clock=clock)
        document.load_pages(source)
        document.exporter.set_source(file_name, file_size, source.page_count(), file_type)
        return document

    @classmethod
    def open_pdf(
        cls,
        path: Path | str,
        config: Config | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> "Document":
        """Open a PDF file.

        Raises:
            PageSourceError: If the file cannot be read
        """
        path = Path(path)
        source = PdfPageSource(path)
        return cls.from_page_source(
            source,
            file_name=path.name,
            file_size=path.stat().st_size,
            config=config,
            clock=clock,
        )

    def load_pages(self, source: PageSource) -> None:
        """Register pages 1..N of ``source`` with their dimensions."""
        self.source = source
        count = source.page_count()
        for page_number in range(1, count + 1):
            self.store.init_page(page_number, source.get_page_dimensions(page_number))
        self.page_state.init(range(1, count + 1))
        logger.info("Loaded %d page(s)", count)

    @property
    def page_count(self) -> int:
        return self.store.page_count()

    # ============================================
    # Editing
    # ============================================

    def apply_edit(
        self,
        page_number: int,
        command: EditCommand,
        apply_to_all: bool = False,
    ) -> PageTransforms:
        return self.orchestrator.apply_edit(page_number, command, apply_to_all)

    def layout(self) -> SheetLayout:
        """Sheet layout for the current print options."""
        options = self.exporter.get_options()
        return SheetLayout(options.pages_per_sheet, options.paper_size)

    def overlay_frame(
        self,
        page_number: int,
        slot_aspect_ratio: float | None = None,
    ) -> OverlayFrame | None:
        """Display state for a page's crop overlay.

        Without an explicit slot aspect ratio, a single page fills a slot of
        its own shape and an N-up page uses the sheet's cell shape.

        Returns:
            The frame, or None for an unknown page
        """
        meta = self.store.get(page_number)
        if meta is None:
            return None

        content_ar = meta.original_dimensions.aspect_ratio
        if slot_aspect_ratio is None:
            layout = self.layout()
            if layout.pages_per_sheet > 1:
                slot_aspect_ratio = layout.slot_aspect_ratio()
            else:
                slot_aspect_ratio = content_ar

        return OverlayFrame(
            rotation=meta.transforms.rotation,
            scale=meta.transforms.scale,
            content_aspect_ratio=content_ar,
            slot_aspect_ratio=slot_aspect_ratio,
            committed_crop=meta.transforms.crop,
        )

    # ============================================
    # Export
    # ============================================

    def export_recipe(self, generated_at: datetime | None = None) -> Recipe:
        return self.exporter.export_recipe(generated_at)

    def validate(self) -> ValidationResult:
        """Validate the recipe this document would export."""
        validator = RecipeValidator(self.store.min_scale, self.store.max_scale)
        return validator.validate(self.export_recipe())
