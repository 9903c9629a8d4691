"""Page sources: where page dimensions and preview bitmaps come from.

The core only reads page dimensions to compute aspect ratios. Bitmaps are
passed through to the UI untouched.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from pagecraft.exceptions import PageSourceError
from pagecraft.logging_config import get_logger
from pagecraft.model import PageDimensions, Rotation

logger = get_logger(__name__)

# PDF user space is 72 points per inch
POINTS_PER_INCH = 72


class PageSource(Protocol):
    """Rasterizer collaborator. Page numbers are 1-indexed."""

    def page_count(self) -> int: ...

    def get_page_dimensions(self, page_number: int) -> PageDimensions: ...

    def get_page_bitmap(self, page_number: int, scale: float = 1.0) -> Any: ...


class PdfPageSource:
    """Page source backed by a PDF file.

    Dimensions are read with pypdf. A page whose /Rotate is a quarter turn
    reports its width and height swapped, as it is displayed. Bitmaps need
    the optional pdf2image dependency.

    Raises:
        PageSourceError: If the file is missing or is not a readable PDF
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        if not self.path.exists():
            raise PageSourceError("PDF file not found", context={"path": str(self.path)})
        try:
            self._reader = PdfReader(str(self.path))
            self._count = len(self._reader.pages)
        except (PdfReadError, OSError, ValueError) as e:
            raise PageSourceError(
                f"Cannot read PDF: {e}", context={"path": str(self.path)}
            ) from e
        logger.debug("Opened %s with %d page(s)", self.path, self._count)

    def page_count(self) -> int:
        return self._count

    def _check_page(self, page_number: int) -> None:
        if not 1 <= page_number <= self._count:
            raise PageSourceError(
                f"Page {page_number} out of range (1-{self._count})",
                context={"path": str(self.path), "page": page_number},
            )

    def get_page_dimensions(self, page_number: int) -> PageDimensions:
        """Displayed page size in points."""
        self._check_page(page_number)
        page = self._reader.pages[page_number - 1]
        mediabox = page.mediabox
        dimensions = PageDimensions(float(mediabox.width), float(mediabox.height))
        rotation = Rotation.normalize(page.rotation or 0)
        return dimensions.rotated(rotation)

    def get_page_bitmap(self, page_number: int, scale: float = 1.0) -> Any:
        """Render a page to a PIL image at ``scale`` times 72 DPI.

        Raises:
            PageSourceError: If pdf2image is not installed or rendering fails
        """
        self._check_page(page_number)
        try:
            from pdf2image import convert_from_path
        except ImportError:
            raise PageSourceError(
                "pdf2image is required for page bitmaps. Install with: pip install pdf2image"
            )

        dpi = max(1, round(POINTS_PER_INCH * scale))
        try:
            images = convert_from_path(
                str(self.path),
                first_page=page_number,
                last_page=page_number,
                dpi=dpi,
            )
        except Exception as e:
            raise PageSourceError(
                f"Failed to render page {page_number}: {e}",
                context={"path": str(self.path), "page": page_number},
            ) from e

        if not images:
            raise PageSourceError(
                f"Failed to render page {page_number}",
                context={"path": str(self.path), "page": page_number},
            )
        return images[0]


class StaticPageSource:
    """Page source with known dimensions and no bitmaps.

    Used when page sizes come from a session file instead of a PDF.

    Args:
        dimensions: Page number -> dimensions
    """

    def __init__(self, dimensions: Mapping[int, PageDimensions]):
        self._dimensions = dict(dimensions)

    def page_count(self) -> int:
        return len(self._dimensions)

    def page_numbers(self) -> list[int]:
        return sorted(self._dimensions)

    def get_page_dimensions(self, page_number: int) -> PageDimensions:
        if page_number not in self._dimensions:
            raise PageSourceError(f"Unknown page {page_number}", context={"page": page_number})
        return self._dimensions[page_number]

    def get_page_bitmap(self, page_number: int, scale: float = 1.0) -> Any:
        raise PageSourceError(
            "Bitmaps are not available without a PDF", context={"page": page_number}
        )
