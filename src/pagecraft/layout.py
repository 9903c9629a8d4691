"""Paper sizes and N-up sheet layouts.

All dimensions are in PDF points (1/72 inch). A sheet is one physical
printed page; with 2 or 4 pages per sheet each logical page is fit into a
cell (slot) of the sheet, and the slot's aspect ratio feeds the overlay
math in :mod:`pagecraft.geometry.screen`.
"""

import math
from dataclasses import dataclass
from typing import Any

from pagecraft.constants import PAGES_PER_SHEET_OPTIONS
from pagecraft.logging_config import get_logger
from pagecraft.model import PageDimensions

logger = get_logger(__name__)

DEFAULT_PAPER_SIZE = "A4"

PAPER_SIZES: dict[str, PageDimensions] = {
    "A4": PageDimensions(595, 842),
    "A3": PageDimensions(842, 1191),
    "LETTER": PageDimensions(612, 792),
    "LEGAL": PageDimensions(612, 1008),
}


@dataclass(frozen=True)
class GridLayout:
    """Cell grid of a sheet. ``gap`` and ``margin`` are in points."""

    rows: int
    cols: int
    gap: float
    margin: float = 0.0


GRID_LAYOUTS: dict[int, GridLayout] = {
    1: GridLayout(rows=1, cols=1, gap=0),
    2: GridLayout(rows=1, cols=2, gap=10, margin=10),
    4: GridLayout(rows=2, cols=2, gap=10, margin=10),
}


def get_paper_size(name: str | None) -> PageDimensions:
    """Look up a paper size by name (case-insensitive), falling back to A4."""
    if name and name.upper() in PAPER_SIZES:
        return PAPER_SIZES[name.upper()]
    if name:
        logger.debug("Unknown paper size %r, using %s", name, DEFAULT_PAPER_SIZE)
    return PAPER_SIZES[DEFAULT_PAPER_SIZE]


def fit_content_to_page(
    content_width: float,
    content_height: float,
    page_width: float,
    page_height: float,
) -> dict[str, float]:
    """Shrink content to fit a page and center it.

    Content is never enlarged: the scale is at most 1.

    Returns:
        Dict with ``width``, ``height``, ``scale``, ``offset_x`` and ``offset_y``
    """
    if content_width <= 0 or content_height <= 0:
        scale = 1.0
    else:
        scale = min(page_width / content_width, page_height / content_height, 1.0)
    width = content_width * scale
    height = content_height * scale
    return {
        "width": width,
        "height": height,
        "scale": scale,
        "offset_x": (page_width - width) / 2,
        "offset_y": (page_height - height) / 2,
    }


class SheetLayout:
    """How logical pages are grouped onto physical sheets.

    Args:
        pages_per_sheet: 1, 2 or 4; anything else falls back to 1
        paper: Paper size name (A4, A3, LETTER, LEGAL)
    """

    def __init__(self, pages_per_sheet: int = 1, paper: str = DEFAULT_PAPER_SIZE):
        if pages_per_sheet not in PAGES_PER_SHEET_OPTIONS:
            logger.debug("Unsupported pages per sheet %r, using 1", pages_per_sheet)
            pages_per_sheet = 1
        self.pages_per_sheet = pages_per_sheet
        self.grid = GRID_LAYOUTS[pages_per_sheet]
        self.paper = get_paper_size(paper)

    @property
    def sheet_dimensions(self) -> PageDimensions:
        """Physical sheet size. Two-up sheets are printed landscape."""
        if self.pages_per_sheet == 2:
            return PageDimensions(
                max(self.paper.width, self.paper.height),
                min(self.paper.width, self.paper.height),
            )
        return self.paper

    def sheet_count(self, page_count: int) -> int:
        return math.ceil(max(0, page_count) / self.pages_per_sheet)

    def sheet_pages(self, sheet_number: int, page_order: list[int]) -> list[int]:
        """Page numbers on a 1-indexed sheet, taken from ``page_order``."""
        if sheet_number < 1:
            return []
        start = (sheet_number - 1) * self.pages_per_sheet
        return list(page_order[start:start + self.pages_per_sheet])

    def sheet_of(self, page_number: int, page_order: list[int]) -> int | None:
        """1-indexed sheet holding ``page_number``, or None if it is not in the order."""
        if page_number not in page_order:
            return None
        return page_order.index(page_number) // self.pages_per_sheet + 1

    def cell_dimensions(self) -> PageDimensions:
        """Size of one cell, after margins and gaps."""
        sheet = self.sheet_dimensions
        grid = self.grid
        width = (sheet.width - 2 * grid.margin - (grid.cols - 1) * grid.gap) / grid.cols
        height = (sheet.height - 2 * grid.margin - (grid.rows - 1) * grid.gap) / grid.rows
        return PageDimensions(width, height)

    def cell_origin(self, index: int) -> tuple[float, float]:
        """Top-left corner of the cell at a 0-indexed position on the sheet."""
        cell = self.cell_dimensions()
        row, col = divmod(index % self.pages_per_sheet, self.grid.cols)
        return (
            self.grid.margin + col * (cell.width + self.grid.gap),
            self.grid.margin + row * (cell.height + self.grid.gap),
        )

    def slot_aspect_ratio(self) -> float:
        return self.cell_dimensions().aspect_ratio

    def place_page(self, index: int, content: PageDimensions) -> dict[str, float]:
        """Where content lands on its sheet: fit into its cell and centered.

        Returns:
            Dict with ``x``, ``y``, ``width``, ``height`` and ``scale`` in sheet points
        """
        cell = self.cell_dimensions()
        origin_x, origin_y = self.cell_origin(index)
        fitted = fit_content_to_page(content.width, content.height, cell.width, cell.height)
        return {
            "x": origin_x + fitted["offset_x"],
            "y": origin_y + fitted["offset_y"],
            "width": fitted["width"],
            "height": fitted["height"],
            "scale": fitted["scale"],
        }

    def describe(self) -> dict[str, Any]:
        sheet = self.sheet_dimensions
        return {
            "pages_per_sheet": self.pages_per_sheet,
            "sheet": sheet.as_dict(),
            "cell": self.cell_dimensions().as_dict(),
            "grid": {"rows": self.grid.rows, "cols": self.grid.cols, "gap": self.grid.gap},
        }
