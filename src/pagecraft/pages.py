"""Page order and inclusion.

Tracks which pages go into the print job and in what order. Page numbers
are the original 1-indexed numbers from the source document; positions in
the order are 0-indexed.
"""

from collections.abc import Iterable

from pagecraft.logging_config import get_logger

logger = get_logger(__name__)


class PageState:
    """Ordered list of page numbers with a set of excluded pages.

    Args:
        page_numbers: Pages of the document, in their original order
    """

    def __init__(self, page_numbers: Iterable[int] = ()):
        self._pages: list[int] = []
        self._order: list[int] = []
        self._excluded: set[int] = set()
        self.init(page_numbers)

    def init(self, page_numbers: Iterable[int]) -> None:
        """Replace the page list and include every page."""
        self._pages = list(dict.fromkeys(page_numbers))
        self._order = list(self._pages)
        self._excluded.clear()

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, page_number: object) -> bool:
        return page_number in self._order

    @property
    def total_pages(self) -> int:
        return len(self._pages)

    def order(self) -> list[int]:
        """Current order, including excluded pages."""
        return list(self._order)

    def page_at(self, index: int) -> int | None:
        if 0 <= index < len(self._order):
            return self._order[index]
        return None

    # ============================================
    # Inclusion
    # ============================================

    def included(self) -> list[int]:
        """Pages that go into the output, in current order."""
        return [n for n in self._order if n not in self._excluded]

    def excluded(self) -> list[int]:
        return sorted(self._excluded)

    def included_count(self) -> int:
        return len(self.included())

    def is_included(self, page_number: int) -> bool:
        return page_number in self._order and page_number not in self._excluded

    def exclude_page(self, page_number: int) -> None:
        if page_number not in self._order:
            logger.debug("Ignoring exclude of unknown page %s", page_number)
            return
        self._excluded.add(page_number)

    def include_page(self, page_number: int) -> None:
        self._excluded.discard(page_number)

    def toggle_page(self, page_number: int) -> bool:
        """Flip a page's inclusion. Returns True if the page is now included."""
        if page_number in self._excluded:
            self._excluded.discard(page_number)
            return True
        self.exclude_page(page_number)
        return self.is_included(page_number)

    def include_all(self) -> None:
        self._excluded.clear()

    def exclude_all(self) -> None:
        self._excluded = set(self._order)

    # ============================================
    # Order
    # ============================================

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move the page at ``from_index`` to ``to_index``. Bad indices are ignored."""
        size = len(self._order)
        if not (0 <= from_index < size and 0 <= to_index < size):
            return
        if from_index == to_index:
            return
        page = self._order.pop(from_index)
        self._order.insert(to_index, page)

    def set_order(self, page_numbers: Iterable[int]) -> None:
        """Use a custom order.

        Page numbers not in the document are dropped, and so are document
        pages missing from ``page_numbers``.
        """
        known = set(self._pages)
        self._order = [n for n in dict.fromkeys(page_numbers) if n in known]

    def reset_order(self) -> None:
        """Restore ascending order, bringing back pages dropped by set_order."""
        self._order = sorted(self._pages)

    # ============================================
    # Selection helpers
    # ============================================

    def odd_pages(self) -> list[int]:
        return [n for n in self._order if n % 2 == 1]

    def even_pages(self) -> list[int]:
        return [n for n in self._order if n % 2 == 0]

    def page_range(self, start: int, end: int) -> list[int]:
        """Page numbers from ``start`` to ``end`` inclusive, in current order."""
        return [n for n in self._order if start <= n <= end]
