"""Page sizes shared by the test modules."""

from pagecraft.model import PageDimensions

A4 = PageDimensions(595, 842)
LETTER = PageDimensions(612, 792)
