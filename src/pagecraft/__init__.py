"""pagecraft - Page transform and crop composition engine for print orders."""

import logging

__version__ = "0.1.0"
__all__ = ["__version__"]

# Prevent "No handler found" warnings when used as a library
logging.getLogger("pagecraft").addHandler(logging.NullHandler())
