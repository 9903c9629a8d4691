"""Centralized constants for pagecraft."""

from typing import Literal

# Discrete rotations (degrees, clockwise as seen on screen)
ROTATIONS = (0, 90, 180, 270)
ROTATE_DELTAS = (90, -90, 180)

# Scale is stored as a percentage (100 = natural size)
DEFAULT_SCALE = 100.0
MIN_SCALE = 10.0
MAX_SCALE = 500.0

# Smallest crop edge, as a fraction of the reference frame
MIN_CROP_FRACTION = 0.05

# Tolerance used when checking that a box stays inside the unit square
UNIT_EPSILON = 1e-9

# Recipe document (bump RECIPE_VERSION whenever the transforms field set changes)
RECIPE_VERSION = "2.0"
RECIPE_TYPE = "print_job"
DEFAULT_FILE_TYPE = "application/pdf"

# Print options
PAPER_SIZES = ("A4", "A3", "LETTER", "LEGAL")
COLOR_MODES = ("color", "grayscale")
QUALITY_OPTIONS = ("draft", "normal", "high")
PAGES_PER_SHEET_OPTIONS = (1, 2, 4)

# Crop drag handles
CROP_HANDLES = ("nw", "ne", "sw", "se", "n", "s", "e", "w")
CropHandle = Literal["nw", "ne", "sw", "se", "n", "s", "e", "w"]
