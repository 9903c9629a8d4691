"""Recipe validation for pagecraft.

Checks a recipe before it is handed to the external renderer. The store
only ever holds valid transforms, so a recipe built by RecipeExporter
passes; the validator guards recipes assembled or edited elsewhere and
catches empty print jobs.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from pagecraft.constants import (
    COLOR_MODES,
    MAX_SCALE,
    MIN_SCALE,
    PAGES_PER_SHEET_OPTIONS,
    PAPER_SIZES,
    QUALITY_OPTIONS,
    RECIPE_VERSION,
    ROTATIONS,
    UNIT_EPSILON,
)
from pagecraft.exceptions import RecipeError
from pagecraft.recipe import Recipe

REQUIRED_SECTIONS = ("version", "generatedAt", "source", "print", "pages")


@dataclass
class ValidationResult:
    """Result of recipe validation.

    Attributes:
        valid: True if no errors were found
        errors: List of error messages (fatal issues)
        warnings: List of warning messages (non-fatal issues)
    """

    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error and mark result as invalid."""
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning (does not affect validity)."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> None:
        """Merge another validation result into this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.valid:
            self.valid = False


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


class RecipeValidator:
    """Recipe validator.

    Performs two phases of validation:
    1. Structural: required sections and field types
    2. Semantic: print options and per-page transforms in range

    Accepts either a Recipe or its serialized dict form.

    Example:
        validator = RecipeValidator()
        result = validator.validate(recipe)
        if not result.valid:
            for error in result.errors:
                print(f"Error: {error}")
    """

    def __init__(self, min_scale: float = MIN_SCALE, max_scale: float = MAX_SCALE):
        self.min_scale = min_scale
        self.max_scale = max_scale

    def validate(self, recipe: Recipe | dict[str, Any]) -> ValidationResult:
        data = recipe.as_dict() if isinstance(recipe, Recipe) else recipe
        result = ValidationResult()

        # Phase 1: Structural validation
        result.merge(self._validate_structure(data))
        if not result.valid:
            return result

        # Phase 2: Semantic validation
        result.merge(self._validate_semantics(data))

        return result

    def validate_or_raise(self, recipe: Recipe | dict[str, Any]) -> ValidationResult:
        """Validate a recipe and raise RecipeError if invalid.

        Returns:
            The result, so warnings can still be reported

        Raises:
            RecipeError: If validation fails
        """
        result = self.validate(recipe)
        if not result.valid:
            error_text = "; ".join(result.errors)
            raise RecipeError(f"Recipe validation failed: {error_text}")
        return result

    def _validate_structure(self, data: Any) -> ValidationResult:
        """Validate required sections and types."""
        result = ValidationResult()

        if not isinstance(data, dict):
            result.add_error(f"Recipe must be a mapping, got {type(data).__name__}")
            return result

        for section in REQUIRED_SECTIONS:
            if section not in data:
                result.add_error(f"Missing required section '{section}'")

        if "source" in data and not isinstance(data["source"], dict):
            result.add_error("'source' must be a mapping")
        if "print" in data and not isinstance(data["print"], dict):
            result.add_error("'print' must be a mapping")
        if "pages" in data and not isinstance(data["pages"], list):
            result.add_error("'pages' must be a list")

        return result

    def _validate_semantics(self, data: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        if data["version"] != RECIPE_VERSION:
            result.add_warning(
                f"Recipe version '{data['version']}' differs from {RECIPE_VERSION}"
            )

        result.merge(self._validate_print(data["print"]))

        pages = data["pages"]
        if not pages:
            result.add_error("No pages included")

        seen: set[int] = set()
        for index, page in enumerate(pages):
            result.merge(self._validate_page(index, page, seen))

        total_pages = data["source"].get("totalPages")
        if _is_number(total_pages):
            if len(pages) > total_pages:
                result.add_warning(
                    f"Recipe lists {len(pages)} pages but the source has {total_pages}"
                )
            for number in sorted(seen):
                if number > total_pages:
                    result.add_warning(
                        f"Page {number} is beyond the source page count ({total_pages})"
                    )
        else:
            result.add_warning("Source page count is missing")

        return result

    def _validate_print(self, options: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        paper = options.get("paperSize")
        if paper not in PAPER_SIZES:
            result.add_error(
                f"Invalid paper size: '{paper}'. Valid options: {', '.join(PAPER_SIZES)}"
            )

        color = options.get("colorMode")
        if color not in COLOR_MODES:
            result.add_error(
                f"Invalid color mode: '{color}'. Valid options: {', '.join(COLOR_MODES)}"
            )

        quality = options.get("quality")
        if quality not in QUALITY_OPTIONS:
            result.add_error(
                f"Invalid quality: '{quality}'. Valid options: {', '.join(QUALITY_OPTIONS)}"
            )

        per_sheet = options.get("pagesPerSheet")
        if per_sheet not in PAGES_PER_SHEET_OPTIONS:
            result.add_error(
                f"Invalid pages per sheet: {per_sheet!r}. "
                f"Valid options: {', '.join(str(n) for n in PAGES_PER_SHEET_OPTIONS)}"
            )

        copies = options.get("copies")
        if not isinstance(copies, int) or isinstance(copies, bool) or copies < 1:
            result.add_error(f"Copies must be at least 1, got {copies!r}")

        return result

    def _validate_page(
        self,
        index: int,
        page: Any,
        seen: set[int],
    ) -> ValidationResult:
        """Validate a single page entry."""
        result = ValidationResult()

        if not isinstance(page, dict):
            result.add_error(f"Page entry {index + 1}: must be a mapping")
            return result

        number = page.get("pageNumber")
        if not isinstance(number, int) or isinstance(number, bool) or number < 1:
            result.add_error(f"Page entry {index + 1}: invalid page number {number!r}")
            return result
        if number in seen:
            result.add_error(f"Page {number}: listed more than once")
        seen.add(number)

        prefix = f"Page {number}"
        transforms = page.get("transforms")
        if not isinstance(transforms, dict):
            result.add_error(f"{prefix}: missing transforms")
            return result

        crop = transforms.get("crop")
        if crop is not None:
            values = []
            if isinstance(crop, dict):
                values = [crop.get(k) for k in ("x", "y", "width", "height")]
            if len(values) != 4 or not all(_is_number(v) for v in values):
                result.add_error(f"{prefix}: invalid crop {crop!r}")
            else:
                x, y, width, height = values
                if (
                    x < -UNIT_EPSILON
                    or y < -UNIT_EPSILON
                    or width <= 0
                    or height <= 0
                    or x + width > 1 + UNIT_EPSILON
                    or y + height > 1 + UNIT_EPSILON
                ):
                    result.add_error(f"{prefix}: invalid crop bounds")

        rotation = transforms.get("rotation")
        if rotation not in ROTATIONS:
            result.add_error(
                f"{prefix}: rotation must be 0, 90, 180, or 270, got {rotation!r}"
            )

        scale = transforms.get("scale")
        if not _is_number(scale) or not (self.min_scale <= scale <= self.max_scale):
            result.add_error(
                f"{prefix}: scale out of range ({self.min_scale:g}-{self.max_scale:g}%)"
            )

        for key in ("offsetX", "offsetY"):
            if not _is_number(transforms.get(key)):
                result.add_error(f"{prefix}: {key} must be a number")

        return result


# Module-level convenience function
def validate_recipe(recipe: Recipe | dict[str, Any]) -> ValidationResult:
    """Validate a recipe with default scale limits."""
    return RecipeValidator().validate(recipe)
