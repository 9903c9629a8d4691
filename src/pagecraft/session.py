"""Edit session files.

A session file records the edits made to a document so they can be
replayed into a recipe without the interactive editor:

    source: {file_name: doc.pdf, file_size: 1234}
    pages:
      - {page: 1, width: 595, height: 842}
    edits:
      - {page: 1, crop: {x: 0.1, y: 0.1, width: 0.8, height: 0.8}}
      - {page: 1, rotate: 90}
      - {page: 1, scale: 150, apply_to_all: true}
    exclude: [4]

``pages`` may be omitted when dimensions come from a PDF.
"""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pagecraft.config import Config
from pagecraft.constants import ROTATE_DELTAS, ROTATIONS
from pagecraft.document import Document
from pagecraft.edits import (
    CommandRegistry,
    Crop,
    EditCommand,
    Reset,
    Rotate,
    Scale,
    SetRotation,
    Translate,
)
from pagecraft.exceptions import CommandError, ConfigError
from pagecraft.geometry import compose_crop
from pagecraft.logging_config import get_logger
from pagecraft.model import CropBox, PageDimensions
from pagecraft.page_source import StaticPageSource

logger = get_logger(__name__)

EDIT_KINDS = ("crop", "rotate", "set_rotation", "scale", "translate", "reset")
EDIT_FLAGS = ("page", "apply_to_all", "relative_to_committed")


@dataclass
class EditEntry:
    """One edit from a session file."""
    page: int
    command: EditCommand
    apply_to_all: bool = False
    relative_to_committed: bool = False


@dataclass
class Session:
    """A parsed session file."""
    file_name: str | None = None
    file_size: int | None = None
    pages: dict[int, PageDimensions] = field(default_factory=dict)
    edits: list[EditEntry] = field(default_factory=list)
    exclude: list[int] = field(default_factory=list)
    order: list[int] | None = None
    fit_crop_to_page: list[int] = field(default_factory=list)


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise CommandError(f"{where}: expected a number, got {value!r}")
    return float(value)


def _page_number(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise CommandError(f"{where}: page must be a positive integer, got {value!r}")
    return value


def _parse_command(kind: str, value: Any, where: str) -> EditCommand:
    if kind == "crop":
        if not isinstance(value, dict):
            raise CommandError(f"{where}: crop must be a mapping with x, y, width, height")
        try:
            box = CropBox.from_dict(value)
        except (TypeError, ValueError) as e:
            raise CommandError(f"{where}: invalid crop {value!r}") from e
        return Crop(box)

    if kind == "rotate":
        if value not in ROTATE_DELTAS or isinstance(value, bool):
            raise CommandError(
                f"{where}: rotate must be one of {', '.join(f'{d:+d}' for d in ROTATE_DELTAS)}, "
                f"got {value!r}"
            )
        return Rotate(int(value))

    if kind == "set_rotation":
        if value not in ROTATIONS or isinstance(value, bool):
            raise CommandError(
                f"{where}: set_rotation must be one of {', '.join(map(str, ROTATIONS))}, "
                f"got {value!r}"
            )
        return SetRotation(int(value))

    if kind == "scale":
        return Scale(_number(value, where))

    if kind == "translate":
        if not isinstance(value, dict):
            raise CommandError(f"{where}: translate must be a mapping with dx, dy")
        return Translate(
            _number(value.get("dx", 0), where),
            _number(value.get("dy", 0), where),
        )

    # reset
    return Reset()


def parse_edit(data: Any, index: int | None = None) -> tuple[int, EditCommand, bool]:
    """Parse one edit entry.

    Returns:
        Tuple of (page number, command, apply_to_all)

    Raises:
        CommandError: If the entry is malformed or names an unknown edit kind
    """
    where = f"Edit #{index + 1}" if index is not None else "Edit"
    if not isinstance(data, dict):
        raise CommandError(f"{where}: must be a mapping, got {type(data).__name__}")

    page = _page_number(data.get("page"), where)

    unknown = [k for k in data if k not in EDIT_KINDS and k not in EDIT_FLAGS]
    if unknown:
        raise CommandError(
            f"{where}: unknown edit type '{unknown[0]}'. "
            f"Available: {', '.join(CommandRegistry.all_names())}",
            context={"page": page},
        )

    kinds = [k for k in EDIT_KINDS if k in data]
    if len(kinds) != 1:
        found = ", ".join(kinds) if kinds else "none"
        raise CommandError(
            f"{where}: expected exactly one of {', '.join(EDIT_KINDS)} (found {found})",
            context={"page": page},
        )

    kind = kinds[0]
    command = _parse_command(kind, data[kind], where)
    return page, command, bool(data.get("apply_to_all", False))


def _parse_pages(data: Any) -> dict[int, PageDimensions]:
    if not isinstance(data, list):
        raise ConfigError("'pages' must be a list", context={"field": "pages"})

    pages: dict[int, PageDimensions] = {}
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ConfigError(f"Page entry #{i + 1} must be a mapping", context={"field": "pages"})
        try:
            number = _page_number(entry.get("page"), f"Page entry #{i + 1}")
            width = _number(entry.get("width"), f"Page {number} width")
            height = _number(entry.get("height"), f"Page {number} height")
        except CommandError as e:
            raise ConfigError(str(e), context={"field": "pages"}) from e
        pages[number] = PageDimensions(width, height)

    if pages and sorted(pages) != list(range(1, len(pages) + 1)):
        raise ConfigError(
            "Page numbers must run from 1 without gaps",
            context={"field": "pages", "suggestion": "List every page of the document"},
        )
    return pages


def _parse_page_list(data: Any, name: str) -> list[int]:
    if data is None:
        return []
    if not isinstance(data, list) or not all(
        isinstance(n, int) and not isinstance(n, bool) for n in data
    ):
        raise ConfigError(f"'{name}' must be a list of page numbers", context={"field": name})
    return list(data)


def parse_session(data: Any) -> Session:
    """Build a Session from already-loaded YAML data.

    Raises:
        ConfigError: If the document structure is invalid
        CommandError: If an edit entry is invalid
    """
    if data is None:
        return Session()
    if not isinstance(data, dict):
        raise ConfigError("Session must be a YAML dictionary")

    session = Session()

    source = data.get("source") or {}
    if not isinstance(source, dict):
        raise ConfigError("'source' must be a mapping", context={"field": "source"})
    session.file_name = source.get("file_name")
    file_size = source.get("file_size")
    if file_size is not None:
        if isinstance(file_size, bool) or not isinstance(file_size, int) or file_size < 0:
            raise ConfigError(
                f"file_size must be a non-negative integer, got {file_size!r}",
                context={"field": "source.file_size"},
            )
        session.file_size = file_size

    if "pages" in data:
        session.pages = _parse_pages(data["pages"])

    edits = data.get("edits") or []
    if not isinstance(edits, list):
        raise ConfigError("'edits' must be a list", context={"field": "edits"})
    for i, entry in enumerate(edits):
        page, command, apply_to_all = parse_edit(entry, i)
        session.edits.append(
            EditEntry(
                page=page,
                command=command,
                apply_to_all=apply_to_all,
                relative_to_committed=bool(entry.get("relative_to_committed", False)),
            )
        )

    session.exclude = _parse_page_list(data.get("exclude"), "exclude")
    session.fit_crop_to_page = _parse_page_list(data.get("fit_crop_to_page"), "fit_crop_to_page")
    if data.get("order") is not None:
        session.order = _parse_page_list(data["order"], "order")

    return session


def load_session(session_path: Path) -> Session:
    """Load a session file."""
    session_path = Path(session_path)
    if not session_path.exists():
        raise FileNotFoundError(f"Session file not found: {session_path}")

    with open(session_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", context={"file": str(session_path)}) from e

    return parse_session(data)


def document_from_session(session: Session, config: Config | None = None) -> Document:
    """Create a document from the page sizes listed in a session.

    Raises:
        ConfigError: If the session lists no pages
    """
    if not session.pages:
        raise ConfigError(
            "Session lists no pages",
            context={"suggestion": "Add a 'pages' section or pass the PDF with --input"},
        )
    return Document.from_page_source(
        StaticPageSource(session.pages),
        file_name=session.file_name or "document.pdf",
        file_size=session.file_size or 0,
        config=config,
    )


def apply_session(document: Document, session: Session) -> int:
    """Replay a session's edits, order and exclusions into a document.

    Edits marked ``relative_to_committed`` carry a crop drawn inside the
    page's current crop window; it is composed into content space before
    dispatch.

    Returns:
        Number of edits applied
    """
    current = document.exporter.source
    if current is not None:
        if session.file_name is not None or session.file_size is not None:
            document.exporter.set_source(
                session.file_name or current.file_name,
                current.file_size if session.file_size is None else session.file_size,
                current.total_pages,
                current.file_type,
            )
    elif session.file_name is not None:
        document.exporter.set_source(session.file_name, session.file_size or 0)

    for entry in session.edits:
        command = entry.command
        if entry.relative_to_committed and isinstance(command, Crop):
            command = Crop(compose_crop(document.store.get_crop(entry.page), command.box))
        document.apply_edit(entry.page, command, entry.apply_to_all)

    for page_number in session.fit_crop_to_page:
        document.orchestrator.set_fit_crop_to_page(page_number, True)

    if session.order is not None:
        document.page_state.set_order(session.order)
    for page_number in session.exclude:
        document.page_state.exclude_page(page_number)

    logger.info("Applied %d edit(s)", len(session.edits))
    return len(session.edits)
