"""Command-line interface for pagecraft."""

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pagecraft import __version__
from pagecraft.logging_config import get_logger, is_quiet_mode

if TYPE_CHECKING:
    from pagecraft.document import Document

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pagecraft",
        description="Replay page edits (crop, rotate, scale, translate) and export a print recipe.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pagecraft -i document.pdf                       Recipe with no edits, to stdout
  pagecraft -i document.pdf -s edits.yaml -o recipe.json
                                                  Apply a session and write the recipe
  pagecraft -s edits.yaml --summary               Page sizes from the session file
  pagecraft -c config.yaml -i document.pdf -s edits.yaml --validate
                                                  Check the recipe without writing it
""",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version information and exit",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to YAML configuration file (engine limits, print defaults)",
    )

    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        help="Input PDF file (page sizes are read from it)",
    )

    parser.add_argument(
        "-s",
        "--session",
        type=Path,
        help="YAML session file with the edits to apply",
    )

    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the recipe JSON here instead of stdout",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the recipe and exit without writing it",
    )

    parser.add_argument(
        "--summary",
        action="store_true",
        help="Show page counts and print settings",
    )

    # Logging options
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for verbose, -vv for debug)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file (includes all levels)",
    )

    return parser


def build_document(parsed: argparse.Namespace) -> "Document":
    """Build the document described by the command-line arguments.

    Raises:
        PageCraftError: On invalid config, session or input files
        FileNotFoundError: If a named file does not exist
    """
    from pagecraft.config import Config, load_config
    from pagecraft.document import Document
    from pagecraft.session import Session, apply_session, document_from_session, load_session

    config = load_config(parsed.config) if parsed.config else Config()
    session = load_session(parsed.session) if parsed.session else Session()

    if parsed.input:
        document = Document.open_pdf(parsed.input, config=config)
    else:
        document = document_from_session(session, config=config)

    apply_session(document, session)
    return document


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Setup logging based on CLI flags
    from pagecraft.logging_config import setup_logging

    to_stdout = not (parsed.output or parsed.validate or parsed.version)
    setup_logging(
        verbosity=parsed.verbose,
        quiet=parsed.quiet,
        log_file=parsed.log_file,
        info_stream=sys.stderr if to_stdout else None,
    )

    # Handle --version
    if parsed.version:
        logger.info("pagecraft %s", __version__)
        return 0

    # Require something to read page sizes from
    if not parsed.input and not parsed.session:
        parser.print_help()
        return 1

    from pagecraft.exceptions import PageCraftError
    from pagecraft.validation import RecipeValidator

    try:
        document = build_document(parsed)

        if parsed.summary and not is_quiet_mode():
            summary = document.exporter.summary()
            logger.info(
                "Pages: %d total, %d included, %d edited",
                summary["total_pages"],
                summary["included_pages"],
                summary["edited_pages"],
            )
            logger.info("Print: %s", summary["print_settings"])

        recipe = document.export_recipe()
        validator = RecipeValidator(document.store.min_scale, document.store.max_scale)
        result = validator.validate(recipe)
        for warning in result.warnings:
            logger.warning("%s", warning)
        if not result.valid:
            for error in result.errors:
                logger.error("%s", error)
            logger.error("Recipe validation failed with %d error(s)", len(result.errors))
            return 1

        if parsed.validate:
            logger.info("Recipe is valid: %d page(s)", len(recipe.pages))
            return 0

        text = recipe.to_json()
        if parsed.output:
            parsed.output.parent.mkdir(parents=True, exist_ok=True)
            parsed.output.write_text(text + "\n", encoding="utf-8")
            logger.info("Wrote recipe: %s", parsed.output)
        else:
            sys.stdout.write(text + "\n")
        return 0
    except PageCraftError as e:
        logger.error("%s", e)
        return 1
    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
