"""Shared fixtures for pagecraft tests."""

import logging
import tempfile
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml

from pagecraft.store import MetadataStore

from tests.helpers import A4


# === Path/Directory Fixtures ===

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


# === Clock Fixtures ===

class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


# === Store Fixtures ===

@pytest.fixture
def store(clock):
    """Store with three A4 pages registered."""
    s = MetadataStore(clock=clock)
    for page in (1, 2, 3):
        s.init_page(page, A4)
    return s


@pytest.fixture
def empty_store(clock):
    return MetadataStore(clock=clock)


# === PDF Fixtures ===

@pytest.fixture
def temp_pdf(temp_dir):
    """Create a temporary single-page PDF for testing."""
    from pypdf import PdfWriter

    pdf_path = temp_dir / "test.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)  # Letter size
    with open(pdf_path, "wb") as f:
        writer.write(f)
    return pdf_path


@pytest.fixture
def temp_multi_page_pdf(temp_dir):
    """Create a temporary 4-page A4 PDF for testing."""
    from pypdf import PdfWriter

    pdf_path = temp_dir / "multi_page.pdf"
    writer = PdfWriter()
    for _ in range(4):
        writer.add_blank_page(width=595, height=842)
    with open(pdf_path, "wb") as f:
        writer.write(f)
    return pdf_path


@pytest.fixture
def temp_rotated_pdf(temp_dir):
    """Create a portrait page carrying /Rotate 90."""
    from pypdf import PdfWriter

    pdf_path = temp_dir / "rotated.pdf"
    writer = PdfWriter()
    page = writer.add_blank_page(width=612, height=792)
    page.rotate(90)
    with open(pdf_path, "wb") as f:
        writer.write(f)
    return pdf_path


# === Config Fixtures ===

@pytest.fixture
def full_config_dict():
    """Configuration dictionary with all options."""
    return {
        "version": 1,
        "engine": {
            "min_crop_fraction": 0.1,
            "min_scale": 20,
            "max_scale": 300,
        },
        "print": {
            "paper_size": "LETTER",
            "color_mode": "grayscale",
            "pages_per_sheet": 2,
            "copies": 3,
            "duplex": True,
            "quality": "high",
            "shop_id": "shop-42",
        },
    }


@pytest.fixture
def temp_config_file(temp_dir, full_config_dict):
    """Create a temporary config file."""
    config_path = temp_dir / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(full_config_dict, f)
    return config_path


# === Session Fixtures ===

@pytest.fixture
def session_dict():
    """Session with page sizes and a mix of edits."""
    return {
        "source": {"file_name": "flyer.pdf", "file_size": 2048},
        "pages": [
            {"page": 1, "width": 595, "height": 842},
            {"page": 2, "width": 595, "height": 842},
            {"page": 3, "width": 842, "height": 595},
        ],
        "edits": [
            {"page": 1, "crop": {"x": 0.1, "y": 0.1, "width": 0.8, "height": 0.8}},
            {"page": 1, "rotate": 90},
            {"page": 2, "scale": 150},
            {"page": 3, "translate": {"dx": 5, "dy": -2}},
        ],
        "exclude": [2],
    }


@pytest.fixture
def temp_session_file(temp_dir, session_dict):
    """Create a temporary session file."""
    session_path = temp_dir / "session.yaml"
    with open(session_path, "w") as f:
        yaml.dump(session_dict, f)
    return session_path


# === Logging Fixtures ===

@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers added by setup_logging so tests do not share streams."""
    yield
    logger = logging.getLogger("pagecraft")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
