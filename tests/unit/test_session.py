"""Tests for pagecraft.session module."""

import pytest

from pagecraft.document import Document
from pagecraft.edits import Crop, Reset, Rotate, Scale, SetRotation, Translate
from pagecraft.exceptions import CommandError, ConfigError
from pagecraft.model import CropBox, PageDimensions, Rotation
from pagecraft.page_source import StaticPageSource
from pagecraft.session import (
    Session,
    apply_session,
    document_from_session,
    load_session,
    parse_edit,
    parse_session,
)

from tests.helpers import A4


class TestParseEdit:
    """Test parsing single edit entries."""

    @pytest.mark.parametrize("entry,expected", [
        ({"page": 1, "crop": {"x": 0.1, "y": 0.2, "width": 0.3, "height": 0.4}},
         Crop(CropBox(0.1, 0.2, 0.3, 0.4))),
        ({"page": 1, "crop": {"x": 0.1, "y": 0.1, "w": 0.8, "h": 0.8}},
         Crop(CropBox(0.1, 0.1, 0.8, 0.8))),
        ({"page": 1, "rotate": 90}, Rotate(90)),
        ({"page": 1, "rotate": -90}, Rotate(-90)),
        ({"page": 1, "rotate": 180}, Rotate(180)),
        ({"page": 1, "set_rotation": 270}, SetRotation(270)),
        ({"page": 1, "scale": 150}, Scale(150)),
        ({"page": 1, "translate": {"dx": 2, "dy": -1}}, Translate(2, -1)),
        ({"page": 1, "translate": {"dx": 2}}, Translate(2, 0)),
        ({"page": 1, "reset": True}, Reset()),
    ])
    def test_valid_entries(self, entry, expected):
        page, command, apply_to_all = parse_edit(entry)
        assert page == 1
        assert command == expected
        assert apply_to_all is False

    def test_apply_to_all_flag(self):
        assert parse_edit({"page": 2, "scale": 80, "apply_to_all": True})[2] is True

    def test_not_a_mapping(self):
        with pytest.raises(CommandError, match="must be a mapping"):
            parse_edit(["crop"], 0)

    @pytest.mark.parametrize("page", [None, 0, -3, "1", True])
    def test_invalid_page(self, page):
        with pytest.raises(CommandError, match="page must be a positive integer"):
            parse_edit({"page": page, "scale": 100})

    def test_unknown_kind_lists_available(self):
        with pytest.raises(CommandError) as exc_info:
            parse_edit({"page": 1, "flip": True}, 2)
        message = str(exc_info.value)
        assert message.startswith("Edit #3: unknown edit type 'flip'")
        assert "crop" in message
        assert "translate" in message

    def test_no_kind(self):
        with pytest.raises(CommandError, match="found none"):
            parse_edit({"page": 1})

    def test_two_kinds(self):
        with pytest.raises(CommandError, match="found rotate, scale"):
            parse_edit({"page": 1, "rotate": 90, "scale": 120})

    @pytest.mark.parametrize("value", [45, 270, 0, "90", True])
    def test_rotate_delta_restricted(self, value):
        with pytest.raises(CommandError, match="rotate must be one of"):
            parse_edit({"page": 1, "rotate": value})

    @pytest.mark.parametrize("value", [45, -90, 360])
    def test_set_rotation_restricted(self, value):
        with pytest.raises(CommandError, match="set_rotation must be one of"):
            parse_edit({"page": 1, "set_rotation": value})

    @pytest.mark.parametrize("crop", ["full", {"x": "left"}])
    def test_invalid_crop(self, crop):
        with pytest.raises(CommandError, match="crop"):
            parse_edit({"page": 1, "crop": crop})

    def test_invalid_scale(self):
        with pytest.raises(CommandError, match="expected a number"):
            parse_edit({"page": 1, "scale": "big"})

    def test_invalid_translate(self):
        with pytest.raises(CommandError, match="translate must be a mapping"):
            parse_edit({"page": 1, "translate": [1, 2]})


class TestParseSession:
    """Test parsing whole session documents."""

    def test_full_session(self, session_dict):
        session = parse_session(session_dict)
        assert session.file_name == "flyer.pdf"
        assert session.file_size == 2048
        assert session.pages == {1: A4, 2: A4, 3: PageDimensions(842, 595)}
        assert [e.command for e in session.edits] == [
            Crop(CropBox(0.1, 0.1, 0.8, 0.8)),
            Rotate(90),
            Scale(150),
            Translate(5, -2),
        ]
        assert session.exclude == [2]
        assert session.order is None

    def test_none_gives_empty(self):
        assert parse_session(None) == Session()

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError, match="dictionary"):
            parse_session(["edits"])

    def test_page_gap_rejected(self):
        data = {"pages": [{"page": 1, "width": 1, "height": 1}, {"page": 3, "width": 1, "height": 1}]}
        with pytest.raises(ConfigError, match="without gaps"):
            parse_session(data)

    def test_bad_page_dimension(self):
        with pytest.raises(ConfigError, match="width"):
            parse_session({"pages": [{"page": 1, "width": "wide", "height": 10}]})

    def test_negative_file_size(self):
        with pytest.raises(ConfigError, match="file_size"):
            parse_session({"source": {"file_size": -1}})

    def test_edits_must_be_list(self):
        with pytest.raises(ConfigError, match="'edits' must be a list"):
            parse_session({"edits": {"page": 1}})

    def test_bad_edit_raises_command_error(self):
        with pytest.raises(CommandError, match="Edit #2"):
            parse_session({"edits": [{"page": 1, "reset": True}, {"page": 1, "zoom": 2}]})

    def test_exclude_must_be_page_numbers(self):
        with pytest.raises(ConfigError, match="'exclude'"):
            parse_session({"exclude": ["two"]})

    def test_order_and_flags(self):
        session = parse_session({
            "order": [2, 1],
            "fit_crop_to_page": [1],
            "edits": [{"page": 1, "crop": {"x": 0, "y": 0, "width": 1, "height": 1},
                       "relative_to_committed": True}],
        })
        assert session.order == [2, 1]
        assert session.fit_crop_to_page == [1]
        assert session.edits[0].relative_to_committed


class TestLoadSession:
    """Test loading session files."""

    def test_load(self, temp_session_file):
        session = load_session(temp_session_file)
        assert len(session.edits) == 4

    def test_file_not_found(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_session(temp_dir / "missing.yaml")

    def test_invalid_yaml(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("edits: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_session(path)


class TestDocumentFromSession:
    """Test building documents from session page sizes."""

    def test_document(self, session_dict):
        document = document_from_session(parse_session(session_dict))
        assert document.page_count == 3
        assert document.exporter.source.file_name == "flyer.pdf"
        assert document.exporter.source.total_pages == 3

    def test_defaults_for_missing_source(self):
        session = Session(pages={1: A4})
        document = document_from_session(session)
        assert document.exporter.source.file_name == "document.pdf"
        assert document.exporter.source.file_size == 0

    def test_no_pages(self):
        with pytest.raises(ConfigError, match="no pages"):
            document_from_session(Session())


class TestApplySession:
    """Test replaying sessions into documents."""

    def test_replay(self, session_dict):
        session = parse_session(session_dict)
        document = document_from_session(session)
        assert apply_session(document, session) == 4

        store = document.store
        assert store.get_crop(1) == CropBox(0.1, 0.1, 0.8, 0.8)
        assert store.get_rotation(1) == Rotation.R90
        assert store.get_scale(2) == 150
        assert store.get_offset(3) == (5, -2)
        assert document.page_state.included() == [1, 3]

    def test_apply_to_all(self):
        session = parse_session({
            "pages": [{"page": n, "width": 595, "height": 842} for n in (1, 2, 3)],
            "edits": [{"page": 2, "set_rotation": 180, "apply_to_all": True}],
        })
        document = document_from_session(session)
        apply_session(document, session)
        assert all(document.store.get_rotation(n) == Rotation.R180 for n in (1, 2, 3))

    def test_relative_crop_is_composed(self):
        session = parse_session({
            "pages": [{"page": 1, "width": 595, "height": 842}],
            "edits": [
                {"page": 1, "crop": {"x": 0.2, "y": 0.2, "width": 0.5, "height": 0.5}},
                {"page": 1, "crop": {"x": 0.5, "y": 0.5, "width": 0.5, "height": 0.5},
                 "relative_to_committed": True},
            ],
        })
        document = document_from_session(session)
        apply_session(document, session)
        crop = document.store.get_crop(1)
        assert crop.x == pytest.approx(0.45)
        assert crop.width == pytest.approx(0.25)

    def test_order_and_fit_flag(self):
        session = parse_session({
            "pages": [{"page": n, "width": 595, "height": 842} for n in (1, 2, 3)],
            "order": [3, 1, 2],
            "fit_crop_to_page": [2],
        })
        document = document_from_session(session)
        apply_session(document, session)
        assert document.page_state.included() == [3, 1, 2]
        assert document.store.get_fit_crop_to_page(2)

    def test_source_override_keeps_page_count(self):
        document = Document.from_page_source(
            StaticPageSource({1: A4, 2: A4}), file_name="scan.pdf", file_size=10
        )
        apply_session(document, Session(file_size=99))
        source = document.exporter.source
        assert source.file_name == "scan.pdf"
        assert source.file_size == 99
        assert source.total_pages == 2

    def test_edit_on_unknown_page_is_ignored(self):
        session = parse_session({
            "pages": [{"page": 1, "width": 595, "height": 842}],
            "edits": [{"page": 5, "scale": 150}],
        })
        document = document_from_session(session)
        apply_session(document, session)
        assert not document.store.has_any_edits()
