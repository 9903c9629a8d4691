"""Tests for pagecraft.cli module."""

import json
import logging
from pathlib import Path

import yaml

from pagecraft.cli import build_document, create_parser, main


class TestCreateParser:
    """Test argument parser creation."""

    def test_parser_creation(self):
        parser = create_parser()
        assert parser is not None
        assert parser.prog == "pagecraft"

    def test_version_flag(self):
        parser = create_parser()
        args = parser.parse_args(["-V"])
        assert args.version is True

    def test_config_flag(self):
        parser = create_parser()
        args = parser.parse_args(["-c", "test.yaml"])
        assert args.config == Path("test.yaml")

    def test_input_flag(self):
        parser = create_parser()
        args = parser.parse_args(["--input", "doc.pdf"])
        assert args.input == Path("doc.pdf")

    def test_session_flag(self):
        parser = create_parser()
        args = parser.parse_args(["-s", "edits.yaml"])
        assert args.session == Path("edits.yaml")

    def test_output_flag(self):
        parser = create_parser()
        args = parser.parse_args(["-o", "recipe.json"])
        assert args.output == Path("recipe.json")

    def test_validate_and_summary_flags(self):
        parser = create_parser()
        args = parser.parse_args(["--validate", "--summary"])
        assert args.validate is True
        assert args.summary is True

    def test_verbosity_count(self):
        parser = create_parser()
        assert parser.parse_args(["-vv"]).verbose == 2
        assert parser.parse_args([]).verbose == 0

    def test_quiet_and_log_file(self):
        parser = create_parser()
        args = parser.parse_args(["-q", "--log-file", "run.log"])
        assert args.quiet is True
        assert args.log_file == Path("run.log")


class TestBuildDocument:
    """Test document assembly from arguments."""

    def test_from_session(self, temp_session_file):
        parsed = create_parser().parse_args(["-s", str(temp_session_file)])
        document = build_document(parsed)
        assert document.page_count == 3
        assert document.page_state.included() == [1, 3]

    def test_from_pdf_and_session(self, temp_multi_page_pdf, temp_dir):
        session_path = temp_dir / "edits.yaml"
        with open(session_path, "w") as f:
            yaml.dump({"edits": [{"page": 4, "rotate": 90}]}, f)
        parsed = create_parser().parse_args(
            ["-i", str(temp_multi_page_pdf), "-s", str(session_path)]
        )
        document = build_document(parsed)
        assert document.page_count == 4
        assert document.store.get_rotation(4) == 90
        assert document.exporter.source.file_name == "multi_page.pdf"

    def test_config_applied(self, temp_pdf, temp_config_file):
        parsed = create_parser().parse_args(["-i", str(temp_pdf), "-c", str(temp_config_file)])
        document = build_document(parsed)
        assert document.exporter.get_options().copies == 3


class TestMain:
    """Test the main entry point."""

    def test_version(self, caplog):
        with caplog.at_level(logging.INFO, logger="pagecraft"):
            result = main(["--version"])
        assert result == 0
        assert "pagecraft" in caplog.text

    def test_no_args_prints_help(self, capsys):
        result = main([])
        assert result == 1
        captured = capsys.readouterr()
        assert "usage" in captured.out.lower()

    def test_recipe_to_stdout(self, temp_session_file, capsys):
        result = main(["-s", str(temp_session_file)])
        assert result == 0
        captured = capsys.readouterr()
        recipe = json.loads(captured.out)
        assert recipe["type"] == "print_job"
        assert [p["pageNumber"] for p in recipe["pages"]] == [1, 3]
        assert recipe["source"]["fileName"] == "flyer.pdf"

    def test_info_logs_stay_off_stdout(self, temp_session_file, capsys):
        main(["-s", str(temp_session_file), "--summary"])
        captured = capsys.readouterr()
        json.loads(captured.out)
        assert "Applied 4 edit(s)" in captured.err

    def test_recipe_to_file(self, temp_session_file, temp_dir, caplog):
        output = temp_dir / "out" / "recipe.json"
        with caplog.at_level(logging.INFO, logger="pagecraft"):
            result = main(["-s", str(temp_session_file), "-o", str(output)])
        assert result == 0
        recipe = json.loads(output.read_text())
        assert recipe["pages"][0]["transforms"]["rotation"] == 90
        assert "Wrote recipe" in caplog.text

    def test_repeated_runs_identical(self, temp_multi_page_pdf, temp_dir):
        first, second = temp_dir / "a.json", temp_dir / "b.json"
        assert main(["-i", str(temp_multi_page_pdf), "-o", str(first), "-q"]) == 0
        assert main(["-i", str(temp_multi_page_pdf), "-o", str(second), "-q"]) == 0
        assert json.loads(first.read_text())["pages"] == json.loads(second.read_text())["pages"]

    def test_validate_only(self, temp_session_file, caplog, capsys):
        with caplog.at_level(logging.INFO, logger="pagecraft"):
            result = main(["-s", str(temp_session_file), "--validate"])
        assert result == 0
        assert "Recipe is valid: 2 page(s)" in caplog.text
        out = capsys.readouterr().out
        assert '"version"' not in out
        assert "{" not in out

    def test_summary(self, temp_session_file, temp_dir, caplog):
        with caplog.at_level(logging.INFO, logger="pagecraft"):
            main(["-s", str(temp_session_file), "--summary", "-o", str(temp_dir / "r.json")])
        assert "Pages: 3 total, 2 included, 2 edited" in caplog.text
        assert "Print: A4, color, 1 copies" in caplog.text

    def test_empty_job_fails_validation(self, temp_dir, caplog):
        session_path = temp_dir / "all_excluded.yaml"
        with open(session_path, "w") as f:
            yaml.dump({
                "pages": [{"page": 1, "width": 595, "height": 842}],
                "exclude": [1],
            }, f)
        with caplog.at_level(logging.ERROR, logger="pagecraft"):
            result = main(["-s", str(session_path), "--validate"])
        assert result == 1
        assert "No pages included" in caplog.text
        assert "validation failed with 1 error(s)" in caplog.text

    def test_bad_edit_returns_1(self, temp_dir, caplog):
        session_path = temp_dir / "bad.yaml"
        with open(session_path, "w") as f:
            yaml.dump({
                "pages": [{"page": 1, "width": 595, "height": 842}],
                "edits": [{"page": 1, "flip": True}],
            }, f)
        with caplog.at_level(logging.ERROR, logger="pagecraft"):
            result = main(["-s", str(session_path)])
        assert result == 1
        assert "unknown edit type 'flip'" in caplog.text

    def test_session_without_pages_returns_1(self, temp_dir, caplog):
        session_path = temp_dir / "no_pages.yaml"
        session_path.write_text("edits: []\n")
        with caplog.at_level(logging.ERROR, logger="pagecraft"):
            result = main(["-s", str(session_path)])
        assert result == 1
        assert "no pages" in caplog.text

    def test_missing_session_file(self, temp_dir, caplog):
        with caplog.at_level(logging.ERROR, logger="pagecraft"):
            result = main(["-s", str(temp_dir / "missing.yaml")])
        assert result == 1
        assert "File not found" in caplog.text

    def test_missing_pdf(self, temp_dir, caplog):
        with caplog.at_level(logging.ERROR, logger="pagecraft"):
            result = main(["-i", str(temp_dir / "missing.pdf")])
        assert result == 1
        assert "not found" in caplog.text

    def test_invalid_config(self, temp_pdf, temp_dir, caplog):
        config_path = temp_dir / "config.yaml"
        config_path.write_text("print:\n  paper_size: TABLOID\n")
        with caplog.at_level(logging.ERROR, logger="pagecraft"):
            result = main(["-i", str(temp_pdf), "-c", str(config_path)])
        assert result == 1
        assert "TABLOID" in caplog.text
