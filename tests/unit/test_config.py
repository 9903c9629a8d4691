"""Tests for pagecraft.config module."""

import pytest
import yaml

from pagecraft.config import (
    ColorMode,
    Config,
    ConfigError,
    EngineConfig,
    PagesPerSheet,
    PaperSize,
    PrintConfig,
    Quality,
    _parse_enum,
    load_config,
    parse_config,
    parse_engine,
    parse_print,
)
from pagecraft.recipe import PrintOptions


class TestLoadConfig:
    """Test configuration file loading."""

    def test_load_full_config(self, temp_config_file):
        config = load_config(temp_config_file)
        assert isinstance(config, Config)
        assert config.version == 1
        assert config.engine == EngineConfig(min_crop_fraction=0.1, min_scale=20, max_scale=300)
        assert config.print.paper_size == PaperSize.LETTER
        assert config.print.color_mode == ColorMode.GRAYSCALE
        assert config.print.pages_per_sheet == PagesPerSheet.TWO
        assert config.print.copies == 3
        assert config.print.duplex is True
        assert config.print.quality == Quality.HIGH
        assert config.print.shop_id == "shop-42"

    def test_file_not_found(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "nonexistent.yaml")

    def test_invalid_yaml(self, temp_dir):
        bad_yaml = temp_dir / "bad.yaml"
        bad_yaml.write_text("{{invalid yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(bad_yaml)

    def test_config_not_dict(self, temp_dir):
        config_path = temp_dir / "list.yaml"
        config_path.write_text("- item1\n- item2")
        with pytest.raises(ConfigError, match="dictionary"):
            load_config(config_path)

    def test_empty_file_gives_defaults(self, temp_dir):
        config_path = temp_dir / "empty.yaml"
        config_path.write_text("")
        assert load_config(config_path) == Config()

    def test_partial_config(self, temp_dir):
        config_path = temp_dir / "partial.yaml"
        with open(config_path, "w") as f:
            yaml.dump({"print": {"copies": 2}}, f)
        config = load_config(config_path)
        assert config.print.copies == 2
        assert config.print.paper_size == PaperSize.A4
        assert config.engine == EngineConfig()


class TestParseEnum:
    """Test enum parsing with error context."""

    def test_valid_value(self):
        assert _parse_enum(ColorMode, "grayscale") == ColorMode.GRAYSCALE

    def test_paper_size_case_insensitive(self):
        assert _parse_enum(PaperSize, "letter") == PaperSize.LETTER

    def test_int_enum(self):
        assert _parse_enum(PagesPerSheet, 4) == PagesPerSheet.FOUR

    def test_invalid_value_has_context(self):
        with pytest.raises(ConfigError) as exc_info:
            _parse_enum(Quality, "best", field="print.quality")
        error = exc_info.value
        assert error.context["field"] == "print.quality"
        assert "draft, normal, high" in error.context["suggestion"]
        assert "Invalid value 'best'" in str(error)


class TestParseEngine:
    """Test engine section parsing."""

    def test_defaults(self):
        assert parse_engine({}) == EngineConfig()

    @pytest.mark.parametrize("value", [0, 1, -0.1, 1.5])
    def test_min_crop_fraction_range(self, value):
        with pytest.raises(ConfigError, match="min_crop_fraction"):
            parse_engine({"min_crop_fraction": value})

    def test_min_scale_positive(self):
        with pytest.raises(ConfigError, match="positive"):
            parse_engine({"min_scale": 0})

    def test_min_below_max(self):
        with pytest.raises(ConfigError, match="below max_scale"):
            parse_engine({"min_scale": 300, "max_scale": 200})

    @pytest.mark.parametrize("value", ["big", None, True, float("inf")])
    def test_non_number(self, value):
        with pytest.raises(ConfigError, match="Expected a number"):
            parse_engine({"max_scale": value})


class TestParsePrint:
    """Test print section parsing."""

    def test_defaults(self):
        assert parse_print({}) == PrintConfig()

    @pytest.mark.parametrize("copies", [0, -1, "2", 1.5, True])
    def test_copies_must_be_positive_int(self, copies):
        with pytest.raises(ConfigError, match="copies"):
            parse_print({"copies": copies})

    def test_invalid_paper_size(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_print({"paper_size": "TABLOID"})
        assert exc_info.value.context["field"] == "print.paper_size"

    def test_invalid_pages_per_sheet(self):
        with pytest.raises(ConfigError):
            parse_print({"pages_per_sheet": 3})

    def test_shop_id_coerced_to_string(self):
        assert parse_print({"shop_id": 42}).shop_id == "42"

    def test_to_options(self):
        config = parse_print({"paper_size": "a3", "pages_per_sheet": 4, "shop_id": "s1"})
        assert config.to_options() == PrintOptions(
            paper_size="A3",
            color_mode="color",
            duplex=False,
            copies=1,
            pages_per_sheet=4,
            quality="normal",
            shop_id="s1",
        )


class TestParseConfig:
    """Test root parsing."""

    def test_none_gives_defaults(self):
        assert parse_config(None) == Config()

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_config({"print": ["A4"]})
        assert exc_info.value.context["field"] == "print"

    def test_empty_section_allowed(self):
        assert parse_config({"engine": None}).engine == EngineConfig()

    def test_full(self, full_config_dict):
        config = parse_config(full_config_dict)
        assert config.print.to_options().pages_per_sheet == 2
