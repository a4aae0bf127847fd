"""Tests for the config file."""

import json
import logging
from pathlib import Path

import pytest

from usbtree.blocks import DeviceBlocks
from usbtree.colour import ColourTheme
from usbtree.config import Config, ConfigError
from usbtree.icon import TreeIcon
from usbtree.settings import MaskSerial


FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestConfigFile:
    """Tests for reading a config file."""

    @pytest.fixture
    def config(self):
        """Load the sample config fixture."""
        return Config.from_file(FIXTURES_DIR / "config.json")

    def test_values(self, config):
        """Test kebab-case keys map onto fields."""
        assert config.blocks == [
            DeviceBlocks.BUS_NUMBER, DeviceBlocks.DEVICE_NUMBER,
            DeviceBlocks.NAME, DeviceBlocks.SERIAL]
        assert config.mask_serials == MaskSerial.HIDE
        assert config.tree
        assert config.verbose == 1
        assert config.headings
        assert not config.decimal

    def test_colours_merge_over_default(self, config):
        """Test given colour roles override the default theme."""
        assert config.colours.name == "red"
        assert config.colours.serial is None
        assert config.colours.vid == ColourTheme.default().vid

    def test_icons(self, config):
        """Test user icons and tree glyphs."""
        assert config.icons.user == {"vid#1d50": "X"}
        assert config.icons.get_tree_icon(TreeIcon.BUS_START) == "*"

    def test_defaults(self):
        """Test an empty config."""
        config = Config.from_dict({})
        assert config.blocks is None
        assert config.colours == ColourTheme.default()
        assert config.verbose == 0

    def test_example_round_trip(self):
        """Test the example config reads back unchanged."""
        example = Config.example()
        data = json.loads(json.dumps(example.to_dict()))
        assert Config.from_dict(data) == example


class TestConfigErrors:
    """Tests for invalid config files."""

    def test_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ConfigError, match="Unknown config key"):
            Config.from_dict({"colour": {}})

    def test_unknown_block(self):
        """Test unknown block names are rejected."""
        with pytest.raises(ConfigError, match="blocks"):
            Config.from_dict({"blocks": ["vendor-id", "nope"]})

    def test_bad_colour(self):
        """Test colours rich cannot parse are rejected."""
        with pytest.raises(ConfigError):
            Config.from_dict({"colours": {"name": "not-a-colour"}})

    def test_bad_type(self):
        """Test a flag that is not a boolean."""
        with pytest.raises(ConfigError, match="tree"):
            Config.from_dict({"tree": "yes"})

    def test_invalid_json(self, tmp_path):
        """Test a file that is not JSON."""
        path = tmp_path / "usbtree.json"
        path.write_text("{")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            Config.from_file(path)


class TestSystemConfig:
    """Tests for finding the system config."""

    def test_missing(self, tmp_path, monkeypatch):
        """Test defaults when there is no config file."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert Config.sys() == Config()

    def test_found(self, tmp_path, monkeypatch):
        """Test the config under XDG_CONFIG_HOME is used."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        (tmp_path / "usbtree").mkdir()
        (tmp_path / "usbtree" / "usbtree.json").write_text('{"decimal": true}')
        assert Config.sys().decimal

    def test_invalid_warns(self, tmp_path, monkeypatch, caplog):
        """Test an invalid config logs a warning and falls back to defaults."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        (tmp_path / "usbtree").mkdir()
        (tmp_path / "usbtree" / "usbtree.json").write_text('{"nope": 1}')
        with caplog.at_level(logging.WARNING, logger="usbtree.config"):
            assert Config.sys() == Config()
        assert "Failed to read system config" in caplog.text
