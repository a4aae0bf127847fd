"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest

from usbtree.blocks import DeviceBlocks
from usbtree.cli import build_settings, create_parser, main, parse_show, parse_vidpid
from usbtree.config import Config
from usbtree.settings import MaskSerial


FIXTURES_DIR = Path(__file__).parent / "fixtures"
TREE = str(FIXTURES_DIR / "tree.json")


@pytest.fixture(autouse=True)
def no_system_config(tmp_path, monkeypatch):
    """Keep the user's own config out of the tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))


class TestArguments:
    """Tests for argument parsing helpers."""

    def test_vidpid(self):
        """Test hex vendor and product ids."""
        assert parse_vidpid("046d:c31c") == (0x046d, 0xc31c)
        assert parse_vidpid("046d") == (0x046d, None)

    def test_show(self):
        """Test bus and device numbers."""
        assert parse_show("1:4") == (1, 4)
        assert parse_show("1:") == (1, None)
        assert parse_show(":4") == (None, 4)

    def test_merge_with_config(self):
        """Test flags are combined and CLI block lists win."""
        config = Config(decimal=True, verbose=2, blocks=[DeviceBlocks.NAME],
                        mask_serials=MaskSerial.HIDE)
        args = create_parser().parse_args(["-v", "--tree", "-b", "vendor-id,serial"])
        settings = build_settings(args, config)
        assert settings.decimal
        assert settings.tree
        assert settings.verbosity == 2
        assert settings.device_blocks == [DeviceBlocks.VENDOR_ID, DeviceBlocks.SERIAL]
        assert settings.mask_serials == MaskSerial.HIDE

    def test_no_icons_no_colour(self):
        """Test icons and colours can be turned off."""
        args = create_parser().parse_args(["--no-icons", "--no-colour"])
        settings = build_settings(args, Config())
        assert settings.icons is None
        assert settings.colours is None

    def test_ascii_drops_icons(self):
        """Test ASCII output has no icons."""
        args = create_parser().parse_args(["--ascii"])
        settings = build_settings(args, Config())
        assert settings.icons is None
        assert settings.ascii


class TestMain:
    """Tests for the main entry point."""

    def test_tree(self, capsys):
        """Test printing a tree."""
        assert main(["--tree", "--no-icons", "--no-colour", TREE]) == 0
        out = capsys.readouterr().out
        assert out.startswith("/: ")
        assert "Flash Drive" in out

    def test_json_with_filter(self, capsys):
        """Test JSON output of filtered devices."""
        assert main(["--json", "--vidpid", "0781", TREE]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [d["name"] for d in data] == ["Flash Drive"]

    def test_masked(self, capsys):
        """Test serials are masked in the output."""
        assert main(["--no-colour", "--mask-serials", "hide", TREE]) == 0
        out = capsys.readouterr().out
        assert "********" in out
        assert "4C530001" not in out

    def test_gen(self, capsys):
        """Test printing the example config."""
        assert main(["--gen"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert "blocks" in data
        assert "bus-blocks" in data

    def test_bad_block(self):
        """Test unknown block names exit with a usage error."""
        with pytest.raises(SystemExit) as e:
            main(["-b", "nope", TREE])
        assert e.value.code == 2

    def test_missing_file(self):
        """Test a missing input file."""
        with pytest.raises(SystemExit) as e:
            main(["missing.json"])
        assert e.value.code == 1

    def test_invalid_dump(self, tmp_path, capsys):
        """Test an input that is not a dump."""
        path = tmp_path / "dump.json"
        path.write_text('{"devices": []}')
        assert main([str(path)]) == 1
        assert "Load error" in capsys.readouterr().err

    def test_bad_config(self, tmp_path, capsys):
        """Test an invalid config file."""
        path = tmp_path / "config.json"
        path.write_text('{"nope": true}')
        assert main(["-c", str(path), TREE]) == 1
        assert "Config error" in capsys.readouterr().err

    def test_version(self, capsys):
        """Test printing the version."""
        assert main(["--version"]) == 0
        assert capsys.readouterr().out.startswith("usbtree ")
