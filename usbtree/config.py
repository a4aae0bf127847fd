"""
User configuration.

The config file is JSON with kebab-case keys. Unknown keys are rejected so a
typo does not silently fall back to a default. Boolean and verbosity settings
act as defaults for the matching command line options.
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

from .blocks import (
    BusBlocks,
    ConfigurationBlocks,
    DeviceBlocks,
    EndpointBlocks,
    InterfaceBlocks,
    parse_blocks,
)
from .colour import ColourTheme
from .icon import IconTheme, example_theme
from .settings import MaskSerial

logger = logging.getLogger(__name__)

CONF_DIR = "usbtree"
CONF_NAME = "usbtree.json"

BLOCK_FIELDS = {
    "blocks": DeviceBlocks,
    "bus_blocks": BusBlocks,
    "config_blocks": ConfigurationBlocks,
    "interface_blocks": InterfaceBlocks,
    "endpoint_blocks": EndpointBlocks,
}

BOOL_FIELDS = (
    "tree",
    "more",
    "hide_buses",
    "hide_hubs",
    "decimal",
    "no_padding",
    "ascii",
    "headings",
)


class ConfigError(Exception):
    """Exception raised when a config file is invalid."""
    pass


@dataclass
class Config:
    """
    Settings read from a config file.

    Attributes:
        icons: User icons, merged over the default icons
        colours: Colour theme; roles not given keep the default colour
        blocks: Device blocks to show instead of the defaults
        bus_blocks: Bus blocks to show instead of the defaults
        config_blocks: Configuration blocks to show instead of the defaults
        interface_blocks: Interface blocks to show instead of the defaults
        endpoint_blocks: Endpoint blocks to show instead of the defaults
        mask_serials: Mask serial numbers by default
        tree: Print a tree by default
        verbose: Default verbosity
        more: Print the verbose block sets by default
        hide_buses: Hide empty buses by default
        hide_hubs: Hide empty hubs by default
        decimal: Print ids in base 10 by default
        no_padding: Don't align blocks by default
        ascii: Use ASCII tree glyphs by default
        headings: Print headings by default
    """
    icons: IconTheme = field(default_factory=IconTheme)
    colours: ColourTheme = field(default_factory=ColourTheme.default)
    blocks: Optional[list[DeviceBlocks]] = None
    bus_blocks: Optional[list[BusBlocks]] = None
    config_blocks: Optional[list[ConfigurationBlocks]] = None
    interface_blocks: Optional[list[InterfaceBlocks]] = None
    endpoint_blocks: Optional[list[EndpointBlocks]] = None
    mask_serials: Optional[MaskSerial] = None
    tree: bool = False
    verbose: int = 0
    more: bool = False
    hide_buses: bool = False
    hide_hubs: bool = False
    decimal: bool = False
    no_padding: bool = False
    ascii: bool = False
    headings: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Build a config from a parsed JSON object.

        Raises:
            ConfigError: On an unknown key or an invalid value
        """
        if not isinstance(data, dict):
            raise ConfigError("Config must be a JSON object")

        names = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = key.replace("-", "_")
            if name not in names:
                raise ConfigError(f"Unknown config key: {key}")
            try:
                kwargs[name] = _convert(name, value)
            except (ValueError, TypeError, AttributeError) as e:
                raise ConfigError(f"Invalid value for {key}: {e}") from e
        return cls(**kwargs)

    @classmethod
    def from_file(cls, file_path) -> "Config":
        """
        Read a config from a JSON file.

        Raises:
            OSError: If the file cannot be read
            ConfigError: If its content is not a valid config
        """
        with open(file_path, 'r') as f:
            text = f.read()
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {file_path} at line {e.lineno}: {e.msg}") from e
        return cls.from_dict(data)

    @staticmethod
    def config_file_path() -> Path:
        """Directory of the system config file."""
        base = os.environ.get("XDG_CONFIG_HOME")
        if base:
            return Path(base) / CONF_DIR
        return Path.home() / ".config" / CONF_DIR

    @classmethod
    def sys(cls) -> "Config":
        """The system config if there is one, otherwise the defaults."""
        path = cls.config_file_path() / CONF_NAME
        logger.info("Looking for system config %s", path)
        try:
            config = cls.from_file(path)
        except FileNotFoundError:
            return cls()
        except (OSError, ConfigError) as e:
            logger.warning("Failed to read system config %s: %s", path, e)
            return cls()
        logger.info("Loaded system config %s", path)
        return config

    @classmethod
    def example(cls) -> "Config":
        """Config showing every block list and some icon overrides."""
        return cls(
            icons=example_theme(),
            blocks=DeviceBlocks.default_blocks(False),
            bus_blocks=BusBlocks.default_blocks(False),
            config_blocks=ConfigurationBlocks.default_blocks(False),
            interface_blocks=InterfaceBlocks.default_blocks(False),
            endpoint_blocks=EndpointBlocks.default_blocks(False),
        )

    def to_dict(self) -> dict[str, Any]:
        """Config as a JSON object with kebab-case keys."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("icons", "colours"):
                value = value.to_dict()
            elif f.name in BLOCK_FIELDS and value is not None:
                value = [b.value for b in value]
            elif f.name == "mask_serials" and value is not None:
                value = value.value
            data[f.name.replace("_", "-")] = value
        return data


def _convert(name: str, value: Any) -> Any:
    """Convert a JSON value to the type of config field `name`."""
    if name == "icons":
        if not isinstance(value, dict):
            raise TypeError("expected an object")
        return IconTheme.from_dict(value)
    if name == "colours":
        if not isinstance(value, dict):
            raise TypeError("expected an object")
        theme = ColourTheme.from_dict(value)
        given = {k.replace("-", "_") for k in value}
        return replace(ColourTheme.default(), **{r: getattr(theme, r) for r in given})
    if name in BLOCK_FIELDS:
        if value is None:
            return None
        if not isinstance(value, list):
            raise TypeError("expected a list of block names")
        return parse_blocks(BLOCK_FIELDS[name], value)
    if name == "mask_serials":
        return MaskSerial(value) if value is not None else None
    if name == "verbose":
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("expected an integer")
        return value
    if name in BOOL_FIELDS:
        if not isinstance(value, bool):
            raise TypeError("expected true or false")
        return value
    return value
