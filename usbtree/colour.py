"""
Colour themes for printed blocks and tree glyphs.

Each field of :class:`ColourTheme` is a semantic role; blocks map onto a role
and the theme decides the colour. Colours are any colour name ``rich``
understands (``"bright_blue"``, ``"#ff8800"``, ``"color(208)"``); ``None``
leaves text uncoloured.
"""

from dataclasses import dataclass, fields
from typing import Optional

from rich.color import Color, ColorParseError
from rich.style import Style

HEADING_STYLE = Style(bold=True, underline=True)


@dataclass(frozen=True)
class ColourTheme:
    """Colour for each semantic role of a block or tree glyph."""
    name: Optional[str] = None
    serial: Optional[str] = None
    manufacturer: Optional[str] = None
    driver: Optional[str] = None
    string: Optional[str] = None
    icon: Optional[str] = None
    location: Optional[str] = None
    path: Optional[str] = None
    number: Optional[str] = None
    speed: Optional[str] = None
    vid: Optional[str] = None
    pid: Optional[str] = None
    class_code: Optional[str] = None
    sub_code: Optional[str] = None
    protocol: Optional[str] = None
    attributes: Optional[str] = None
    power: Optional[str] = None
    tree: Optional[str] = None
    tree_bus_start: Optional[str] = None
    tree_device_terminator: Optional[str] = None
    tree_configuration_terminator: Optional[str] = None
    tree_interface_terminator: Optional[str] = None
    tree_endpoint_in: Optional[str] = None
    tree_endpoint_out: Optional[str] = None

    def apply(self, role: str, text: str) -> str:
        """Colour `text` with the colour of `role`; unchanged if it has none."""
        colour = getattr(self, role)
        if colour is None:
            return text
        return Style(color=colour).render(text)

    @staticmethod
    def heading(text: str) -> str:
        """Bold and underline a heading row."""
        return HEADING_STYLE.render(text)

    @classmethod
    def roles(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def default(cls) -> "ColourTheme":
        """The built-in theme."""
        return cls(
            name="bright_blue",
            serial="green",
            manufacturer="blue",
            driver="bright_magenta",
            string="blue",
            location="magenta",
            path="cyan",
            number="cyan",
            speed="magenta",
            vid="bright_yellow",
            pid="yellow",
            class_code="bright_yellow",
            sub_code="yellow",
            protocol="yellow",
            attributes="magenta",
            power="red",
            tree="bright_black",
            tree_bus_start="bright_black",
            tree_device_terminator="bright_black",
            tree_configuration_terminator="bright_black",
            tree_interface_terminator="bright_black",
            tree_endpoint_in="yellow",
            tree_endpoint_out="magenta",
        )

    @classmethod
    def from_dict(cls, data: dict[str, Optional[str]]) -> "ColourTheme":
        """
        Build a theme from a config mapping with kebab-case role names.

        Raises:
            ValueError: on an unknown role or a colour rich cannot parse
        """
        roles = set(cls.roles())
        kwargs = {}
        for key, value in data.items():
            role = key.replace("-", "_")
            if role not in roles:
                raise ValueError(f"Unknown colour role: {key}")
            if value is not None:
                try:
                    Color.parse(value)
                except ColorParseError as e:
                    raise ValueError(f"Invalid colour for {key}: {e}") from e
            kwargs[role] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Optional[str]]:
        return {role.replace("_", "-"): getattr(self, role) for role in self.roles()}
