"""Tests for the display blocks."""

import pytest

from usbtree.blocks import (
    BLOCK_TYPES,
    BusBlocks,
    ConfigurationBlocks,
    DeviceBlocks,
    EndpointBlocks,
    InterfaceBlocks,
    centre,
    format_base_u16,
    format_base_u8,
    parse_blocks,
    render_heading,
    render_value,
)
from usbtree.colour import ColourTheme
from usbtree.icon import DEFAULT_ICONS, IconTheme
from usbtree.model import (
    Bus,
    ConfigAttributes,
    Configuration,
    Device,
    Endpoint,
    Location,
    Speed,
    Version,
)
from usbtree.settings import PrintSettings


class TestNumberFormat:
    """Tests for the shared hex/decimal formatting."""

    def test_u16_hex_zero(self):
        """Test a zero id is zero padded in hex."""
        assert format_base_u16(0, PrintSettings()) == "0x0000"

    def test_u16_decimal_zero(self):
        """Test a zero id is right aligned in 6 chars in decimal."""
        assert format_base_u16(0, PrintSettings(decimal=True)) == "     0"

    def test_u16_widths_match(self):
        """Test hex and decimal ids are the same width."""
        for value in (0, 0x1d6b, 0xffff):
            assert len(format_base_u16(value, PrintSettings())) == 6
            assert len(format_base_u16(value, PrintSettings(decimal=True))) == 6

    def test_u8(self):
        """Test 8-bit code formatting."""
        assert format_base_u8(9, PrintSettings()) == "0x09"
        assert format_base_u8(9, PrintSettings(decimal=True)) == "  9"

    def test_centre_odd_gap(self):
        """Test odd spare space goes to the right."""
        assert centre("Name", 9) == "  Name   "
        assert centre("Name", 2) == "Name"

    def test_u8_missing_matches_width(self):
        """Test an absent code is as wide as a present one in both bases."""
        device = Device(name="d", sub_class=9)
        empty = Device(name="e")
        for settings in (PrintSettings(), PrintSettings(decimal=True)):
            present = DeviceBlocks.SUB_CLASS.format_value(device, {}, settings)
            missing = DeviceBlocks.SUB_CLASS.format_value(empty, {}, settings)
            assert len(missing) == len(present)
            assert missing.strip() == "-"

    def test_centre_wide_characters(self):
        """Test centring counts terminal cells, not characters."""
        assert centre("日本", 8) == "  日本  "


class TestPadding:
    """Tests for per batch padding."""

    @pytest.fixture
    def devices(self):
        """Devices with names of different lengths."""
        return [
            Device(name="Keyboard", location=Location(1, 5, [1, 3])),
            Device(name="USB Optical Mouse", serial="A1", location=Location(1, 3, [2])),
        ]

    def test_padding_is_tight(self, devices):
        """Test width is the longest of heading and values, no more."""
        pad = DeviceBlocks.generate_padding(devices)
        assert pad[DeviceBlocks.NAME] == len("USB Optical Mouse")
        assert pad[DeviceBlocks.SERIAL] == len("Serial")
        assert pad[DeviceBlocks.TREE_POSITIONS] == len("TPos")

    def test_fixed_blocks_not_padded(self, devices):
        """Test fixed width blocks take no part in padding."""
        pad = DeviceBlocks.generate_padding(devices)
        assert DeviceBlocks.VENDOR_ID not in pad
        assert DeviceBlocks.SPEED not in pad
        assert set(pad) == {b for b in DeviceBlocks if b.value_is_string()}

    def test_empty_batch(self):
        """Test an empty batch pads to the headings."""
        pad = EndpointBlocks.generate_padding([])
        assert pad[EndpointBlocks.DIRECTION] == len("Dir")

    def test_heading_centred(self, devices):
        """Test text headings are centred to the padding."""
        pad = DeviceBlocks.generate_padding(devices)
        heading = DeviceBlocks.NAME.heading(pad)
        assert len(heading) == len("USB Optical Mouse")
        assert heading.strip() == "Name"

    def test_value_padded(self, devices):
        """Test text values are left aligned to the padding."""
        pad = DeviceBlocks.generate_padding(devices)
        value = DeviceBlocks.NAME.format_value(devices[0], pad, PrintSettings())
        assert value == "Keyboard" + " " * 9

    def test_wide_characters(self):
        """Test double width characters are padded by terminal cells."""
        devices = [Device(name="日本語キーボード"), Device(name="Keyboard")]
        pad = DeviceBlocks.generate_padding(devices)
        assert pad[DeviceBlocks.NAME] == 16
        value = DeviceBlocks.NAME.format_value(devices[1], pad, PrintSettings())
        assert value == "Keyboard" + " " * 8
        assert DeviceBlocks.NAME.format_value(devices[0], pad, PrintSettings()) == "日本語キーボード"


class TestDeviceBlocks:
    """Tests for device values."""

    @pytest.fixture
    def device(self):
        """A high speed hub without serial or vendor id."""
        return Device(
            name="Hub",
            product_id=0x0101,
            location=Location(1, 2, [1]),
            speed=Speed.HIGH,
            bcd_usb=Version(2, 0, 0),
            class_code=0x09,
            bus_power=500,
        )

    def test_missing_text_value(self, device):
        """Test an absent text value is a padded dash."""
        value = DeviceBlocks.SERIAL.format_value(device, {DeviceBlocks.SERIAL: 6}, PrintSettings())
        assert value == "-     "

    def test_missing_id(self, device):
        """Test an absent id is a right aligned dash."""
        assert DeviceBlocks.VENDOR_ID.format_value(device, {}, PrintSettings()) == "     -"
        assert DeviceBlocks.PRODUCT_ID.format_value(device, {}, PrintSettings()) == "0x0101"

    def test_fixed_values(self, device):
        """Test fixed width formats."""
        settings = PrintSettings()
        assert DeviceBlocks.SPEED.format_value(device, {}, settings) == "480.0 Mb/s"
        assert DeviceBlocks.BCD_USB.format_value(device, {}, settings) == "2.00 "
        assert DeviceBlocks.BCD_DEVICE.format_value(device, {}, settings) == "    -"
        assert DeviceBlocks.BUS_POWER.format_value(device, {}, settings) == "500 mA"
        assert DeviceBlocks.DEVICE_NUMBER.format_value(device, {}, settings) == "  2"
        assert DeviceBlocks.CLASS_CODE.format_value(device, {}, settings) == "Hub"

    def test_icon_needs_theme(self, device):
        """Test icon blocks do not apply without an icon theme."""
        assert DeviceBlocks.ICON.format_value(device, {}, PrintSettings()) is None
        values = render_value(device, [DeviceBlocks.ICON, DeviceBlocks.NAME], {}, PrintSettings())
        assert values == ["Hub"]

    def test_icon_with_theme(self, device):
        """Test a device falls back to its class icon."""
        settings = PrintSettings(icons=IconTheme())
        icon = DeviceBlocks.ICON.format_value(device, {}, settings)
        assert icon == DEFAULT_ICONS["classifier#09"]

    def test_coloured_value(self, device):
        """Test a themed role is coloured and an unthemed one is not."""
        settings = PrintSettings(colours=ColourTheme(name="red"))
        values = render_value(device, [DeviceBlocks.NAME, DeviceBlocks.DEVICE_NUMBER], {}, settings)
        assert values[0].startswith("\x1b[")
        assert "Hub" in values[0]
        assert values[1] == "  2"

    def test_tree_defaults(self):
        """Test the tree default set leaves out location blocks."""
        blocks = DeviceBlocks.default_device_tree_blocks()
        assert DeviceBlocks.BUS_NUMBER not in blocks
        assert blocks[0] == DeviceBlocks.ICON


class TestOtherBlocks:
    """Tests for bus, configuration and endpoint values."""

    def test_bus_values(self):
        """Test bus blocks."""
        bus = Bus(name="xHCI", host_controller="Intel", pci_vendor=0x8086, number=1)
        settings = PrintSettings()
        assert BusBlocks.PCI_VENDOR.format_value(bus, {}, settings) == "0x8086"
        assert BusBlocks.PCI_DEVICE.format_value(bus, {}, settings) == "     -"
        assert BusBlocks.PORT_PATH.format_value(bus, {}, settings) == "1-0"
        assert BusBlocks.BUS_NUMBER.format_value(bus, {}, settings) == "  1"

    def test_configuration_values(self):
        """Test configuration blocks."""
        config = Configuration(
            number=1,
            attributes=[ConfigAttributes.SELF_POWERED, ConfigAttributes.REMOTE_WAKEUP],
            max_power=90,
        )
        settings = PrintSettings()
        assert ConfigurationBlocks.MAX_POWER.format_value(config, {}, settings) == " 90mA"
        assert ConfigurationBlocks.NUMBER.format_value(config, {}, settings) == " 1"
        assert (ConfigurationBlocks.ATTRIBUTES.format_value(config, {}, settings)
                == "SelfPowered, RemoteWakeup")
        assert ConfigurationBlocks.ICON_ATTRIBUTES.format_value(config, {}, settings) is None

    def test_endpoint_values(self):
        """Test endpoint blocks, including high bandwidth packet sizes."""
        endpoint = Endpoint(address=0x81, max_packet_size=0x1400, interval=1)
        settings = PrintSettings()
        assert EndpointBlocks.NUMBER.format_value(endpoint, {}, settings) == " 1"
        assert EndpointBlocks.DIRECTION.format_value(endpoint, {}, settings) == "IN"
        assert EndpointBlocks.MAX_PACKET_SIZE.format_value(endpoint, {}, settings) == "3x 1024"

    def test_verbose_defaults_are_richer(self):
        """Test verbose default sets contain the plain ones."""
        for cls in (BusBlocks, DeviceBlocks, ConfigurationBlocks, InterfaceBlocks, EndpointBlocks):
            plain = cls.default_blocks(False)
            verbose = cls.default_blocks(True)
            assert set(plain) <= set(verbose)
            assert len(verbose) > len(plain)


class TestBlockTables:
    """Tests that every block is handled everywhere."""

    @pytest.mark.parametrize("cls", list(BLOCK_TYPES.values()))
    def test_every_block_has_heading_and_colour(self, cls):
        """Test every member renders a heading and a colour."""
        theme = ColourTheme.default()
        for block in cls:
            assert block.heading({})
            assert "x" in block.colour("x", theme)

    def test_render_heading(self):
        """Test headings follow the block order."""
        blocks = [EndpointBlocks.NUMBER, EndpointBlocks.DIRECTION]
        assert render_heading(blocks, {EndpointBlocks.DIRECTION: 5}) == [" #", " Dir "]

    def test_parse_blocks(self):
        """Test blocks are parsed from their kebab-case names."""
        assert parse_blocks(DeviceBlocks, ["vendor-id", "name"]) == [
            DeviceBlocks.VENDOR_ID, DeviceBlocks.NAME]

    def test_parse_unknown_block(self):
        """Test an unknown block name is rejected."""
        with pytest.raises(ValueError, match="Unknown DeviceBlocks"):
            parse_blocks(DeviceBlocks, ["nope"])
