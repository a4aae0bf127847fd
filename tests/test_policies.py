"""Tests for sorting, masking, filtering and preparing a tree."""

import string
from pathlib import Path

import pytest

from usbtree.display import mask_serial, prepare, remove_empty_hubs
from usbtree.filter import DeviceFilter
from usbtree.model import Device, Location
from usbtree.serialize import load_tree_file
from usbtree.settings import Group, MaskSerial, PrintSettings, Sort


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def tree():
    """Load the sample tree fixture."""
    return load_tree_file(FIXTURES_DIR / "tree.json")


def numbered(*numbers):
    return [Device(name=str(n), location=Location(1, n, [10 - n])) for n in numbers]


class TestSort:
    """Tests for device ordering."""

    def test_device_number(self):
        """Test sorting by bus-assigned device number."""
        devices = numbered(3, 1, 2)
        assert [d.location.number for d in Sort.DEVICE_NUMBER.sort_devices(devices)] == [1, 2, 3]

    def test_no_sort(self):
        """Test no sort keeps the input order."""
        devices = numbered(3, 1, 2)
        assert [d.location.number for d in Sort.NO_SORT.sort_devices(devices)] == [3, 1, 2]

    def test_branch_position(self):
        """Test sorting by port on the parent hub."""
        devices = numbered(3, 1, 2)
        assert [d.branch_position for d in Sort.BRANCH_POSITION.sort_devices(devices)] == [7, 8, 9]

    def test_input_untouched(self):
        """Test sorting returns a new list."""
        devices = numbered(3, 1, 2)
        Sort.DEVICE_NUMBER.sort_devices(devices)
        assert [d.location.number for d in devices] == [3, 1, 2]


class TestMaskSerial:
    """Tests for serial masking."""

    def test_hide(self):
        """Test hiding replaces every character with an asterisk."""
        device = Device(serial="AB12")
        mask_serial(device, MaskSerial.HIDE)
        assert device.serial == "****"

    def test_replace(self):
        """Test replacing keeps the length with uppercase alphanumerics."""
        device = Device(serial="AB12")
        mask_serial(device, MaskSerial.REPLACE)
        assert len(device.serial) == 4
        assert set(device.serial) <= set(string.ascii_uppercase + string.digits)

    def test_scramble(self):
        """Test scrambling only draws from the original characters."""
        device = Device(serial="AB12")
        mask_serial(device, MaskSerial.SCRAMBLE)
        assert len(device.serial) == 4
        assert set(device.serial) <= {"A", "B", "1", "2"}

    def test_no_serial(self):
        """Test a device without serial is left alone."""
        device = Device()
        mask_serial(device, MaskSerial.HIDE)
        assert device.serial is None

    def test_recursive(self):
        """Test children are masked only when recursive."""
        child = Device(serial="XY")
        mask_serial(Device(devices=[child]), MaskSerial.HIDE, recursive=False)
        assert child.serial == "XY"
        mask_serial(Device(devices=[child]), MaskSerial.HIDE)
        assert child.serial == "**"


class TestFilter:
    """Tests for the device filter."""

    def test_is_match(self, tree):
        """Test each criterion."""
        flash = tree.buses[0].devices[0].devices[1]
        assert DeviceFilter(vid=0x0781, pid=0x5567).is_match(flash)
        assert not DeviceFilter(vid=0x0781, pid=0x0001).is_match(flash)
        assert DeviceFilter(bus=1, number=4).is_match(flash)
        assert DeviceFilter(name="flash").is_match(flash)
        assert DeviceFilter(serial="c53").is_match(flash)
        assert not DeviceFilter(serial="c53").is_match(tree.buses[0].devices[1])

    def test_tree_keeps_ancestors(self, tree):
        """Test a match deep in the tree keeps its hub."""
        DeviceFilter(vid=0x0781).retain_buses(tree.buses)
        bus = tree.buses[0]
        assert [d.name for d in bus.devices] == ["USB2.0 Hub"]
        assert [d.name for d in bus.devices[0].devices] == ["Flash Drive"]
        assert tree.buses[1].devices == []

    def test_flattened_drops_parents(self, tree):
        """Test a flattened tree only keeps matching devices."""
        tree.flatten()
        DeviceFilter(vid=0x0781).retain_buses(tree.buses)
        assert [d.name for d in tree.buses[0].devices] == ["Flash Drive"]

    def test_exclude_empty_hub(self, tree):
        """Test hubs without devices do not match."""
        DeviceFilter(exclude_empty_hub=True).retain_buses(tree.buses)
        assert tree.buses[1].devices == []
        assert tree.buses[0].devices[0].name == "USB2.0 Hub"


class TestFlatten:
    """Tests for flattening a tree."""

    def test_flatten(self, tree):
        """Test every device ends up directly on its bus."""
        tree.flatten()
        devices = tree.buses[0].devices
        assert [d.name for d in devices] == [
            "USB2.0 Hub", "Keyboard", "Flash Drive", "USB Optical Mouse"]
        assert not any(d.has_devices() for d in devices)

    def test_remove_empty_hubs(self, tree):
        """Test hubs with nothing below them are dropped."""
        empty = Device(name="Empty", class_code=9)
        only_hubs = Device(name="Hubs", class_code=9, devices=[empty])
        leaf = Device(name="Leaf", class_code=0)
        kept = Device(name="Kept", class_code=9, devices=[leaf])
        assert [d.name for d in remove_empty_hubs([empty, only_hubs, kept, leaf])] == [
            "Kept", "Leaf"]


class TestPrepare:
    """Tests for the preparation pass."""

    def test_filter_flattens_list(self, tree):
        """Test a list with a filter flattens before filtering."""
        prepare(tree, DeviceFilter(vid=0x046d), PrintSettings(hide_buses=True))
        assert len(tree.buses) == 1
        assert sorted(d.name for d in tree.buses[0].devices) == ["Keyboard", "USB Optical Mouse"]

    def test_filter_keeps_tree(self, tree):
        """Test a tree with a filter keeps ancestors of matches."""
        prepare(tree, DeviceFilter(vid=0x046d), PrintSettings(tree=True, hide_buses=True))
        assert [b.bus_number for b in tree.buses] == [1]
        hub = tree.buses[0].devices[0]
        assert [d.name for d in hub.devices] == ["Keyboard"]

    def test_group_flattens(self, tree):
        """Test grouping by bus flattens the tree."""
        prepare(tree, None, PrintSettings(group_devices=Group.BUS))
        assert len(tree.buses[0].devices) == 4

    def test_json_flattens(self, tree):
        """Test JSON output of a list flattens the tree."""
        prepare(tree, None, PrintSettings(json=True))
        assert len(tree.buses[0].devices) == 4

    def test_tree_not_flattened(self, tree):
        """Test nothing is flattened when printing a tree."""
        prepare(tree, None, PrintSettings(tree=True, json=True))
        assert len(tree.buses[0].devices) == 2

    def test_hide_buses(self, tree):
        """Test buses without devices are hidden."""
        prepare(tree, None, PrintSettings(tree=True, hide_buses=True))
        assert [b.bus_number for b in tree.buses] == [1, 3]

    def test_hide_hubs_and_buses(self, tree):
        """Test an empty hub is hidden, and then its bus."""
        prepare(tree, None, PrintSettings(tree=True, hide_hubs=True, hide_buses=True))
        assert [b.bus_number for b in tree.buses] == [1]
        assert tree.buses[0].devices[0].name == "USB2.0 Hub"

    def test_sort_buses(self, tree):
        """Test buses are ordered by number."""
        prepare(tree, None, PrintSettings(tree=True, sort_buses=True))
        assert [b.bus_number for b in tree.buses] == [1, 2, 3]

    def test_mask_serials(self, tree):
        """Test serials are masked through the whole tree."""
        prepare(tree, None, PrintSettings(tree=True, mask_serials=MaskSerial.HIDE))
        flash = tree.buses[0].devices[0].devices[1]
        assert flash.serial == "********"
