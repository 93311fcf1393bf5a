"""Tests for driver registration and lookup."""

from unittest.mock import MagicMock, patch

import pytest

import acmachine.drivers.registry as registry
from acmachine.drivers import ArubaCloudDriver, available_drivers, load_driver, new_driver, register_driver


@pytest.fixture
def isolated_registry(monkeypatch):
    monkeypatch.setattr(registry, "_drivers", dict(registry._drivers))


def test_arubacloud_registered_on_import():
    assert "arubacloud" in available_drivers()


def test_new_driver(tmp_path):
    driver = new_driver("arubacloud", "m1", str(tmp_path))
    assert isinstance(driver, ArubaCloudDriver)
    assert driver.machine_name == "m1"
    assert driver.store_path == str(tmp_path)


def test_new_driver_unknown():
    with pytest.raises(ValueError, match="Unknown driver: nope"):
        new_driver("nope", "m1", "/tmp")


def test_load_driver_from_snapshot():
    driver = load_driver("arubacloud", {"machine_name": "m1", "server_id": 42})
    assert driver.server_id == 42


def test_register_custom_driver(isolated_registry):
    factory = MagicMock()
    register_driver("fake", factory)

    new_driver("fake", "m1", "/store")

    factory.assert_called_once_with(machine_name="m1", store_path="/store")


def test_entry_point_drivers_are_loaded(isolated_registry):
    factory = MagicMock()
    ep = MagicMock()
    ep.name = "thirdparty"
    ep.load.return_value = factory

    with patch("acmachine.drivers.registry.entry_points", return_value=[ep]) as mock_eps:
        assert "thirdparty" in available_drivers()

    mock_eps.assert_called_with(group="acmachine.drivers")


def test_broken_entry_point_is_skipped(isolated_registry, caplog):
    ep = MagicMock()
    ep.name = "broken"
    ep.load.side_effect = ImportError("missing sdk")

    with patch("acmachine.drivers.registry.entry_points", return_value=[ep]):
        names = available_drivers()

    assert "broken" not in names
    assert "missing sdk" in caplog.text
