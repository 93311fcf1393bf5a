"""Tests for the on-disk machine store."""

import json
import os
import stat

import pytest

from acmachine.drivers.arubacloud import Driver
from acmachine.store import MachineNotFoundError, Store, default_storage_path


def _driver(tmp_path, name="m1", **kwargs):
    return Driver(machine_name=name, store_path=str(tmp_path), username="u", password="secret-pw", **kwargs)


def test_save_and_load(tmp_path):
    store = Store(tmp_path)
    driver = _driver(tmp_path, server_id=42, ip_address="80.211.1.2", action="NewPro")

    store.save(driver)
    loaded = store.load("m1")

    assert isinstance(loaded, Driver)
    assert loaded == driver
    assert loaded.store_path == str(tmp_path)


def test_config_file_layout(tmp_path):
    store = Store(tmp_path)
    store.save(_driver(tmp_path))

    config_path = tmp_path / "machines" / "m1" / "config.json"
    config = json.loads(config_path.read_text())
    assert config["DriverName"] == "arubacloud"
    assert config["Driver"]["machine_name"] == "m1"
    assert stat.S_IMODE(os.stat(config_path).st_mode) == 0o600


def test_load_missing(tmp_path):
    with pytest.raises(MachineNotFoundError, match="Host does not exist: 'ghost'"):
        Store(tmp_path).load("ghost")


def test_list_and_exists(tmp_path):
    store = Store(tmp_path)
    assert store.list() == []

    store.save(_driver(tmp_path, name="b"))
    store.save(_driver(tmp_path, name="a"))
    (tmp_path / "machines" / "stray-dir").mkdir()

    assert store.list() == ["a", "b"]
    assert store.exists("a")
    assert not store.exists("stray-dir")


def test_remove(tmp_path):
    store = Store(tmp_path)
    store.save(_driver(tmp_path))
    (tmp_path / "machines" / "m1" / "id_rsa").write_text("KEY")

    store.remove("m1")

    assert not (tmp_path / "machines" / "m1").exists()
    with pytest.raises(MachineNotFoundError):
        store.remove("m1")


def test_default_storage_path(monkeypatch, tmp_path):
    monkeypatch.setenv("MACHINE_STORAGE_PATH", str(tmp_path))
    assert default_storage_path() == str(tmp_path)

    monkeypatch.delenv("MACHINE_STORAGE_PATH")
    assert default_storage_path() == os.path.expanduser("~/.acmachine")
