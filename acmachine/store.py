"""On-disk machine store: one directory per machine holding config.json and its SSH keys."""

import json
import logging
import os
import shutil
from pathlib import Path

from acmachine.drivers import load_driver

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = "~/.acmachine"
CONFIG_FILE = "config.json"


def default_storage_path():
    """Storage root from MACHINE_STORAGE_PATH, else ~/.acmachine."""
    return os.path.expanduser(os.environ.get("MACHINE_STORAGE_PATH") or DEFAULT_STORAGE_PATH)


class MachineNotFoundError(LookupError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Host does not exist: '{name}'")


class Store:
    """Persist driver snapshots under ``<path>/machines/<name>/``."""

    def __init__(self, path):
        self.path = Path(path).expanduser()

    @property
    def machines_dir(self):
        return self.path / "machines"

    def machine_dir(self, name):
        return self.machines_dir / name

    def exists(self, name):
        return (self.machine_dir(name) / CONFIG_FILE).exists()

    def save(self, driver):
        machine_dir = self.machine_dir(driver.machine_name)
        machine_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
        config = {"DriverName": driver.driver_name(), "Driver": driver.to_dict()}
        config_path = machine_dir / CONFIG_FILE
        config_path.write_text(json.dumps(config, indent=2))
        os.chmod(config_path, 0o600)
        logger.debug(f"Saved machine '{driver.machine_name}' to {config_path}")

    def load(self, name):
        """Rebuild the driver for machine *name*.

        Raises:
            MachineNotFoundError: no config.json for *name*.
        """
        config_path = self.machine_dir(name) / CONFIG_FILE
        if not config_path.exists():
            raise MachineNotFoundError(name)
        config = json.loads(config_path.read_text())
        driver = load_driver(config["DriverName"], config["Driver"])
        driver.store_path = str(self.path)
        return driver

    def list(self):
        """Names of all stored machines, sorted."""
        if not self.machines_dir.is_dir():
            return []
        return sorted(p.name for p in self.machines_dir.iterdir() if (p / CONFIG_FILE).exists())

    def remove(self, name):
        machine_dir = self.machine_dir(name)
        if not machine_dir.exists():
            raise MachineNotFoundError(name)
        shutil.rmtree(machine_dir)
        logger.debug(f"Removed {machine_dir}")
