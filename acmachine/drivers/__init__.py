"""Machine drivers and the registry the CLI resolves them from."""

from acmachine.drivers.arubacloud import DRIVER_NAME
from acmachine.drivers.arubacloud import Driver as ArubaCloudDriver
from acmachine.drivers.base import BaseDriver, DriverError, DriverOptions, State
from acmachine.drivers.registry import available_drivers, load_driver, new_driver, register_driver

register_driver(DRIVER_NAME, ArubaCloudDriver)

__all__ = [
    "ArubaCloudDriver",
    "BaseDriver",
    "DriverError",
    "DriverOptions",
    "State",
    "available_drivers",
    "load_driver",
    "new_driver",
    "register_driver",
]
