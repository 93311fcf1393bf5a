"""CLI subcommands and the helpers they share."""

import logging
import re
import sys

import httpx

from acmachine.api.client import APIError
from acmachine.errors import DriverError
from acmachine.redact import register_secret
from acmachine.store import MachineNotFoundError, Store, default_storage_path

logger = logging.getLogger(__name__)

# Failures reported as "Error: ..." + exit 1 instead of a traceback
HANDLED_ERRORS = (DriverError, APIError, httpx.HTTPError, MachineNotFoundError, ValueError, OSError)

_VALID_NAME = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9\-.]*$")


def validate_machine_name(name):
    if not _VALID_NAME.match(name):
        raise ValueError(f"Invalid machine name '{name}': use letters, digits, '-' and '.', starting with a letter or digit")
    return name


def get_store(args):
    return Store(args.storage_path or default_storage_path())


def register_driver_secrets(driver):
    for attr in ("password", "admin_password"):
        register_secret(getattr(driver, attr, ""))


def load_machine(args):
    """Load the machine named by ``args.name`` from the store."""
    driver = get_store(args).load(args.name)
    register_driver_secrets(driver)
    return driver


def fail(err):
    logger.error(f"Error: {err}")
    sys.exit(1)
