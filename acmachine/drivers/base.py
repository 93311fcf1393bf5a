"""Driver plumbing shared by all machine drivers: state, flags, options, base fields."""

import enum
import os
from dataclasses import dataclass, field

from acmachine.errors import DriverError


class State(enum.Enum):
    UNKNOWN = "Unknown"
    RUNNING = "Running"
    SAVED = "Saved"
    STOPPED = "Stopped"
    STARTING = "Starting"

    def __str__(self):
        return self.value


# ── Flags ──────────────────────────────────────────────────────────


@dataclass
class StringFlag:
    name: str
    usage: str
    value: str = ""
    env_var: str = ""

    def convert(self, raw):
        return "" if raw is None else str(raw)


@dataclass
class BoolFlag:
    name: str
    usage: str
    value: bool = False
    env_var: str = ""

    def convert(self, raw):
        if isinstance(raw, str):
            return raw.strip().lower() in ("1", "true", "yes", "on")
        return bool(raw)


class DriverOptions:
    """Resolved create-flag values handed to ``Driver.set_config_from_flags``.

    Unknown names fall back to the flag default, or to the type's zero value
    when the driver never declared the flag.
    """

    def __init__(self, values, create_flags=()):
        self._values = dict(values)
        self._flags = {f.name: f for f in create_flags}

    def _get(self, key, zero):
        if key in self._values and self._values[key] is not None:
            raw = self._values[key]
        elif key in self._flags:
            raw = self._flags[key].value
        else:
            return zero
        flag = self._flags.get(key)
        return flag.convert(raw) if flag else raw

    def string(self, key):
        return self._get(key, "")

    def int(self, key):
        return self._get(key, 0)

    def bool(self, key):
        return self._get(key, False)


# ── Base driver ────────────────────────────────────────────────────


@dataclass
class BaseDriver:
    """Fields every driver carries; persisted with the machine."""

    machine_name: str = ""
    store_path: str = ""
    ip_address: str = ""
    ssh_user: str = "root"
    ssh_port: int = 22
    ssh_key_path: str = ""
    _client: object = field(default=None, repr=False, compare=False)

    def get_ip(self):
        if not self.ip_address:
            raise DriverError("IP address is not set")
        return self.ip_address

    def get_ssh_key_path(self):
        if not self.ssh_key_path:
            self.ssh_key_path = self.resolve_store_path("id_rsa")
        return self.ssh_key_path

    def get_ssh_port(self):
        return self.ssh_port or 22

    def get_ssh_username(self):
        return self.ssh_user or "root"

    def resolve_store_path(self, filename):
        return os.path.join(self.store_path, "machines", self.machine_name, filename)

    def pre_create_check(self):
        pass

    def close(self):
        """Release the API client, if one was opened."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
