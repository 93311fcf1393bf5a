"""ArubaCloud driver: create and manage Smart/Pro cloud servers."""

import logging
import os
from dataclasses import dataclass, fields

from acmachine.api.client import ArubaCloudClient
from acmachine.api.models import (
    HYPERVISOR_PRO,
    HYPERVISOR_SMART,
    STATUS_CREATING,
    STATUS_ERROR,
    STATUS_RUNNING,
    STATUS_STOPPED,
)
from acmachine.drivers.base import BaseDriver, BoolFlag, DriverError, State, StringFlag
from acmachine.ssh import copy_ssh_key, generate_ssh_key, read_public_key
from acmachine.utils import wait_for_specific_or_error

logger = logging.getLogger(__name__)

DRIVER_NAME = "arubacloud"
DEFAULT_TEMPLATE = "ubuntu1604_x64_1_0"
DEFAULT_ENDPOINT = "dc1"
DEFAULT_SIZE = "Large"
DEFAULT_ACTION = "NewSmart"
DOCKER_PORT = 2376

ACTIONS = ("NewSmart", "NewPro", "Attach")

# Pro server hardware per size: (cpu, ram GB, disk GB)
PRO_SIZES = {
    "Small": (1, 1, 20),
    "Medium": (1, 2, 40),
    "Large": (2, 4, 80),
    "Extra Large": (4, 8, 160),
}
PRO_DEFAULT_SIZE = (1, 1, 20)

STATUS_TO_STATE = {
    STATUS_CREATING: State.STARTING,
    STATUS_STOPPED: State.STOPPED,
    STATUS_RUNNING: State.RUNNING,
    STATUS_ERROR: State.SAVED,
}

STATUS_MAX_ATTEMPTS = 10
STATUS_WAIT_INTERVAL = 60


@dataclass
class Driver(BaseDriver):
    username: str = ""
    password: str = ""
    admin_password: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    template_name: str = DEFAULT_TEMPLATE
    size: str = DEFAULT_SIZE
    action: str = DEFAULT_ACTION
    configure_ipv6: bool = False
    ssh_key: str = ""

    # internal ids
    server_id: int = 0
    server_name: str = ""

    # ── Configuration ──────────────────────────────────────────────

    def driver_name(self):
        return DRIVER_NAME

    def get_create_flags(self):
        """Flags recognized by 'create', with their env vars and defaults."""
        return [
            StringFlag(env_var="AC_USERNAME", name="ac_username", usage="ArubaCloud Username", value=""),
            StringFlag(env_var="AC_PASSWORD", name="ac_password", usage="ArubaCloud Password", value=""),
            StringFlag(env_var="AC_ADMIN_PASSWORD", name="ac_admin_password", usage="ArubaCloud Machine root password", value=""),
            StringFlag(
                env_var="AC_ENDPOINT", name="ac_endpoint", usage="ArubaCloud Endpoint name (dc1,dc2,dc3 etc.)", value=DEFAULT_ENDPOINT
            ),
            StringFlag(env_var="AC_TEMPLATE", name="ac_template", usage="ArubaCloud VM Template", value=DEFAULT_TEMPLATE),
            StringFlag(env_var="AC_SIZE", name="ac_size", usage="ArubaCloud Machine Size", value=DEFAULT_SIZE),
            StringFlag(
                env_var="AC_ACTION", name="ac_action", usage=f"ArubaCloud Action type ({', '.join(ACTIONS)})", value=DEFAULT_ACTION
            ),
            StringFlag(env_var="AC_IP", name="ac_ip", usage="Set this to use an already purchased Ip Address", value=""),
            StringFlag(env_var="AC_SSH_KEY", name="ac_ssh_key", usage="Absolute path of the ssh private key", value=""),
            BoolFlag(env_var="AC_IPV6", name="ac_ipv6", usage="Configure an IPv6 address for the ArubaCloud VM"),
        ]

    def set_config_from_flags(self, flags):
        self.username = flags.string("ac_username")
        self.password = flags.string("ac_password")
        self.admin_password = flags.string("ac_admin_password")
        self.template_name = flags.string("ac_template")
        self.size = flags.string("ac_size")
        self.endpoint = flags.string("ac_endpoint")
        self.ssh_key = flags.string("ac_ssh_key")
        self.action = flags.string("ac_action")
        self.ip_address = flags.string("ac_ip")
        self.configure_ipv6 = flags.bool("ac_ipv6")
        self.ssh_user = "root"

    def to_dict(self):
        """Serializable snapshot of the driver configuration and ids."""
        return {f.name: getattr(self, f.name) for f in fields(self) if not f.name.startswith("_")}

    @classmethod
    def from_dict(cls, data):
        known = {f.name for f in fields(cls) if not f.name.startswith("_")}
        return cls(**{k: v for k, v in data.items() if k in known})

    def get_client(self):
        """Return the API client for the configured endpoint, creating it on first use."""
        if self._client is None:
            self._client = ArubaCloudClient(self.endpoint, self.username, self.password)
        return self._client

    def pre_create_check(self):
        if self.action not in ACTIONS:
            raise DriverError(f"Unknown action '{self.action}' (expected one of: {', '.join(ACTIONS)})")
        if not self.username or not self.password:
            raise DriverError("ArubaCloud credentials required. Use --ac-username/--ac-password or set AC_USERNAME/AC_PASSWORD.")
        if self.action == "Attach":
            return

        hypervisor = HYPERVISOR_SMART if self.action == "NewSmart" else HYPERVISOR_PRO
        logger.debug(f"Validating template '{self.template_name}' (hypervisor {hypervisor})")
        self.get_client().get_template(self.template_name, hypervisor)

    # ── Create ─────────────────────────────────────────────────────

    def create(self):
        """Create (or attach to) the ArubaCloud server according to ``action``."""
        if self.action == "NewSmart":
            self._create_smart()
        elif self.action == "NewPro":
            self._create_pro()
        elif self.action == "Attach":
            self._attach()
        else:
            raise DriverError(f"Unknown action '{self.action}' (expected one of: {', '.join(ACTIONS)})")

    def _create_smart(self):
        client = self.get_client()
        key = self._create_key_pair()

        logger.debug(f"Get template {self.template_name}")
        template = client.get_template(self.template_name, HYPERVISOR_SMART)
        logger.debug(f"Template found with id: {template.id}")

        logger.debug(f"Get package {self.size}")
        package = client.get_preconfigured_package(self.size)
        logger.debug(f"Package found with id: {package.package_id}")

        logger.info(f"Creating ArubaCloud Smart server '{self.machine_name}'...")
        client.create_server_smart(
            self.machine_name,
            self.admin_password,
            package.package_id,
            template.id,
            key,
            self.configure_ipv6,
        )

        instance = self._wait_for_new_server()
        self.ip_address = instance.easy_cloud_ip_address.value
        if not self.ip_address:
            raise DriverError(f"No IP found for instance {instance.server_id}")
        logger.debug(f"IP address found for server {self.server_id}: {self.ip_address}")

    def _create_pro(self):
        client = self.get_client()
        key = self._create_key_pair()

        logger.debug(f"Get template {self.template_name}")
        template = client.get_template(self.template_name, HYPERVISOR_PRO)
        logger.debug(f"Template found with id: {template.id}")

        if self.ip_address:
            logger.debug(f"Get IP address {self.ip_address}")
            ip = client.get_purchased_ip_address(self.ip_address)
            logger.debug(f"IP address found with id: {ip.resource_id}")
        else:
            logger.info("Purchasing a new IP address...")
            ip = client.purchase_ip_address()
            logger.debug(f"IP address purchased with id: {ip.resource_id}")

        cpu, ram, disk = PRO_SIZES.get(self.size, PRO_DEFAULT_SIZE)
        logger.info(f"Creating ArubaCloud Pro server '{self.machine_name}' ({cpu} CPU, {ram} GB RAM, {disk} GB disk)...")
        client.create_server_pro(
            self.machine_name,
            self.admin_password,
            template.id,
            key,
            ip.resource_id,
            disk,
            cpu,
            ram,
            self.configure_ipv6,
        )

        instance = self._wait_for_new_server()
        self.ip_address = ip.value
        if not self.ip_address:
            raise DriverError(f"No IP found for instance {instance.server_id}")
        logger.debug(f"IP address found for server {self.server_id}: {self.ip_address}")

    def _attach(self):
        logger.info(f"Attaching machine '{self.machine_name}' at {self.ip_address}...")
        self._create_key_pair()
        self._wait_for_new_server()
        logger.debug(f"Attached to server {self.server_id} ({self.ip_address})")

    def _wait_for_new_server(self):
        """Resolve ``server_id`` by name, then wait for the server to be running."""
        client = self.get_client()
        logger.info("Waiting for the server to be ready...")
        self.server_id = self._find_server_id(self.machine_name)
        self.server_name = self.machine_name
        client.get_server(self.server_id)
        return self._wait_for_server_status(STATUS_RUNNING)

    def _find_server_id(self, name):
        # Last match wins: names are not unique on the provider side.
        server_id = 0
        for server in self.get_client().get_servers():
            logger.debug(f"Iterating server name: {server.name}")
            if server.name == name:
                server_id = server.server_id
        if server_id == 0:
            raise DriverError(f"No Server found with Name: {name}")
        logger.debug(f"Setting driver server_id to: {server_id}")
        return server_id

    def _wait_for_server_status(self, status):
        """Poll the server until it reports *status*; the error status aborts immediately."""
        client = self.get_client()
        result = {}

        def check():
            server = client.get_server(self.server_id)
            logger.debug(f"Machine {self.server_name or self.machine_name}: status {server.server_status}")
            if server.server_status == STATUS_ERROR:
                return True, DriverError("Instance creation failed. Instance is in ERROR state")
            if server.server_status == status:
                result["server"] = server
                return True, None
            return False, None

        wait_for_specific_or_error(check, STATUS_MAX_ATTEMPTS, STATUS_WAIT_INTERVAL)
        return result["server"]

    # ── SSH keys ───────────────────────────────────────────────────

    def _create_key_pair(self):
        """Import ``ssh_key`` or generate a new key pair; return the public key text."""
        keyfile = self.get_ssh_key_path()
        keypath = os.path.dirname(keyfile)
        logger.debug(f"keyfile: {keyfile}")
        os.makedirs(keypath, mode=0o700, exist_ok=True)

        if self.ssh_key:
            logger.debug(f"Importing key pair from {self.ssh_key}")
            copy_ssh_key(self.ssh_key, keyfile)
            copy_ssh_key(f"{self.ssh_key}.pub", f"{keyfile}.pub")
        else:
            logger.debug("Creating key pair...")
            generate_ssh_key(keyfile)

        return read_public_key(keyfile)

    # ── Lifecycle ──────────────────────────────────────────────────

    def get_ssh_hostname(self):
        return self.ip_address

    def get_url(self):
        if not self.ip_address:
            return ""
        host = f"[{self.ip_address}]" if ":" in self.ip_address else self.ip_address
        return f"tcp://{host}:{DOCKER_PORT}"

    def _require_server_id(self):
        if not self.server_id:
            raise DriverError(f"Machine '{self.machine_name}' has no ArubaCloud server id")

    def get_state(self):
        self._require_server_id()
        logger.debug(f"Get status for ArubaCloud server {self.server_id}")
        instance = self.get_client().get_server(self.server_id)
        logger.debug(f"ArubaCloud server {self.server_id}: status {instance.server_status}")
        return STATUS_TO_STATE.get(instance.server_status, State.UNKNOWN)

    def start(self):
        self._require_server_id()
        logger.info(f"Starting ArubaCloud server {self.server_id}...")
        self.get_client().start_server(self.server_id)

    def stop(self):
        logger.info(f"Stopping ArubaCloud server {self.server_id}...")
        if self.get_state() == State.RUNNING:
            self.get_client().stop_server(self.server_id)
            self._wait_for_server_status(STATUS_STOPPED)

    def restart(self):
        self._require_server_id()
        logger.info(f"Restarting ArubaCloud server {self.server_id}...")
        client = self.get_client()
        client.stop_server(self.server_id)
        self._wait_for_server_status(STATUS_STOPPED)
        client.start_server(self.server_id)
        self._wait_for_server_status(STATUS_RUNNING)

    def kill(self):
        logger.info(f"Killing ArubaCloud server {self.server_id}...")
        if self.get_state() == State.RUNNING:
            self.get_client().kill_server(self.server_id)
            self._wait_for_server_status(STATUS_STOPPED)

    def remove(self):
        if not self.server_id:
            logger.debug(f"Machine '{self.machine_name}' has no ArubaCloud server, nothing to delete")
            return
        logger.info(f"Deleting ArubaCloud server {self.server_id}...")
        client = self.get_client()
        if self.get_state() == State.RUNNING:
            client.stop_server(self.server_id)
            self._wait_for_server_status(STATUS_STOPPED)
        client.delete_server(self.server_id)
