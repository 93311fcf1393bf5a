"""ArubaCloud API client: thin wrapper over the WsEndUser JSON service."""

import json
import logging

import httpx

from acmachine.api.models import HYPERVISOR_SMART, IpAddress, Package, Server, Template

logger = logging.getLogger(__name__)

API_VERSION = "v2.9"
DEFAULT_ENDPOINT = "dc1"
ENDPOINTS = {f"dc{n}": f"https://api.dc{n}.computing.cloud.it" for n in range(1, 9)}
REQUEST_TIMEOUT = 60


class APIError(RuntimeError):
    """The service answered with ``Success: false``."""

    def __init__(self, method, result_code, message):
        self.method = method
        self.result_code = result_code
        self.message = message or "unknown error"
        super().__init__(f"{method} failed (code {result_code}): {self.message}")


class NotFoundError(APIError):
    """A looked-up resource does not exist on the account."""

    def __init__(self, method, message):
        super().__init__(method, None, message)


def resolve_base_url(endpoint):
    """Map an endpoint name (dc1..dc8) or a full URL to the service base URL."""
    if endpoint.startswith(("http://", "https://")):
        return endpoint.rstrip("/")
    try:
        host = ENDPOINTS[endpoint.lower()]
    except KeyError:
        raise ValueError(f"Unknown ArubaCloud endpoint '{endpoint}' (expected one of: {', '.join(ENDPOINTS)})") from None
    return f"{host}/WsEndUser/{API_VERSION}/WsEndUser.svc/json"


class ArubaCloudClient:
    """Authenticated client for one ArubaCloud datacenter.

    Every call is a POST to ``<base>/<Method>`` whose body carries the account
    credentials alongside the method parameters. Responses are unwrapped to
    their ``Value`` member.
    """

    def __init__(self, endpoint, username, password, http_client=None):
        self.endpoint = endpoint
        self.base_url = resolve_base_url(endpoint)
        self.username = username
        self.password = password
        self._http = http_client or httpx.Client(timeout=REQUEST_TIMEOUT)

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ── Transport ──────────────────────────────────────────────────

    def _call(self, method, **params):
        url = f"{self.base_url}/{method}"
        payload = {
            "ApplicationId": method,
            "RequestId": method,
            "SessionId": method,
            "Username": self.username,
            "Password": self.password,
            **params,
        }
        logger.debug(f"POST {url} {json.dumps(params, default=str)}")

        resp = self._http.post(url, json=payload)
        resp.raise_for_status()
        body = resp.json()
        if not body.get("Success", False):
            raise APIError(method, body.get("ResultCode"), body.get("ResultMessage"))
        return body.get("Value")

    # ── Servers ────────────────────────────────────────────────────

    def get_servers(self):
        """List all servers on the account."""
        return [Server.from_api(s) for s in self._call("GetServers") or []]

    def get_server(self, server_id):
        """Fetch detailed info (status, addresses) for one server."""
        return Server.from_api(self._call("GetServerDetails", ServerId=server_id) or {})

    def create_server_smart(self, name, admin_password, package_id, template_id, ssh_key="", configure_ipv6=False):
        """Enqueue creation of a Smart server from a preconfigured package."""
        server = {
            "Name": name,
            "AdministratorPassword": admin_password,
            "SmartVMWarePackageID": package_id,
            "OSTemplateId": template_id,
            "Note": "Created by acmachine",
            "ConfigureIPv6": configure_ipv6,
        }
        if ssh_key:
            server["SshKey"] = ssh_key
            server["SshPasswordAuthAllowed"] = True
        return self._call("SetEnqueueServerCreation", Server=server)

    def create_server_pro(
        self,
        name,
        admin_password,
        template_id,
        ssh_key,
        ip_resource_id,
        disk_size,
        cpu_quantity,
        ram_quantity,
        configure_ipv6=False,
    ):
        """Enqueue creation of a Pro server with explicit hardware and a public IP."""
        server = {
            "Name": name,
            "AdministratorPassword": admin_password,
            "OSTemplateId": template_id,
            "CPUQuantity": cpu_quantity,
            "RAMQuantity": ram_quantity,
            "VirtualDisks": [{"Size": disk_size, "VirtualDiskType": 0}],
            "NetworkAdaptersConfiguration": [
                {
                    "NetworkAdapterType": 0,
                    "PublicIpAddresses": [{"PrimaryIPAddress": "true", "PublicIpAddressResourceId": ip_resource_id}],
                }
            ],
            "Note": "Created by acmachine",
            "ConfigureIPv6": configure_ipv6,
        }
        if ssh_key:
            server["SshKey"] = ssh_key
            server["SshPasswordAuthAllowed"] = True
        return self._call("SetEnqueueServerCreation", Server=server)

    def start_server(self, server_id):
        return self._call("SetEnqueueServerStart", ServerId=server_id)

    def stop_server(self, server_id):
        return self._call("SetEnqueueServerStop", ServerId=server_id)

    def kill_server(self, server_id):
        """Hard power-off, no guest shutdown."""
        return self._call("SetEnqueueServerPowerOff", ServerId=server_id)

    def delete_server(self, server_id):
        return self._call("SetEnqueueServerDeletion", ServerId=server_id)

    # ── Catalog ────────────────────────────────────────────────────

    def get_templates(self, hypervisor_type=None):
        """List templates, optionally restricted to one hypervisor type."""
        templates = []
        for hypervisor in self._call("GetHypervisors") or []:
            htype = hypervisor.get("HypervisorType")
            if hypervisor_type is not None and htype != hypervisor_type:
                continue
            templates.extend(Template.from_api(t, htype) for t in hypervisor.get("Templates") or [])
        return templates

    def get_template(self, name, hypervisor_type):
        """Find a template by name (or numeric id) on the given hypervisor.

        Raises:
            NotFoundError: no template matches.
        """
        for template in self.get_templates(hypervisor_type):
            if template.name == name or str(template.id) == str(name):
                return template
        raise NotFoundError("GetHypervisors", f"template '{name}' not found for hypervisor {hypervisor_type}")

    def get_preconfigured_package(self, size):
        """Find the Smart package whose description matches *size*.

        Raises:
            NotFoundError: no package matches.
        """
        packages = self._call("GetPreConfiguredPackages", HypervisorType=HYPERVISOR_SMART) or []
        for data in packages:
            package = Package.from_api(data)
            if package.matches(size):
                return package
        raise NotFoundError("GetPreConfiguredPackages", f"package '{size}' not found")

    # ── IP addresses ───────────────────────────────────────────────

    def get_purchased_ip_addresses(self):
        return [IpAddress.from_api(ip) for ip in self._call("GetPurchasedIpAddresses") or []]

    def get_purchased_ip_address(self, value):
        """Find an already purchased IP address by its dotted value.

        Raises:
            NotFoundError: the address is not owned by the account.
        """
        for ip in self.get_purchased_ip_addresses():
            if ip.value == value:
                return ip
        raise NotFoundError("GetPurchasedIpAddresses", f"ip address '{value}' not found")

    def purchase_ip_address(self):
        """Purchase a new public IP address."""
        return IpAddress.from_api(self._call("SetPurchaseIpAddress"))
