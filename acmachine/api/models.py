"""Data types returned by the ArubaCloud API client."""

from dataclasses import dataclass, field

# ServerStatus values reported by GetServers / GetServerDetails
STATUS_CREATING = 1
STATUS_STOPPED = 2
STATUS_RUNNING = 3
STATUS_ERROR = 4

# HypervisorType values used to pick templates
HYPERVISOR_PRO = 2
HYPERVISOR_SMART = 4


@dataclass
class IpAddress:
    """A public IP address resource."""

    resource_id: int
    value: str
    server_id: int | None = None

    @classmethod
    def from_api(cls, data):
        if not data:
            return cls(resource_id=0, value="")
        return cls(
            resource_id=data.get("ResourceId") or 0,
            value=data.get("Value") or "",
            server_id=data.get("ServerId"),
        )


@dataclass
class Server:
    """A server as listed by GetServers or detailed by GetServerDetails."""

    server_id: int
    name: str
    server_status: int
    easy_cloud_ip_address: IpAddress = field(default_factory=lambda: IpAddress(resource_id=0, value=""))
    hypervisor_type: int | None = None

    @classmethod
    def from_api(cls, data):
        return cls(
            server_id=data.get("ServerId", 0),
            name=data.get("Name", ""),
            server_status=data.get("ServerStatus", 0),
            easy_cloud_ip_address=IpAddress.from_api(data.get("EasyCloudIPAddress")),
            hypervisor_type=data.get("HypervisorType"),
        )


@dataclass
class Template:
    """An OS template available on a hypervisor."""

    id: int
    name: str
    description: str = ""
    hypervisor_type: int | None = None

    @classmethod
    def from_api(cls, data, hypervisor_type=None):
        return cls(
            id=data.get("Id", 0),
            name=data.get("Name", ""),
            description=data.get("Description") or "",
            hypervisor_type=hypervisor_type,
        )


@dataclass
class Package:
    """A preconfigured Smart package (Small, Medium, Large, Extra Large)."""

    package_id: int
    descriptions: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data):
        return cls(
            package_id=data.get("PackageID", 0),
            descriptions=[d.get("Text", "") for d in data.get("Descriptions") or []],
        )

    def matches(self, size):
        """True if any localized description names *size* (case-insensitive)."""
        size = size.strip().lower()
        return any(d.strip().lower() == size for d in self.descriptions)
