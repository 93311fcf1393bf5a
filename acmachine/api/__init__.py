"""ArubaCloud API: client and data types."""

from acmachine.api.client import APIError, ArubaCloudClient, NotFoundError
from acmachine.api.models import IpAddress, Package, Server, Template

__all__ = [
    "ArubaCloudClient",
    "APIError",
    "NotFoundError",
    "Server",
    "Template",
    "Package",
    "IpAddress",
]
