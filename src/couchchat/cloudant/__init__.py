"""Cloudant REST client."""

from couchchat.cloudant.client import CloudantClient
from couchchat.cloudant.errors import CloudantAPIError, CloudantConfigError, CloudantError
from couchchat.cloudant.types import DatabaseInfo, ViewName, ViewRow

__all__ = [
    "CloudantAPIError",
    "CloudantClient",
    "CloudantConfigError",
    "CloudantError",
    "DatabaseInfo",
    "ViewName",
    "ViewRow",
]
