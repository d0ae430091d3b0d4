"""Errors raised by the Cloudant client."""


class CloudantError(Exception):
    """Any failed Cloudant operation (transport, auth or API)."""


class CloudantConfigError(CloudantError):
    """Endpoint or credentials are missing; nothing was sent."""


class CloudantAPIError(CloudantError):
    """Cloudant answered with an error status."""

    def __init__(self, status_code: int, error: str, reason: str | None = None):
        self.status_code = status_code
        self.error = error
        self.reason = reason
        detail = f"{error}: {reason}" if reason else error
        super().__init__(f"{detail} (HTTP {status_code})")
