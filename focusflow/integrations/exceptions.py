"""
Integration-specific exceptions.
"""


class IntegrationError(Exception):
    """Base exception for external data sources."""
    pass


class IntegrationNotConfiguredError(IntegrationError):
    """Credentials for the integration are missing."""
    pass


class ExternalAPIError(IntegrationError):
    """The external API returned an error or an unusable response."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code
