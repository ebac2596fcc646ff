"""
Error taxonomy for the dashboard.

Infrastructure code catches third-party exceptions (botocore, OSError)
and re-raises one of these, so the layers above only ever deal with
domain errors. The HTTP layer decides how each one maps to a status code.
"""


class DashboardError(Exception):
    """Base class for all dashboard errors."""
    pass


class ConfigurationMissing(DashboardError):
    """
    Raised at startup when required configuration is absent.

    Carries every missing variable name so the operator can fix them
    all in one go instead of discovering them one restart at a time.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            f"Missing required environment variables: {', '.join(self.missing)}"
        )


class BackendUnavailable(DashboardError):
    """Raised when a listing or signing call to object storage fails."""
    pass


class InvalidArgument(DashboardError, ValueError):
    """Raised for client errors such as an empty object key."""
    pass


class PersistenceFailure(DashboardError):
    """Raised when the forwarding configuration cannot be written."""
    pass
