"""Error taxonomy shared by the repository, service and API layers."""


class TransitAnalyticsError(Exception):
    """Base class for all domain errors; `code` identifies the error kind."""

    code = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgumentError(TransitAnalyticsError):
    """Raised when inbound input is malformed or out of policy."""

    code = "invalid_argument"


class NotFoundError(TransitAnalyticsError):
    """Raised when a referenced line, station or incident does not exist."""

    code = "not_found"


class StoreError(TransitAnalyticsError):
    """Raised when the relational store fails (connectivity, constraints, timeouts)."""

    code = "internal"
