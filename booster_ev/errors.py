"""Exception types for Booster EV."""


class BoosterEVError(Exception):
    """Base class for all Booster EV errors."""


class DataUnavailableError(BoosterEVError):
    """A requested dataset document could not be loaded or parsed."""

    def __init__(self, resource: str, reason: str = ""):
        self.resource = resource
        self.reason = reason
        message = f"Missing file: {resource}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
