"""Domain error types."""


class IntakeTrackerError(Exception):
    """Base class for errors raised by the intake tracker."""


class NotFoundError(IntakeTrackerError):
    """Raised when an intake, template, or food does not exist."""


class ValidationError(IntakeTrackerError):
    """Raised when a request cannot be applied to the current data."""


class UpstreamUnavailableError(IntakeTrackerError):
    """Raised when the food catalog cannot be reached."""


class ConfigurationError(IntakeTrackerError):
    """Raised when the deployment is missing a required component.

    Not a user error: callers should let it propagate.
    """
