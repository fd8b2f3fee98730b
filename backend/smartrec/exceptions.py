"""Engine exception hierarchy. Subclasses of EngineError carry their HTTP status."""


class EngineError(Exception):
    status_code = 500


class InvalidRequestError(EngineError):
    """Missing identifiers or an unrecognized action."""

    status_code = 400


class NotAuthenticatedError(EngineError):
    """The action needs a user and none could be resolved."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class PropertyNotFoundError(LookupError):
    """Referenced listing does not exist. Deliberately not an EngineError: surfaces as a 500."""
