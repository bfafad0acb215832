"""Custom exception classes for the result registry."""


class QResultsError(Exception):
    """Base class for qresults exceptions."""


class DuplicateNameError(QResultsError):
    """Raised when a module or test name is already taken in its scope."""

    def __init__(self, name: str, scope: str) -> None:
        self.name = name
        self.scope = scope
        super().__init__(f"A {scope} named '{name}' already exists.")


class NotFoundError(QResultsError):
    """Raised when a released test cannot be resolved by name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"The test '{name}' does not exist.")


class UnknownEventError(QResultsError):
    """Raised when a replayed notification has an unknown event name."""


class InvalidEventError(QResultsError):
    """Raised when a notification is invoked with the wrong arguments."""
