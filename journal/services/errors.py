"""Journal error taxonomy.

Every error is scoped to a single operation; the API layer maps each class
to an HTTP status in ``journal.main``.
"""


class JournalError(Exception):
    """Base class for failures surfaced to the user."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(JournalError):
    """Required input is missing or unusable."""

    status_code = 422


class ConfigurationError(JournalError):
    """A profile prerequisite is missing, e.g. no initial balance yet."""

    status_code = 409


class NotFoundError(JournalError):
    """The target record vanished between load and mutate."""

    status_code = 404


class StoreError(JournalError):
    """The database call failed for any other reason."""

    status_code = 503
