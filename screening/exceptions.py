"""Exceptions raised by the screening engine."""


class ScreeningError(Exception):
    """Base class for all screening faults."""


class InvalidCatalogError(ScreeningError, ValueError):
    """Catalog is empty, cannot be totally ordered, or has duplicate ids."""


class InvalidAgeError(ScreeningError, ValueError):
    """Chronological age is missing, non-numeric or out of range."""


class InvalidResponseError(ScreeningError, ValueError):
    """Answer is not one of yes / sometimes / not_yet."""


class UnknownMilestoneError(ScreeningError, ValueError):
    """Answers reference a milestone id that is not in the catalog."""


class SessionTerminatedError(ScreeningError):
    """An answer was submitted after the session had already finished."""


class SessionNotCompleteError(ScreeningError):
    """A session was handed to scoring before it terminated."""
