"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidEventDataError(DomainException):
    """Event amount or direction is malformed (negative, NaN, infinite)"""

    pass


class InvalidInputError(DomainException):
    """Non-event argument is outside its contract (negative horizon or window)"""

    pass


class EventSourceError(DomainException):
    """Event source returned an error or is unavailable"""

    pass
