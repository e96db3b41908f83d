"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPayloadError(DomainException):
    """Harness payload could not be decoded into a profile document"""

    pass
