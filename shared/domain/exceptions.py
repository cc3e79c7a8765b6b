"""
Domain Exceptions

Every failure the domain reports to callers derives from DomainError.
Each kind carries a stable ``code`` that outer layers map to transport
responses, and a default human-readable message.
"""


class DomainError(Exception):
    """Base class for typed domain failures."""

    code = 'domain_error'
    default_message = 'The operation could not be completed.'
    # Only failures of the surrounding infrastructure may succeed when retried
    retryable = False

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRangeError(DomainError, ValueError):
    """Raised when a time range does not start strictly before it ends."""

    code = 'invalid_range'
    default_message = 'The end of the rental period must be after its start.'
