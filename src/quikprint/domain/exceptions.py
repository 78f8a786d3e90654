"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly and display
user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConflictError(DomainException):
    """The entity is not in the state the operation requires."""


class AccessDeniedError(DomainException):
    """The acting user does not own the entity."""


class AuthenticationError(DomainException):
    """An inbound message could not be authenticated."""


class UpstreamError(DomainException):
    """The payment gateway was unreachable or answered with an error.

    Nothing local has been mutated when this is raised, so the caller
    may simply retry.
    """

    retryable = True
