"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each subclass carries a ``kind`` naming the failure category for callers
that need to branch on it without importing the concrete type.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "DomainError"


class ValidationError(DomainException):
    """A malformed or out-of-range argument, or a broken business rule."""

    kind = "InvalidInput"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "NotFound"


class BatchNotActiveError(DomainException):
    """The batch is deactivated or expired where activity is required."""

    kind = "BatchNotActive"


class InsufficientBatchQuantityError(DomainException):
    """Allocating or adjusting would exceed the batch's declared quantity."""

    kind = "InsufficientBatchQuantity"


class InsufficientStockError(DomainException):
    """A transfer asks for more units than the source allocation holds."""

    kind = "InsufficientStock"


class SameBranchError(DomainException):
    """Transfer source and destination are the same branch."""

    kind = "SameBranch"


class AllocationConflictError(DomainException):
    """A change would invalidate, or is blocked by, existing allocations."""

    kind = "AllocationConflict"
