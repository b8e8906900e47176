"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InvalidTransferError(ValidationError):
    """Transfer rejected before any change was applied."""


def store_not_found(name: str) -> str:
    """Return message for missing store."""
    return f"Store '{name}' not found"


def group_not_found(name: str) -> str:
    """Return message for missing group."""
    return f"Group '{name}' not found"


def duplicate_store(name: str) -> str:
    """Return message for duplicate store name."""
    return f"Store '{name}' already exists"


def duplicate_group(name: str) -> str:
    """Return message for duplicate group name."""
    return f"Group '{name}' already exists"


def index_out_of_range(index: int, size: int) -> str:
    """Return message for a selection index outside the entry list."""
    return f"Index {index} is out of range (list has {size} entr{'ies' if size != 1 else 'y'})"


def transfer_not_found(transfer_id: int) -> str:
    """Return message for missing transfer."""
    return f"Transfer {transfer_id} not found"
