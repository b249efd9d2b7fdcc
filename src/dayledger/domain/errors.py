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


class LocalWriteFailure(DomainError):
    """The local durable cache could not store a record.

    Fatal to the save attempt that raised it. The caller still holds its
    in-memory form state and may retry.
    """


class RemoteSyncFailure(DomainError):
    """The remote record store could not be reached or rejected a call.

    Never fatal on the save path: the record stays pending and is retried.
    """


def category_not_found(item_name: str) -> str:
    """Return message for missing category by item name."""
    return f"Category for item '{item_name}' not found"


def duplicate_category(item_name: str) -> str:
    """Return message for an active duplicate item name."""
    return f"An active category for item '{item_name}' already exists"


def invalid_main_category(value: str) -> str:
    """Return message for an unknown main category."""
    return f"Unknown main category '{value}'. Expected 'Purchases' or 'Expenses'"


def record_not_found(inventory_date) -> str:
    """Return message for a missing daily record."""
    return f"No inventory record for {inventory_date}"


def local_write_failed(inventory_date, error: Exception) -> str:
    """Return message when the local cache rejected a write."""
    return f"Could not save {inventory_date} locally: {error}"
