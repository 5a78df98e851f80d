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


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class DuplicateNameError(ConflictError):
    """An account or favorite with the same name already exists."""


class DuplicateCodeError(ConflictError):
    """A currency with the same code already exists."""


class InvalidParentError(ValidationError):
    """Parent account is missing or would create a cycle."""


class InvalidAccountError(NotFoundError):
    """A referenced account does not exist."""


class HasChildrenError(DependencyError):
    """Account still has sub-accounts."""


class InUseError(DependencyError):
    """Account is referenced by journal entries or favorites."""


class CannotDeleteDefaultError(DependencyError):
    """The default currency cannot be deleted."""


class UnbalancedEntryError(ValidationError):
    """Journal entry lines are malformed or debits do not equal credits."""


class IncompleteTemplateError(ValidationError):
    """Favorite template lacks the account reference its type requires."""


class ImportFormatError(ValidationError):
    """Backup data is not in the expected format."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def currency_not_found(currency_id: int) -> str:
    """Return message for missing currency."""
    return f"Currency {currency_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def favorite_not_found(favorite: int | str) -> str:
    """Return message for missing favorite by ID or name."""
    if isinstance(favorite, int):
        return f"Favorite {favorite} not found"
    return f"Favorite '{favorite}' not found"


def duplicate_account_name(name: str) -> str:
    return f"An account with the name '{name}' already exists"


def duplicate_favorite_name(name: str) -> str:
    return f"A favorite with the name '{name}' already exists"


def duplicate_currency_code(code: str) -> str:
    return f"A currency with the code '{code}' already exists"


def account_delete_blocked(
    account_id: int, entry_count: int, favorite_count: int
) -> str:
    """Return message when account is used by entries or favorites."""
    parts = []
    if entry_count > 0:
        parts.append(f"{entry_count} journal entr{'ies' if entry_count != 1 else 'y'}")
    if favorite_count > 0:
        parts.append(
            f"{favorite_count} favorite transaction{'s' if favorite_count != 1 else ''}"
        )
    return f"Cannot delete account {account_id}: it is used in {' and '.join(parts)}."


def account_has_children(account_id: int, child_count: int) -> str:
    """Return message when account still has sub-accounts."""
    return (
        f"Cannot delete account {account_id}: it has {child_count} "
        f"sub-account{'s' if child_count != 1 else ''} linked to it."
    )
