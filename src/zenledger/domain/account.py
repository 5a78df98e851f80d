"""Account registry domain service."""

from typing import Optional

import structlog

from zenledger.database.base import Database
from zenledger.domain import errors
from zenledger.domain.entities import Account, AccountNode, AccountType

logger = structlog.get_logger(__name__)


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_account(
        self, name: str, account_type: AccountType | str, parent_id: Optional[int] = None
    ) -> Account:
        """Create a new account.

        Args:
            name: Account name, unique ignoring case
            account_type: Accounting category
            parent_id: Optional parent account ID

        Returns:
            The created account

        Raises:
            ValidationError: If the name is blank or the type unknown
            DuplicateNameError: If an account with the same name exists
            InvalidParentError: If parent_id does not resolve
        """
        name = self._clean_name(name)
        account_type = self._coerce_type(account_type)

        if self.db.get_account_by_name(name) is not None:
            raise errors.DuplicateNameError(errors.duplicate_account_name(name))

        if parent_id is not None and self.db.get_account(parent_id) is None:
            raise errors.InvalidParentError(f"Parent account {parent_id} not found")

        account_id = self.db.create_account(name=name, account_type=account_type, parent_id=parent_id)
        logger.info("account_created", account_id=account_id, name=name, type=account_type.value)
        return self.db.get_account(account_id)

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[AccountType | str] = None,
        parent_id: Optional[int] = None,
        clear_parent: bool = False,
    ) -> None:
        """Update an account.

        Changing the type does not touch history; balances are derived from
        journal lines and follow the account's current type.

        Args:
            account_id: Account ID to update
            name: Optional new name
            account_type: Optional new type
            parent_id: Optional new parent account ID
            clear_parent: If True, make the account a root account

        Raises:
            NotFoundError: If the account does not exist
            DuplicateNameError: If another account already has the name
            InvalidParentError: If the parent is missing or would create a cycle
        """
        if self.db.get_account(account_id) is None:
            raise errors.NotFoundError(errors.account_not_found(account_id))

        if clear_parent and parent_id is not None:
            raise errors.ValidationError("Cannot set both parent_id and clear_parent")

        if name is not None:
            name = self._clean_name(name)
            existing = self.db.get_account_by_name(name)
            if existing is not None and existing.id != account_id:
                raise errors.DuplicateNameError(errors.duplicate_account_name(name))

        if account_type is not None:
            account_type = self._coerce_type(account_type)

        if parent_id is not None:
            self._check_parent(account_id, parent_id)

        self.db.update_account(
            account_id=account_id,
            name=name,
            account_type=account_type,
            parent_id=parent_id,
            update_parent=clear_parent,
        )

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        The child, journal and favorite checks run inside the same database
        transaction as the delete.

        Raises:
            NotFoundError: If the account does not exist
            HasChildrenError: If the account has sub-accounts
            InUseError: If journal lines or favorites reference the account
        """
        self.db.delete_account(account_id)
        logger.info("account_deleted", account_id=account_id)

    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name, ignoring case."""
        return self.db.get_account_by_name(name)

    def require_account(self, account_id: int) -> Account:
        """Get account by ID or raise InvalidAccountError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise errors.InvalidAccountError(errors.account_not_found(account_id))
        return account

    def list_accounts(self) -> list[Account]:
        """List all accounts in insertion order."""
        return self.db.list_accounts()

    def build_tree(self) -> list[AccountNode]:
        """Build the account forest.

        Returns:
            Root account nodes, each carrying its children in insertion order
        """
        return build_account_tree(self.db.list_accounts())

    def ancestors(self, account_id: int) -> list[Account]:
        """Return the chain of parents of an account, nearest first."""
        by_id = {acc.id: acc for acc in self.db.list_accounts()}
        chain = []
        seen = {account_id}
        current = by_id.get(account_id)
        while current is not None and current.parent_id is not None:
            if current.parent_id in seen:
                break
            seen.add(current.parent_id)
            current = by_id.get(current.parent_id)
            if current is not None:
                chain.append(current)
        return chain

    def _check_parent(self, account_id: int, parent_id: int) -> None:
        if parent_id == account_id:
            raise errors.InvalidParentError("An account cannot be its own parent")
        if self.db.get_account(parent_id) is None:
            raise errors.InvalidParentError(f"Parent account {parent_id} not found")
        if any(acc.id == account_id for acc in self.ancestors(parent_id)):
            raise errors.InvalidParentError(
                f"Account {parent_id} is a descendant of account {account_id}; "
                "moving it there would create a cycle"
            )

    @staticmethod
    def _clean_name(name: str) -> str:
        if name is None or not name.strip():
            raise errors.ValidationError("Account name is required")
        return name.strip()

    @staticmethod
    def _coerce_type(account_type: AccountType | str) -> AccountType:
        if isinstance(account_type, AccountType):
            return account_type
        for candidate in AccountType:
            if candidate.value.lower() == str(account_type).strip().lower():
                return candidate
        valid = ", ".join(t.value for t in AccountType)
        raise errors.ValidationError(
            f"Unknown account type '{account_type}'. Valid types: {valid}"
        )


def build_account_tree(accounts: list[Account]) -> list[AccountNode]:
    """Group accounts into a forest with one pass over an id -> children map.

    Accounts whose parent is missing are treated as roots.
    """
    nodes = {acc.id: AccountNode(account=acc) for acc in sorted(accounts, key=lambda a: a.id)}
    roots = []
    for node in nodes.values():
        parent = nodes.get(node.account.parent_id) if node.account.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots
