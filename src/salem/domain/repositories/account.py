"""Account repository protocol."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from ...models.account import Account


class AccountRepository(Protocol):
    """Bank accounts of a single owner; foreign rows behave as missing."""

    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[Account]: ...

    def list_all(self, *, user_id: int) -> list[Account]:
        """Accounts, newest first."""
        ...

    def create(self, account: Account, *, user_id: int) -> Account: ...

    def update(self, account_id: int, changes: Mapping[str, Any], *, user_id: int) -> Optional[Account]:
        """Apply ``changes`` and return the account, or ``None`` when not found."""
        ...

    def delete(self, account_id: int, *, user_id: int) -> bool:
        """Return whether a row was removed."""
        ...
