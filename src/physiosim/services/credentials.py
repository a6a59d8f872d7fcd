from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from physiosim.db import User


class AccountNotFoundError(LookupError):
    """Raised when an operation targets an account id that does not exist."""


@dataclass(frozen=True)
class CredentialStore:
    """Persists the encoded password hash for each account as an opaque string."""

    session: Session

    def save(self, account_id: int, password_hash: str) -> None:
        """Replace the account's stored record in a single committed statement."""
        result = self.session.execute(
            update(User)
            .where(User.id == int(account_id))
            .values(password_hash=password_hash)
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount == 0:
            self.session.rollback()
            raise AccountNotFoundError(f"No account with id {account_id}.")
        self.session.commit()

    def load(self, account_id: int) -> str | None:
        return self.session.execute(
            select(User.password_hash).where(User.id == int(account_id))
        ).scalar_one_or_none()
