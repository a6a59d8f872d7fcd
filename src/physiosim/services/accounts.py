from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from physiosim.db import User, UserRole
from physiosim.schemas import AccountCreate
from physiosim.services.credentials import AccountNotFoundError, CredentialStore
from physiosim.services.password import (
    dummy_password_hash,
    hash_password,
    needs_rehash,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthError(RuntimeError):
    """Authentication error with a user-friendly message."""


class DuplicateAccountError(ValueError):
    """Raised when a username, email or clinician number is already registered."""


_INVALID_LOGIN = "Invalid username or password."


@dataclass(frozen=True)
class AccountService:
    """Local accounts: registration, password login and credential lifecycle."""

    session: Session

    @property
    def credentials(self) -> CredentialStore:
        return CredentialStore(self.session)

    def register(self, data: AccountCreate) -> User:
        """Create an account. Raises `InvalidSecret` or `DuplicateAccountError`."""
        password_hash = hash_password(data.password)
        self._check_available(data)

        user = User(
            username=data.username,
            email=data.email,
            password_hash=password_hash,
            role=data.role,
            clinician_no=data.clinician_no,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateAccountError("Username, email or clinician number already registered.") from exc
        self.session.refresh(user)
        logger.info("Registered %s account id=%s username=%s", user.role.value, user.id, user.username)
        return user

    def _check_available(self, data: AccountCreate) -> None:
        # Username/email columns are NOCASE, so equality here is case-insensitive.
        if self.find_by_username(data.username) is not None:
            raise DuplicateAccountError(f"Username '{data.username}' is already taken.")
        if self.session.execute(select(User.id).where(User.email == data.email)).first() is not None:
            raise DuplicateAccountError(f"Email '{data.email}' is already registered.")
        if data.clinician_no is not None:
            taken = self.session.execute(
                select(User.id).where(
                    User.role == UserRole.CLINICIAN,
                    User.clinician_no == data.clinician_no,
                )
            ).first()
            if taken is not None:
                raise DuplicateAccountError(f"Clinician number '{data.clinician_no}' is already registered.")

    def authenticate(self, *, username: str, password: str) -> User:
        """Return the account matching the credentials, or raise `AuthError`."""
        username = (username or "").strip()
        if not username or not password:
            raise AuthError(_INVALID_LOGIN)

        user = self.find_by_username(username)
        if user is None:
            # Same derivation cost as a real check to reduce user enumeration signal.
            verify_password(password, dummy_password_hash())
            logger.warning("Failed login for unknown username=%s", username)
            raise AuthError(_INVALID_LOGIN)

        if not verify_password(password, user.password_hash):
            logger.warning("Failed login for account id=%s", user.id)
            raise AuthError(_INVALID_LOGIN)

        if needs_rehash(user.password_hash):
            self.credentials.save(user.id, hash_password(password))
            self.session.refresh(user)
            logger.info("Upgraded password hash for account id=%s", user.id)
        return user

    def change_password(self, account_id: int, *, current_password: str, new_password: str) -> None:
        user = self._require(account_id)
        if not verify_password(current_password, user.password_hash):
            raise AuthError("Current password is incorrect.")
        self.credentials.save(user.id, hash_password(new_password))
        self.session.refresh(user)
        logger.info("Password changed for account id=%s", user.id)

    def reset_password(self, account_id: int, *, new_password: str) -> None:
        """Administrative reset; does not require the current password."""
        user = self._require(account_id)
        self.credentials.save(user.id, hash_password(new_password))
        self.session.refresh(user)
        logger.info("Password reset for account id=%s", user.id)

    def get(self, account_id: int) -> User | None:
        return self.session.get(User, int(account_id))

    def _require(self, account_id: int) -> User:
        user = self.get(account_id)
        if user is None:
            raise AccountNotFoundError(f"No account with id {account_id}.")
        return user

    def find_by_username(self, username: str) -> User | None:
        return self.session.execute(
            select(User).where(User.username == username.strip())
        ).scalar_one_or_none()

    def list_accounts(self, role: UserRole | None = None) -> list[User]:
        stmt = select(User).order_by(User.id)
        if role is not None:
            stmt = stmt.where(User.role == role)
        return list(self.session.execute(stmt).scalars())

    def delete(self, account_id: int) -> bool:
        """Delete the account and, with it, its stored credential."""
        user = self.get(account_id)
        if user is None:
            return False
        self.session.delete(user)
        self.session.commit()
        logger.info("Deleted account id=%s", account_id)
        return True
