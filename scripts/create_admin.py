#!/usr/bin/env python3
from __future__ import annotations

import getpass
import logging
import os
import sys
from pathlib import Path

from pydantic import ValidationError

repo_root = Path(__file__).resolve().parents[1]
src_dir = repo_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from physiosim.db import Base, UserRole, get_engine, get_session  # noqa: E402
from physiosim.schemas import AccountCreate  # noqa: E402
from physiosim.services import AccountService, DuplicateAccountError, InvalidSecret  # noqa: E402


def main() -> int:
    os.chdir(repo_root)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # Minimal bootstrap for a fresh install: create tables if migrations weren't run yet.
    Base.metadata.create_all(get_engine())

    session = get_session()
    try:
        accounts = AccountService(session)
        admins = accounts.list_accounts(role=UserRole.ADMIN)
        if admins:
            print(f"An admin already exists: {admins[0].username} ({admins[0].email})")
            resp = input("Create another admin? [y/N]: ").strip().lower()
            if resp != "y":
                return 0

        print("Create admin account")
        username = input("Username: ").strip()
        email = input("Email: ").strip()

        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Error: passwords do not match.")
            return 1

        try:
            data = AccountCreate(username=username, email=email, password=password, role=UserRole.ADMIN)
            admin = accounts.register(data)
        except ValidationError as exc:
            print(f"Error: {exc.errors()[0]['msg']}")
            return 1
        except (InvalidSecret, DuplicateAccountError) as exc:
            print(f"Error: {exc}")
            return 1

        print(f"Created admin: {admin.username}")
        return 0
    finally:
        session.close()


if __name__ == "__main__":
    raise SystemExit(main())
