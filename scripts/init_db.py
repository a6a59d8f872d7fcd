#!/usr/bin/env python3
"""Create or upgrade the PhysioSim database schema (alembic upgrade head)."""
from __future__ import annotations

import os
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

repo_root = Path(__file__).resolve().parents[1]
src_dir = repo_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from physiosim.config import get_settings  # noqa: E402


def main() -> int:
    os.chdir(repo_root)

    cfg = Config(str(repo_root / "alembic.ini"))
    cfg.set_main_option("prepend_sys_path", str(src_dir))

    database_url = os.getenv("PHYSIOSIM_DATABASE_URL") or get_settings().database_url
    command.upgrade(cfg, "head")
    print(f"Database ready at {database_url} (alembic upgrade head).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
