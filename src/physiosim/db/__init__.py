from __future__ import annotations

from physiosim.db.engine import create_db_engine, get_engine, get_session
from physiosim.db.models import (
    Base,
    CareAssignment,
    Character,
    Encounter,
    Patient,
    SchemaVersion,
    Sex,
    User,
    UserRole,
    Vital,
)

__all__ = [
    "Base",
    "CareAssignment",
    "Character",
    "Encounter",
    "Patient",
    "SchemaVersion",
    "Sex",
    "User",
    "UserRole",
    "Vital",
    "create_db_engine",
    "get_engine",
    "get_session",
]
