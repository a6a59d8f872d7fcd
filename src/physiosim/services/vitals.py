from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from physiosim.db import Vital
from physiosim.schemas import VitalSigns


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite keeps no offset, so every stored time is UTC; naive input is taken as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class VitalService:
    """Time series of vital signs per character."""

    session: Session

    def record(self, character_id: int, signs: VitalSigns, *, recorded_at: datetime | None = None) -> Vital:
        vital = Vital(
            character_id=int(character_id),
            recorded_at=_as_utc(recorded_at) if recorded_at is not None else _utcnow(),
            **signs.model_dump(),
        )
        self.session.add(vital)
        self.session.commit()
        self.session.refresh(vital)
        return vital

    def latest(self, character_id: int) -> Vital | None:
        stmt = (
            select(Vital)
            .where(Vital.character_id == int(character_id))
            .order_by(Vital.recorded_at.desc(), Vital.id.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def history(self, character_id: int) -> list[Vital]:
        stmt = (
            select(Vital)
            .where(Vital.character_id == int(character_id))
            .order_by(Vital.recorded_at, Vital.id)
        )
        return list(self.session.execute(stmt).scalars())

    def between(self, character_id: int, start: datetime, end: datetime) -> list[Vital]:
        """Readings with `start <= recorded_at <= end`, oldest first."""
        stmt = (
            select(Vital)
            .where(
                Vital.character_id == int(character_id),
                Vital.recorded_at.between(_as_utc(start), _as_utc(end)),
            )
            .order_by(Vital.recorded_at, Vital.id)
        )
        return list(self.session.execute(stmt).scalars())
