from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from physiosim.db import Character
from physiosim.schemas import CharacterCreate

logger = logging.getLogger(__name__)


class DuplicateCharacterError(ValueError):
    """Raised when a patient already has a character with the same name."""


@dataclass(frozen=True)
class CharacterService:
    session: Session

    def create(self, data: CharacterCreate) -> Character:
        character = Character(
            patient_id=data.patient_id,
            created_by_user_id=data.created_by_user_id,
            name=data.name,
            sex=data.sex,
            height_cm=data.height_cm,
            weight_kg=data.weight_kg,
        )
        self.session.add(character)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            exists = self.session.execute(
                select(Character.id).where(
                    Character.patient_id == data.patient_id,
                    Character.name == data.name,
                )
            ).first()
            if exists is not None:
                raise DuplicateCharacterError(
                    f"Patient {data.patient_id} already has a character named '{data.name}'."
                ) from exc
            # Unknown patient or creator (foreign key violation).
            raise
        self.session.refresh(character)
        logger.info("Created character id=%s for patient id=%s", character.id, character.patient_id)
        return character

    def get(self, character_id: int) -> Character | None:
        return self.session.get(Character, int(character_id))

    def list_for_patient(self, patient_id: int) -> list[Character]:
        stmt = (
            select(Character)
            .where(Character.patient_id == int(patient_id))
            .order_by(Character.created_at, Character.id)
        )
        return list(self.session.execute(stmt).scalars())

    def delete(self, character_id: int) -> bool:
        character = self.get(character_id)
        if character is None:
            return False
        self.session.delete(character)
        self.session.commit()
        logger.info("Deleted character id=%s", character_id)
        return True
