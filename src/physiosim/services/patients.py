from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from physiosim.db import CareAssignment, Patient
from physiosim.schemas import PatientCreate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatientService:
    session: Session

    def create(self, data: PatientCreate) -> Patient:
        patient = Patient(mrn=data.mrn, name=data.name, birth_date=data.birth_date, sex=data.sex)
        self.session.add(patient)
        self.session.commit()
        self.session.refresh(patient)
        logger.info("Created patient id=%s", patient.id)
        return patient

    def get(self, patient_id: int) -> Patient | None:
        return self.session.get(Patient, int(patient_id))

    def list_all(self) -> list[Patient]:
        return list(self.session.execute(select(Patient).order_by(Patient.id)).scalars())

    def delete(self, patient_id: int) -> bool:
        """Delete a patient; characters, vitals and care assignments cascade."""
        patient = self.get(patient_id)
        if patient is None:
            return False
        self.session.delete(patient)
        self.session.commit()
        logger.info("Deleted patient id=%s", patient_id)
        return True

    def assign(self, *, user_id: int, patient_id: int, role_in_care: str | None = None) -> CareAssignment:
        """Grant `user_id` access to `patient_id`; re-assigning updates the care role."""
        assignment = self.session.get(CareAssignment, (int(user_id), int(patient_id)))
        if assignment is None:
            assignment = CareAssignment(user_id=int(user_id), patient_id=int(patient_id))
            self.session.add(assignment)
        assignment.role_in_care = role_in_care
        self.session.commit()
        self.session.refresh(assignment)
        return assignment

    def list_for_user(self, user_id: int) -> list[Patient]:
        stmt = (
            select(Patient)
            .join(CareAssignment, CareAssignment.patient_id == Patient.id)
            .where(CareAssignment.user_id == int(user_id))
            .order_by(Patient.id)
        )
        return list(self.session.execute(stmt).scalars())
