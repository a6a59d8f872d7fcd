from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from physiosim.db.models import Sex, UserRole

Username = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")
]
Email = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_lower=True, max_length=256, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$"),
]
ClinicianNumber = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


class AccountCreate(BaseModel):
    # Never echo the password back in reprs or error payloads.
    model_config = ConfigDict(hide_input_in_errors=True)

    username: Username
    email: Email
    password: str = Field(repr=False)
    role: UserRole = UserRole.CLINICIAN
    clinician_no: ClinicianNumber | None = None

    @model_validator(mode="after")
    def _clinician_no_only_for_clinicians(self) -> "AccountCreate":
        if self.clinician_no is not None and self.role != UserRole.CLINICIAN:
            raise ValueError("Only clinician accounts may carry a clinician number.")
        return self


class PatientCreate(BaseModel):
    mrn: Annotated[str, StringConstraints(strip_whitespace=True, max_length=64)] | None = None
    name: Annotated[str, StringConstraints(strip_whitespace=True, max_length=128)] | None = None
    birth_date: date | None = None
    sex: Sex | None = None


class CharacterCreate(BaseModel):
    patient_id: int
    created_by_user_id: int
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]
    sex: Sex | None = None
    height_cm: float | None = Field(default=None, gt=0, le=300)
    weight_kg: float | None = Field(default=None, gt=0, le=700)


class VitalSigns(BaseModel):
    """A single set of readings. Ranges mirror the `vitals` table CHECK constraints."""

    hr: int | None = Field(default=None, ge=20, le=260)
    sbp: float | None = None
    dbp: float | None = None
    map: float | None = None
    rr: int | None = Field(default=None, ge=2, le=80)
    spo2: float | None = Field(default=None, ge=0, le=100)
    glucose: float | None = None
    temp: float | None = Field(default=None, ge=25.0, le=45.0)
