from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class UserRole(str, Enum):
    CLINICIAN = "CLINICIAN"
    ADMIN = "ADMIN"
    RESEARCHER = "RESEARCHER"
    PATIENT = "PATIENT"


class Sex(str, Enum):
    M = "M"
    F = "F"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        # Clinician numbers are unique among clinicians only.
        Index(
            "ux_users_clinician_no",
            "clinician_no",
            unique=True,
            sqlite_where=text("role = 'CLINICIAN'"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    username: Mapped[str] = mapped_column(String(64, collation="NOCASE"), unique=True)
    email: Mapped[str] = mapped_column(String(256, collation="NOCASE"), unique=True)
    # Opaque encoded credential record; only services.password interprets it.
    password_hash: Mapped[str] = mapped_column(String(256))

    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, native_enum=False, create_constraint=True, name="user_role"),
        default=UserRole.CLINICIAN,
        server_default=UserRole.CLINICIAN.value,
        nullable=False,
    )
    # License / staff number; NULL for non-clinical accounts
    clinician_no: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    care_assignments: Mapped[list["CareAssignment"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    characters: Mapped[list["Character"]] = relationship(
        back_populates="created_by",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Patient(Base):
    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Hospital medical record number, if known
    mrn: Mapped[str | None] = mapped_column(String(64), nullable=True)
    name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    sex: Mapped[Sex | None] = mapped_column(
        SAEnum(Sex, native_enum=False, create_constraint=True, name="patient_sex"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    care_assignments: Mapped[list["CareAssignment"]] = relationship(
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    encounters: Mapped[list["Encounter"]] = relationship(
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    characters: Mapped[list["Character"]] = relationship(
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class CareAssignment(Base):
    """Grants a user access to a patient."""

    __tablename__ = "care_assignments"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), primary_key=True
    )
    # e.g. "ATTENDING", "RESIDENT", "RN", "RESEARCH"
    role_in_care: Mapped[str | None] = mapped_column(String(32), nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user: Mapped["User"] = relationship(back_populates="care_assignments")
    patient: Mapped["Patient"] = relationship(back_populates="care_assignments")


class Encounter(Base):
    __tablename__ = "encounters"
    __table_args__ = (Index("idx_enc_patient_time", "patient_id", "started_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id", ondelete="CASCADE"))
    # e.g. "OPD", "IPD", "SIM", "ED"
    type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    patient: Mapped["Patient"] = relationship(back_populates="encounters")


class Character(Base):
    """A simulation snapshot of a patient (e.g. "baseline", "ICU-day1")."""

    __tablename__ = "characters"
    __table_args__ = (UniqueConstraint("patient_id", "name", name="ux_char_patient_name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), index=True
    )
    created_by_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(128))
    sex: Mapped[Sex | None] = mapped_column(
        SAEnum(Sex, native_enum=False, create_constraint=True, name="character_sex"),
        nullable=True,
    )
    height_cm: Mapped[float | None] = mapped_column(Float, nullable=True)
    weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    patient: Mapped["Patient"] = relationship(back_populates="characters")
    created_by: Mapped["User"] = relationship(back_populates="characters")
    vitals: Mapped[list["Vital"]] = relationship(
        back_populates="character",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Vital(Base):
    """One time-series measurement; every reading is optional."""

    __tablename__ = "vitals"
    __table_args__ = (
        CheckConstraint("hr IS NULL OR hr BETWEEN 20 AND 260", name="ck_vitals_hr"),
        CheckConstraint("rr IS NULL OR rr BETWEEN 2 AND 80", name="ck_vitals_rr"),
        CheckConstraint("spo2 IS NULL OR spo2 BETWEEN 0 AND 100", name="ck_vitals_spo2"),
        CheckConstraint("temp IS NULL OR temp BETWEEN 25.0 AND 45.0", name="ck_vitals_temp"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    character_id: Mapped[int] = mapped_column(
        ForeignKey("characters.id", ondelete="CASCADE"), index=True
    )

    hr: Mapped[int | None] = mapped_column(Integer, nullable=True)  # bpm
    sbp: Mapped[float | None] = mapped_column(Float, nullable=True)  # mmHg
    dbp: Mapped[float | None] = mapped_column(Float, nullable=True)  # mmHg
    map: Mapped[float | None] = mapped_column(Float, nullable=True)  # mmHg
    rr: Mapped[int | None] = mapped_column(Integer, nullable=True)  # breaths/min
    spo2: Mapped[float | None] = mapped_column(Float, nullable=True)  # %
    glucose: Mapped[float | None] = mapped_column(Float, nullable=True)  # mg/dL
    temp: Mapped[float | None] = mapped_column(Float, nullable=True)  # °C

    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )

    character: Mapped["Character"] = relationship(back_populates="vitals")


class SchemaVersion(Base):
    __tablename__ = "schema_version"

    # SQLite rowid; the table itself only tracks applied versions.
    id: Mapped[int] = mapped_column(primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    applied_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
