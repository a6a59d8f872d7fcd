"""Create users, patients, care_assignments, encounters, characters and vitals tables.

Revision ID: 0001_create_schema
Revises: None
Create Date: 2025-11-03
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_create_schema"
down_revision = None
branch_labels = None
depends_on = None

SCHEMA_VERSION = 1


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=64, collation="NOCASE"), nullable=False, unique=True),
        sa.Column("email", sa.String(length=256, collation="NOCASE"), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column(
            "role",
            sa.Enum(
                "CLINICIAN",
                "ADMIN",
                "RESEARCHER",
                "PATIENT",
                name="user_role",
                native_enum=False,
                create_constraint=True,
            ),
            nullable=False,
            server_default="CLINICIAN",
        ),
        sa.Column("clinician_no", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "ux_users_clinician_no",
        "users",
        ["clinician_no"],
        unique=True,
        sqlite_where=sa.text("role = 'CLINICIAN'"),
    )

    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("mrn", sa.String(length=64), nullable=True),
        sa.Column("name", sa.String(length=128), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column(
            "sex",
            sa.Enum("M", "F", name="patient_sex", native_enum=False, create_constraint=True),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "care_assignments",
        sa.Column(
            "user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column(
            "patient_id",
            sa.Integer(),
            sa.ForeignKey("patients.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("role_in_care", sa.String(length=32), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "encounters",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "patient_id",
            sa.Integer(),
            sa.ForeignKey("patients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(length=16), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
    )
    op.create_index("idx_enc_patient_time", "encounters", ["patient_id", "started_at"])

    op.create_table(
        "characters",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "patient_id",
            sa.Integer(),
            sa.ForeignKey("patients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "created_by_user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column(
            "sex",
            sa.Enum("M", "F", name="character_sex", native_enum=False, create_constraint=True),
            nullable=True,
        ),
        sa.Column("height_cm", sa.Float(), nullable=True),
        sa.Column("weight_kg", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("patient_id", "name", name="ux_char_patient_name"),
    )
    op.create_index("ix_characters_patient_id", "characters", ["patient_id"])
    op.create_index("ix_characters_created_by_user_id", "characters", ["created_by_user_id"])

    op.create_table(
        "vitals",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "character_id",
            sa.Integer(),
            sa.ForeignKey("characters.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("hr", sa.Integer(), nullable=True),
        sa.Column("sbp", sa.Float(), nullable=True),
        sa.Column("dbp", sa.Float(), nullable=True),
        sa.Column("map", sa.Float(), nullable=True),
        sa.Column("rr", sa.Integer(), nullable=True),
        sa.Column("spo2", sa.Float(), nullable=True),
        sa.Column("glucose", sa.Float(), nullable=True),
        sa.Column("temp", sa.Float(), nullable=True),
        sa.Column("recorded_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("hr IS NULL OR hr BETWEEN 20 AND 260", name="ck_vitals_hr"),
        sa.CheckConstraint("rr IS NULL OR rr BETWEEN 2 AND 80", name="ck_vitals_rr"),
        sa.CheckConstraint("spo2 IS NULL OR spo2 BETWEEN 0 AND 100", name="ck_vitals_spo2"),
        sa.CheckConstraint("temp IS NULL OR temp BETWEEN 25.0 AND 45.0", name="ck_vitals_temp"),
    )
    op.create_index("ix_vitals_character_id", "vitals", ["character_id"])
    op.create_index("ix_vitals_recorded_at", "vitals", ["recorded_at"])

    schema_version = op.create_table(
        "schema_version",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("applied_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.bulk_insert(schema_version, [{"version": SCHEMA_VERSION}])


def downgrade() -> None:
    op.drop_table("schema_version")
    op.drop_index("ix_vitals_recorded_at", table_name="vitals")
    op.drop_index("ix_vitals_character_id", table_name="vitals")
    op.drop_table("vitals")
    op.drop_index("ix_characters_created_by_user_id", table_name="characters")
    op.drop_index("ix_characters_patient_id", table_name="characters")
    op.drop_table("characters")
    op.drop_index("idx_enc_patient_time", table_name="encounters")
    op.drop_table("encounters")
    op.drop_table("care_assignments")
    op.drop_table("patients")
    op.drop_index("ux_users_clinician_no", table_name="users")
    op.drop_table("users")
