from physiosim.schemas.records import (
    AccountCreate,
    CharacterCreate,
    PatientCreate,
    VitalSigns,
)

__all__ = ["AccountCreate", "CharacterCreate", "PatientCreate", "VitalSigns"]
