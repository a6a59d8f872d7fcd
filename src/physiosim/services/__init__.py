from .accounts import AccountService, AuthError, DuplicateAccountError
from .characters import CharacterService, DuplicateCharacterError
from .credentials import AccountNotFoundError, CredentialStore
from .password import (
    DecodeError,
    InvalidSecret,
    WeakRecordRejected,
    hash_password,
    needs_rehash,
    verify_password,
)
from .patients import PatientService
from .vitals import VitalService

__all__ = [
    "AccountNotFoundError",
    "AccountService",
    "AuthError",
    "CharacterService",
    "CredentialStore",
    "DecodeError",
    "DuplicateAccountError",
    "DuplicateCharacterError",
    "InvalidSecret",
    "PatientService",
    "VitalService",
    "WeakRecordRejected",
    "hash_password",
    "needs_rehash",
    "verify_password",
]
