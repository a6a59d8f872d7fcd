from __future__ import annotations

import base64
import binascii
import hashlib
import secrets
from dataclasses import dataclass

SCHEME = "pbkdf2"
DEFAULT_ITERATIONS = 120_000
MIN_ACCEPTED_ITERATIONS = 50_000
MAX_ACCEPTED_ITERATIONS = 10_000_000
SALT_BYTES = 16
KEY_BYTES = 32
MIN_PASSWORD_LENGTH = 8

_HASH_NAME = "sha256"
_SEPARATOR = "$"


class InvalidSecret(ValueError):
    """Raised when a password does not meet the hashing policy."""


class DecodeError(ValueError):
    """Raised when a stored password hash is malformed or uses an unknown scheme."""


class WeakRecordRejected(ValueError):
    """Raised when a stored password hash was derived with too few iterations."""


@dataclass(frozen=True)
class DecodedCredential:
    scheme: str
    iterations: int
    salt: bytes
    key: bytes


def _derive(password: bytes, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac(_HASH_NAME, password, salt, iterations, dklen=KEY_BYTES)


def _b64decode_exact(text: str, length: int, field: str) -> bytes:
    try:
        raw = base64.b64decode(text.encode("ascii"), validate=True)
    except (UnicodeEncodeError, binascii.Error) as exc:
        raise DecodeError(f"{field} is not valid base64") from exc
    # Reject non-canonical encodings (stray padding, trailing bits).
    if base64.b64encode(raw).decode("ascii") != text:
        raise DecodeError(f"{field} is not canonical base64")
    if len(raw) != length:
        raise DecodeError(f"{field} must decode to {length} bytes, got {len(raw)}")
    return raw


def _parse_iterations(text: str) -> int:
    if not text or not text.isascii() or not text.isdigit():
        raise DecodeError("iteration count must be a decimal integer")
    iterations = int(text)
    if iterations <= 0:
        raise DecodeError("iteration count must be positive")
    if iterations > MAX_ACCEPTED_ITERATIONS:
        raise DecodeError("iteration count exceeds the accepted maximum")
    return iterations


def encode_password_hash(fields: DecodedCredential) -> str:
    """
    Encode credential fields into the storage format.

    Format: "pbkdf2${iterations}${salt_b64}${key_b64}"
    """
    return _SEPARATOR.join(
        [
            fields.scheme,
            str(fields.iterations),
            base64.b64encode(fields.salt).decode("ascii"),
            base64.b64encode(fields.key).decode("ascii"),
        ]
    )


def decode_password_hash(password_hash: str) -> DecodedCredential:
    """Parse and validate `hash_password()` output. Raises `DecodeError`."""
    if not isinstance(password_hash, str):
        raise DecodeError("password hash must be a string")

    parts = password_hash.split(_SEPARATOR)
    if len(parts) != 4:
        raise DecodeError(f"expected 4 fields, got {len(parts)}")

    scheme, iterations_text, salt_b64, key_b64 = parts
    if scheme != SCHEME:
        raise DecodeError(f"unknown scheme {scheme!r}")

    return DecodedCredential(
        scheme=scheme,
        iterations=_parse_iterations(iterations_text),
        salt=_b64decode_exact(salt_b64, SALT_BYTES, "salt"),
        key=_b64decode_exact(key_b64, KEY_BYTES, "key"),
    )


def check_strength(fields: DecodedCredential) -> None:
    """Raise `WeakRecordRejected` if the record's cost is below the accepted minimum."""
    if fields.iterations < MIN_ACCEPTED_ITERATIONS:
        raise WeakRecordRejected(
            f"iteration count {fields.iterations} is below {MIN_ACCEPTED_ITERATIONS}"
        )


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC-SHA256 with a fresh random salt."""
    if not isinstance(password, str) or not password.strip():
        raise InvalidSecret("Password must not be blank.")
    # Length counts UTF-16 code units, so non-BMP characters count twice.
    if len(password.encode("utf-16-le", "surrogatepass")) // 2 < MIN_PASSWORD_LENGTH:
        raise InvalidSecret(f"Password is too short (min {MIN_PASSWORD_LENGTH} chars).")
    try:
        secret = password.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidSecret("Password contains characters that cannot be encoded.") from exc

    salt = secrets.token_bytes(SALT_BYTES)
    key = _derive(secret, salt, DEFAULT_ITERATIONS)
    return encode_password_hash(
        DecodedCredential(scheme=SCHEME, iterations=DEFAULT_ITERATIONS, salt=salt, key=key)
    )


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against `hash_password()` output.

    Every failure (blank input, malformed or weak record, wrong password) yields
    False; nothing is raised to the caller.
    """
    if not isinstance(password, str) or not password.strip():
        return False
    if not isinstance(password_hash, str) or not password_hash.strip():
        return False

    try:
        fields = decode_password_hash(password_hash)
        check_strength(fields)
        secret = password.encode("utf-8")
    except (DecodeError, WeakRecordRejected, UnicodeEncodeError):
        return False

    key = _derive(secret, fields.salt, fields.iterations)
    return secrets.compare_digest(key, fields.key)


def needs_rehash(password_hash: str) -> bool:
    """Return True if the record is unreadable or cheaper than the current default cost."""
    try:
        fields = decode_password_hash(password_hash)
    except DecodeError:
        return True
    return fields.iterations < DEFAULT_ITERATIONS


def dummy_password_hash() -> str:
    """A well-formed record that no password matches; used to even out login timing."""
    return encode_password_hash(
        DecodedCredential(
            scheme=SCHEME,
            iterations=DEFAULT_ITERATIONS,
            salt=b"\x00" * SALT_BYTES,
            key=b"\x00" * KEY_BYTES,
        )
    )
