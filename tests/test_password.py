"""Tests for the credential codec and verifier."""
from __future__ import annotations

import base64

import pytest

from physiosim.services import password as pw
from physiosim.services.password import (
    DecodeError,
    DecodedCredential,
    InvalidSecret,
    WeakRecordRejected,
    check_strength,
    decode_password_hash,
    encode_password_hash,
    hash_password,
    needs_rehash,
    verify_password,
)


@pytest.fixture(scope="module")
def record():
    return hash_password("correcthorse1")


def _weak_record(secret: str, iterations: int) -> str:
    salt = b"\x01" * pw.SALT_BYTES
    key = pw._derive(secret.encode("utf-8"), salt, iterations)
    return encode_password_hash(DecodedCredential(pw.SCHEME, iterations, salt, key))


class TestHashPassword:
    def test_record_layout(self, record):
        scheme, iterations, salt_b64, key_b64 = record.split("$")
        assert scheme == "pbkdf2"
        assert int(iterations) == pw.DEFAULT_ITERATIONS
        assert len(salt_b64) == 24
        assert len(key_b64) == 44
        assert len(base64.b64decode(salt_b64)) == 16
        assert len(base64.b64decode(key_b64)) == 32

    def test_same_secret_gives_different_records(self, record):
        other = hash_password("correcthorse1")
        assert other != record
        assert verify_password("correcthorse1", other)
        assert verify_password("correcthorse1", record)

    @pytest.mark.parametrize("secret", ["", "   ", "\t\n"])
    def test_rejects_blank(self, secret):
        with pytest.raises(InvalidSecret):
            hash_password(secret)

    def test_rejects_short(self):
        with pytest.raises(InvalidSecret, match="too short"):
            hash_password("short7!")

    def test_minimum_length_is_accepted(self):
        assert verify_password("exactly8", hash_password("exactly8"))

    def test_length_counts_utf16_code_units(self):
        # Four astral-plane characters are eight UTF-16 code units.
        secret = "\U0001F600" * 4
        assert verify_password(secret, hash_password(secret))
        with pytest.raises(InvalidSecret, match="too short"):
            hash_password("\U0001F600" * 3 + "a")

    def test_rejects_unencodable(self):
        with pytest.raises(InvalidSecret):
            hash_password("password\ud800")

    def test_rejects_non_string(self):
        with pytest.raises(InvalidSecret):
            hash_password(None)  # type: ignore[arg-type]


class TestDecodePasswordHash:
    def test_roundtrip_fields(self, record):
        fields = decode_password_hash(record)
        assert fields.scheme == "pbkdf2"
        assert fields.iterations == pw.DEFAULT_ITERATIONS
        assert len(fields.salt) == pw.SALT_BYTES
        assert len(fields.key) == pw.KEY_BYTES
        assert encode_password_hash(fields) == record

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda r: r.rsplit("$", 1)[0],  # three fields
            lambda r: r + "$extra",  # five fields
            lambda r: "bcrypt" + r[len("pbkdf2"):],  # unknown scheme
            lambda r: r.replace("$120000$", "$-5$"),
            lambda r: r.replace("$120000$", "$0$"),
            lambda r: r.replace("$120000$", "$abc$"),
            lambda r: r.replace("$120000$", "$ 120000$"),
            lambda r: r.replace("$120000$", "$99999999999$"),
            lambda r: r + "x",  # corrupted key
            lambda r: r[:-4],  # truncated key
        ],
    )
    def test_rejects_malformed(self, record, mutate):
        with pytest.raises(DecodeError):
            decode_password_hash(mutate(record))

    def test_rejects_wrong_salt_length(self, record):
        scheme, iterations, _, key_b64 = record.split("$")
        short_salt = base64.b64encode(b"\x00" * 8).decode()
        with pytest.raises(DecodeError, match="salt"):
            decode_password_hash("$".join([scheme, iterations, short_salt, key_b64]))

    def test_rejects_non_string(self):
        with pytest.raises(DecodeError):
            decode_password_hash(b"pbkdf2$1$a$b")  # type: ignore[arg-type]


class TestVerifyPassword:
    def test_correct_and_wrong_secret(self, record):
        assert verify_password("correcthorse1", record) is True
        assert verify_password("correcthorse2", record) is False

    def test_corrupted_record(self, record):
        assert verify_password("correcthorse1", record + "x") is False

    def test_truncated_key_does_not_raise(self, record):
        scheme, iterations, salt_b64, key_b64 = record.split("$")
        truncated = base64.b64encode(base64.b64decode(key_b64)[:16]).decode()
        assert verify_password("correcthorse1", "$".join([scheme, iterations, salt_b64, truncated])) is False

    def test_unknown_scheme(self, record):
        assert verify_password("correcthorse1", record.replace("pbkdf2", "argon2", 1)) is False

    @pytest.mark.parametrize("candidate", ["", "   ", "\n"])
    def test_blank_candidate(self, record, candidate):
        assert verify_password(candidate, record) is False

    @pytest.mark.parametrize("stored", ["", "   ", "\t"])
    def test_blank_record(self, stored):
        assert verify_password("correcthorse1", stored) is False

    def test_none_inputs(self, record):
        assert verify_password(None, record) is False  # type: ignore[arg-type]
        assert verify_password("correcthorse1", None) is False  # type: ignore[arg-type]

    def test_weak_record_rejected_even_with_correct_secret(self):
        weak = _weak_record("correcthorse1", pw.MIN_ACCEPTED_ITERATIONS - 1)
        assert verify_password("correcthorse1", weak) is False

    def test_record_at_minimum_cost_is_accepted(self):
        record = _weak_record("correcthorse1", pw.MIN_ACCEPTED_ITERATIONS)
        assert verify_password("correcthorse1", record) is True

    def test_uses_record_iterations_not_default(self):
        record = _weak_record("correcthorse1", pw.DEFAULT_ITERATIONS + 1000)
        assert verify_password("correcthorse1", record) is True


class TestPolicyHelpers:
    def test_check_strength(self):
        fields = DecodedCredential(pw.SCHEME, 1000, b"\x00" * 16, b"\x00" * 32)
        with pytest.raises(WeakRecordRejected):
            check_strength(fields)

    def test_needs_rehash(self, record):
        assert needs_rehash(record) is False
        assert needs_rehash(_weak_record("correcthorse1", pw.MIN_ACCEPTED_ITERATIONS)) is True
        assert needs_rehash("garbage") is True

    def test_higher_cost_is_not_rehashed(self):
        assert needs_rehash(_weak_record("correcthorse1", pw.DEFAULT_ITERATIONS + 1000)) is False

    def test_dummy_hash_is_valid_and_matches_nothing(self):
        dummy = pw.dummy_password_hash()
        decode_password_hash(dummy)
        assert verify_password("correcthorse1", dummy) is False
