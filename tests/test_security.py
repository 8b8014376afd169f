"""Tests for the Argon2 password hasher."""

import pytest
from argon2 import PasswordHasher

from utils import security
from utils.exceptions import ValidationError


class TestHashPassword:
    def test_hash_is_not_plaintext(self):
        hashed = security.hash_password("pw123456")
        assert hashed != "pw123456"
        assert hashed.startswith("$argon2")

    def test_hash_uses_random_salt(self):
        assert security.hash_password("pw123456") != security.hash_password("pw123456")

    @pytest.mark.parametrize("bad", ["", None])
    def test_empty_input_is_rejected(self, bad):
        with pytest.raises(ValidationError):
            security.hash_password(bad)


class TestVerifyPassword:
    def test_roundtrip(self):
        hashed = security.hash_password("pw123456")
        assert security.verify_password("pw123456", hashed) is True

    def test_different_plaintext_fails(self):
        hashed = security.hash_password("pw123456")
        assert security.verify_password("pw1234567", hashed) is False
        assert security.verify_password("PW123456", hashed) is False

    def test_garbage_hash_fails_instead_of_raising(self):
        assert security.verify_password("pw123456", "not-a-hash") is False
        assert security.verify_password("pw123456", "") is False

    def test_empty_candidate_is_rejected(self):
        hashed = security.hash_password("pw123456")
        with pytest.raises(ValidationError):
            security.verify_password("", hashed)


class TestRehash:
    def test_hash_from_other_parameters_needs_rehash(self):
        security.configure_hasher(time_cost=1, memory_cost=8 * 1024, parallelism=1)
        old = PasswordHasher(time_cost=2, memory_cost=8 * 1024, parallelism=1).hash("pw123456")
        assert security.needs_rehash(old) is True
        assert security.needs_rehash(security.hash_password("pw123456")) is False

    def test_invalid_hash_does_not_need_rehash(self):
        assert security.needs_rehash("not-a-hash") is False
