"""
Unit tests for password hashing and join credentials.
"""

import base64

from passwords import NO_PASSWORD, credential_matches, hash_password, optional_hash, password_credential


class TestHashPassword:
    """Test cases for the one-way password digest."""

    def test_hash_is_deterministic(self):
        assert hash_password("hunter2") == hash_password("hunter2")

    def test_hash_differs_from_plaintext(self):
        for plaintext in ["hunter2", "pw1", "a much longer passphrase with spaces"]:
            assert hash_password(plaintext) != plaintext

    def test_hash_is_base64_sha256(self):
        digest = base64.b64decode(hash_password("secret"))
        assert len(digest) == 32
        # Known sha256("secret") digest
        assert hash_password("secret") == "K7gNU3sdo+OL0wNhqoVWhr3g6s1xYv72ol/pe/Unols="

    def test_different_passwords_hash_differently(self):
        assert hash_password("pw1") != hash_password("pw2")


class TestCredentials:
    """Test cases for the no-password marker and credential checks."""

    def test_missing_or_empty_password_means_unsecured(self):
        assert optional_hash(None) is None
        assert optional_hash("") is None
        assert optional_hash("pw1") == hash_password("pw1")

    def test_no_password_marker_is_distinct(self):
        assert password_credential(None) is NO_PASSWORD
        assert password_credential("") is NO_PASSWORD
        assert NO_PASSWORD != ""
        assert NO_PASSWORD != hash_password("")

    def test_unsecured_lobby_admits_any_credential(self):
        assert credential_matches(None, NO_PASSWORD)
        assert credential_matches(None, hash_password("anything"))

    def test_secured_lobby_requires_matching_digest(self):
        stored = hash_password("pw1")
        assert credential_matches(stored, hash_password("pw1"))
        assert not credential_matches(stored, hash_password("pw2"))
        assert not credential_matches(stored, NO_PASSWORD)

    def test_no_password_never_matches_empty_password_hash(self):
        assert not credential_matches(hash_password(""), NO_PASSWORD)
