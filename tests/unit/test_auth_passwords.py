"""Unit tests for password hashing and session token helpers."""

from hsc_api.services.auth_service import (
    generate_session_token,
    hash_password,
    hash_session_token,
    normalize_email,
    verify_password,
)


class TestPasswords:
    def test_round_trip(self):
        encoded = hash_password("hunter2", iterations=1_000)
        assert encoded.startswith("pbkdf2_sha256$1000$")
        assert verify_password("hunter2", encoded) is True
        assert verify_password("hunter3", encoded) is False

    def test_salts_differ(self):
        assert hash_password("same", iterations=1_000) != hash_password("same", iterations=1_000)

    def test_malformed_hashes_are_rejected(self):
        assert verify_password("x", "") is False
        assert verify_password("x", "not-a-hash") is False
        assert verify_password("x", "pbkdf2_sha256$abc$salt$digest") is False
        assert verify_password("x", "bcrypt$1000$c2FsdA$ZGlnZXN0") is False


class TestSessionTokens:
    def test_tokens_are_random_and_url_safe(self):
        first, second = generate_session_token(), generate_session_token()
        assert first != second
        assert len(first) >= 43
        assert all(ch.isalnum() or ch in "-_" for ch in first)

    def test_hash_is_deterministic_and_hides_token(self):
        token = "raw-token"
        assert hash_session_token(token) == hash_session_token(token)
        assert hash_session_token(token) != token
        assert len(hash_session_token(token)) == 64


def test_normalize_email():
    assert normalize_email("  Someone@Example.COM ") == "someone@example.com"
