"""Unit tests for echos.core.security: bcrypt hashing and credential rules."""

import unittest

from echos.core.security import (
    hash_password,
    normalize_pseudonyme,
    password_meets_policy,
    verify_password,
)


class TestHashPassword(unittest.TestCase):
    """hash_password salts every call; verify_password checks against the digest."""

    def test_verify_matches_original(self) -> None:
        digest = hash_password("Secret1!", rounds=4)
        self.assertTrue(verify_password("Secret1!", digest))

    def test_verify_rejects_other_password(self) -> None:
        digest = hash_password("Secret1!", rounds=4)
        self.assertFalse(verify_password("Secret2!", digest))

    def test_digest_is_salted(self) -> None:
        a = hash_password("Secret1!", rounds=4)
        b = hash_password("Secret1!", rounds=4)
        self.assertNotEqual(a, b)
        self.assertNotIn("Secret1!", a)

    def test_default_cost_factor(self) -> None:
        digest = hash_password("Secret1!")
        self.assertTrue(digest.startswith("$2b$12$"))

    def test_invalid_digest_is_false_not_error(self) -> None:
        self.assertFalse(verify_password("Secret1!", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("Secret1!", ""))


class TestPasswordPolicy(unittest.TestCase):
    """password_meets_policy requires letter, digit, special char and 8+ chars."""

    def test_accepts_valid(self) -> None:
        self.assertTrue(password_meets_policy("Secret1!"))

    def test_rejects_missing_classes(self) -> None:
        self.assertFalse(password_meets_policy("Secret11"))
        self.assertFalse(password_meets_policy("12345678!"))
        self.assertFalse(password_meets_policy("Secret!!"))

    def test_rejects_short_and_long(self) -> None:
        self.assertFalse(password_meets_policy("Se1!"))
        self.assertFalse(password_meets_policy("Aa1!" * 40))

    def test_rejects_unlisted_characters(self) -> None:
        self.assertFalse(password_meets_policy("Secret1! with spaces"))


class TestNormalizePseudonyme(unittest.TestCase):
    def test_lowercases_and_strips(self) -> None:
        self.assertEqual(normalize_pseudonyme("  Alice "), "alice")


if __name__ == "__main__":
    unittest.main()
