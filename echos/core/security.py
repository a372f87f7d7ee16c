"""Password hashing and credential input rules."""

import re

import bcrypt

# Bcrypt cost (rounds); 12 keeps a single hash well above 50ms on commodity hardware.
BCRYPT_ROUNDS = 12

# Min/max lengths for pseudonyme and password validation.
PSEUDONYME_MIN_LEN = 1
PSEUDONYME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# At least one letter, one digit and one special character; nothing outside those classes.
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[@$!%*#?&])[A-Za-z\d@$!%*#?&]{8,}$"
)
PASSWORD_POLICY_MESSAGE = (
    "Password must contain at least 8 characters, a letter, a number and a special character"
)
PSEUDONYME_EMPTY_MESSAGE = "Pseudonyme must not be blank"


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Bad digests verify as False."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


def password_meets_policy(plain_password: str) -> bool:
    """True when the password satisfies length limits and the character policy."""
    if not (PASSWORD_MIN_LEN <= len(plain_password) <= PASSWORD_MAX_LEN):
        return False
    return PASSWORD_PATTERN.match(plain_password) is not None


def normalize_pseudonyme(pseudonyme: str) -> str:
    """Pseudonymes are stored and looked up lower-cased. May return "" for blank input."""
    return pseudonyme.strip().lower()
