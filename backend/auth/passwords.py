import secrets
import string

import bcrypt

from backend.core import config

PASSWORD_ALPHABET = string.ascii_letters + string.digits
GENERATED_PASSWORD_LENGTH = 12

# bcrypt only looks at the first 72 bytes.
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    rounds = max(config.MIN_BCRYPT_ROUNDS, config.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    """Return a random alphanumeric password drawn from the OS CSPRNG."""
    if length <= 0:
        raise ValueError("Password length must be positive.")
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))
