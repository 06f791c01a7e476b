"""Password hashing with bcrypt."""

import bcrypt


def hash_password(password: str) -> str:
    """Hash a password with a fresh salt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash string
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash.

    Empty passwords and malformed hashes never match.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False
