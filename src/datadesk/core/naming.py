"""Secure random names for exported artifacts."""

import re
import secrets
import string

ARTIFACT_ALPHABET = string.ascii_letters + string.digits
ARTIFACT_NAME_LENGTH = 16  # 62**16 keyspace

_NAME_PATTERN = re.compile(r"[A-Za-z0-9]+")


def generate_artifact_name(length: int = ARTIFACT_NAME_LENGTH) -> str:
    """Generate a random alphanumeric artifact name.

    Draws from ``secrets`` so names cannot be predicted from earlier ones.

    Args:
        length: Number of characters.

    Returns:
        Mixed-case letters and digits, exactly ``length`` long.
    """
    if length < 1:
        raise ValueError("Artifact name length must be positive")
    return "".join(secrets.choice(ARTIFACT_ALPHABET) for _ in range(length))


def is_valid_artifact_name(name: str) -> bool:
    """Check that a name could have been produced by generate_artifact_name.

    Args:
        name: Candidate artifact identifier, usually from a URL.

    Returns:
        True if the name is non-empty and purely alphanumeric.
    """
    return bool(_NAME_PATTERN.fullmatch(name))
