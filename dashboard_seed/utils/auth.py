"""Password hashing helpers.

Seeded user passwords are stored as bcrypt hashes with a per-password
salt. Anything reading them back must compare with
`verify_password_hash`, never by re-hashing.
"""

import bcrypt


def generate_password_hash(password: str, rounds: int = 10) -> str:
    """Return a bcrypt hash for the provided plaintext password.

    Args:
        password: Plaintext password to hash.
        rounds: bcrypt cost factor (log2 of the iteration count).

    Returns:
        The bcrypt hash as a utf-8 string.
    """

    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')

def verify_password_hash(password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash.

    Args:
        password: Plaintext password to check.
        hashed_password: Stored bcrypt hash to verify against.

    Returns:
        True if the password matches the hash, False otherwise.
    """

    return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))
