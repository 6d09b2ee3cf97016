# /codelab_store/core/security.py

import bcrypt

from .config import PASSWORD_HASH_ROUNDS


def get_password_hash(password: str) -> str:
    """Hashes a plaintext password with bcrypt at the configured cost factor."""
    salt = bcrypt.gensalt(rounds=PASSWORD_HASH_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

