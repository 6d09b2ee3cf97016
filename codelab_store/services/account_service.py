# /codelab_store/services/account_service.py

"""
Business logic for account operations that need more than a single
repository call. Plain lookups and environment edits go straight through
the DatabaseService.
"""

import logging

from ..core import security
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def change_user_password(username: str, new_password: str, db: DatabaseService) -> bool:
    """
    Hashes the new password and stores it, clearing any legacy plaintext
    password. Returns False if the user does not exist.
    """
    password_hash = security.get_password_hash(new_password)
    changed = db.update_user_password_hash(username, password_hash)
    if changed:
        logger.info("Password changed for user %s", username)
    return changed
