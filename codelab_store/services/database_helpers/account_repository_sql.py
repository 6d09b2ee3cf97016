# /codelab_store/services/database_helpers/account_repository_sql.py

"""
This module contains the SQLAlchemy queries for user accounts and their
environment lists.

Every write here is a single statement, so it is atomic on its own and needs
no cross-row coordination. The conditional writes (adding an environment whose
name is already taken, removing one that is not there) are expressed inside
the statement itself rather than as a read followed by a write. When their
condition does not hold they simply change nothing.
"""

import logging
from typing import List, Dict, Optional

from sqlalchemy import String, select, insert, update, delete, exists, literal
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from codelab_store.db.connection import store_connection_guard
from codelab_store.db.models.user_models import User, Environment

logger = logging.getLogger(__name__)


def _user_to_dict(user: User) -> Dict:
    return {
        "id": user.id,
        "username": user.username,
        "groupNumber": user.group_number,
        "role": user.role,
        "courses": [course.id for course in user.courses],
    }


def _environment_to_dict(env: Environment) -> Dict:
    return {"environment": env.environment, "description": env.description, "instance": env.instance}


class AccountRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Account Methods ---

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Fetches a single user by username. A missing user is `None`, not an error."""
        with store_connection_guard(self.db):
            return self.db.query(User).filter(User.username == username).first()

    def get_user_account(self, username: str) -> Optional[Dict]:
        with store_connection_guard(self.db):
            user = self.get_user_by_username(username)
            if user is None:
                return None
            account = _user_to_dict(user)
            account["environments"] = [_environment_to_dict(env) for env in user.environments]
            return account

    def update_password_hash(self, username: str, password_hash: str) -> bool:
        """
        Stores a new password hash and clears the legacy plaintext column in
        the same UPDATE. Returns False if no user has that username.
        """
        stmt = (
            update(User)
            .where(User.username == username)
            .values(password_hash=password_hash, password=None)
            .execution_options(synchronize_session=False)
        )
        with store_connection_guard(self.db):
            try:
                result = self.db.execute(stmt)
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Failed to update password for user %s", username)
                raise
            return result.rowcount > 0

    def get_all_users(self) -> List[Dict]:
        with store_connection_guard(self.db):
            users = self.db.query(User).order_by(User.username).all()
            return [_user_to_dict(u) for u in users]

    # --- Environment Methods ---

    def get_environments(self, username: str) -> List[Dict]:
        """Returns the user's environments in insertion order; empty if there are none."""
        with store_connection_guard(self.db):
            rows = (
                self.db.query(Environment)
                .join(User, Environment.user_id == User.id)
                .filter(User.username == username)
                .order_by(Environment.id)
                .all()
            )
        return [_environment_to_dict(env) for env in rows]

    def add_environment(self, username: str, environment: str, description: str, instance: str) -> None:
        """
        Appends an environment to the user's list unless one with the same
        name already exists. The existence check is part of the INSERT, so a
        duplicate add is a no-op rather than an error.
        """
        name_taken = exists().where(
            Environment.user_id == User.id,
            Environment.environment == environment,
        )
        source = select(
            User.id,
            literal(environment, String),
            literal(description, String),
            literal(instance, String),
        ).where(User.username == username, ~name_taken)
        stmt = insert(Environment.__table__).from_select(
            ["user_id", "environment", "description", "instance"], source
        )
        with store_connection_guard(self.db):
            try:
                self.db.execute(stmt)
                self.db.commit()
            except IntegrityError:
                # A concurrent add of the same name won the race; the entry is present.
                self.db.rollback()
                logger.info("Environment %s already present for user %s", environment, username)
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Failed to add environment %s for user %s", environment, username)
                raise

    def remove_environment(self, username: str, environment: str) -> None:
        """Removes the named environment from the user's list; a no-op if absent."""
        owner_ids = select(User.id).where(User.username == username).scalar_subquery()
        stmt = delete(Environment).where(
            Environment.user_id == owner_ids,
            Environment.environment == environment,
        ).execution_options(synchronize_session=False)
        with store_connection_guard(self.db):
            try:
                self.db.execute(stmt)
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Failed to remove environment %s for user %s", environment, username)
                raise
