# /codelab_store/services/database_service.py

from typing import Any, Dict, List, Optional, Sequence, Generator
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from codelab_store.db.connection import get_db

# --- Repository Imports ---
from .database_helpers.account_repository_sql import AccountRepositorySQL
from .database_helpers.submission_repository_sql import SubmissionRepositorySQL
from .database_helpers.course_repository_sql import CourseRepositorySQL


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        Initializes the DatabaseService with one repository per aggregate,
        all sharing the request's session.
        """
        self.account_repo = AccountRepositorySQL(db_session)
        self.submission_repo = SubmissionRepositorySQL(db_session)
        self.course_repo = CourseRepositorySQL(db_session)

    # --- ACCOUNT METHODS (DELEGATED) ---
    def get_user_account(self, username: str) -> Optional[Dict]: return self.account_repo.get_user_account(username)
    def update_user_password_hash(self, username: str, password_hash: str) -> bool: return self.account_repo.update_password_hash(username, password_hash)
    def get_all_users(self) -> List[Dict]: return self.account_repo.get_all_users()

    # --- ENVIRONMENT METHODS (DELEGATED) ---
    def get_user_environments(self, username: str) -> List[Dict]: return self.account_repo.get_environments(username)
    def add_user_environment(self, username: str, environment: str, description: str, instance: str) -> None:
        self.account_repo.add_environment(username, environment, description, instance)
    def remove_user_environment(self, username: str, environment: str) -> None: self.account_repo.remove_environment(username, environment)

    # --- SUBMISSION METHODS (DELEGATED) ---
    def submit_user_environment(self, username: str, group_number: int, environment: str, terminal_states: List[Any], submitted_files: List[Dict[str, Any]]) -> Dict:
        return self.submission_repo.submit(username, group_number, environment, terminal_states, submitted_files)
    def get_user_submissions(self, username: str, group_number: int) -> List[Dict]: return self.submission_repo.get_submissions(username, group_number)

    # --- COURSE & ROSTER METHODS (DELEGATED) ---
    def get_all_courses(self) -> List[Dict]: return self.course_repo.get_all_courses()
    def update_course_for_users(self, add_user_ids: Sequence[str], remove_user_ids: Sequence[str], course_id: str) -> Dict:
        return self.course_repo.update_course_for_users(add_user_ids, remove_user_ids, course_id)


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """
    FastAPI dependency that provides a DatabaseService bound to the request's session.
    """
    yield DatabaseService(db_session=db)
