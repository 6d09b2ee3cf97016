# /codelab_store/services/database_helpers/course_repository_sql.py

"""
This module contains the SQLAlchemy queries for courses and for course
membership (the roster).

Membership is a set of (user_id, course_id) references spread across many
users. Changing a course's roster therefore touches many rows, and it is done
inside one explicit transaction. Either every add and every remove becomes
visible, or none of them does.
"""

from enum import Enum
import logging
from typing import Dict, List, Sequence

from sqlalchemy import and_, delete, exists, insert, literal, select, String
from sqlalchemy.orm import Session

from codelab_store.core.exceptions import StoreUnavailableError
from codelab_store.db.connection import is_store_unreachable, store_connection_guard
from codelab_store.db.models.course_models import Course
from codelab_store.db.models.user_models import User, user_courses

logger = logging.getLogger(__name__)


class TransactionState(str, Enum):
    NOT_STARTED = "not-started"
    ACTIVE = "active"
    COMMITTED = "committed"
    ABORTED = "aborted"


class CourseRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_all_courses(self) -> List[Dict]:
        with store_connection_guard(self.db):
            courses = self.db.query(Course).order_by(Course.id).all()
        return [
            {"id": c.id, "name": c.name, "assignments": list(c.assignments or [])}
            for c in courses
        ]

    def add_course_to_users(self, session: Session, user_ids: Sequence[str], course_id: str) -> None:
        """Adds the course to each user's course set, skipping users that already have it."""
        if not user_ids:
            return
        already_member = exists().where(
            and_(user_courses.c.user_id == User.id, user_courses.c.course_id == course_id)
        )
        source = select(User.id, literal(course_id, String)).where(
            User.id.in_(user_ids), ~already_member
        )
        session.execute(insert(user_courses).from_select(["user_id", "course_id"], source))

    def remove_course_from_users(self, session: Session, user_ids: Sequence[str], course_id: str) -> None:
        """Removes the course from each user's course set where present."""
        if not user_ids:
            return
        session.execute(
            delete(user_courses).where(
                user_courses.c.course_id == course_id,
                user_courses.c.user_id.in_(user_ids),
            )
        )

    def update_course_for_users(
        self,
        add_user_ids: Sequence[str],
        remove_user_ids: Sequence[str],
        course_id: str,
    ) -> Dict:
        """
        Applies a roster change as a single all-or-nothing transaction.

        Adds run before removes, so a user listed in both ends up without the
        course. Any failure aborts the transaction and is reported in the
        returned `{"error": ..., "message": ...}` object rather than raised,
        except a lost connection, which raises `StoreUnavailableError` after
        the rollback.
        Nothing is retried; the caller may re-issue the whole change.
        """
        response = {"error": False, "message": "Success"}
        state = TransactionState.NOT_STARTED
        # A dedicated session keeps the transaction independent of whatever
        # the request-scoped session has already done.
        session = Session(bind=self.db.get_bind(), autoflush=False)
        try:
            with session.begin():
                state = TransactionState.ACTIVE
                self.add_course_to_users(session, add_user_ids, course_id)
                self.remove_course_from_users(session, remove_user_ids, course_id)
            state = TransactionState.COMMITTED
        except Exception as e:
            state = TransactionState.ABORTED
            if is_store_unreachable(e, session.get_bind()):
                logger.error("Roster update for course %s aborted, the database is unreachable: %s", course_id, e)
                raise StoreUnavailableError(f"The database is unreachable: {e}") from e
            logger.error("Transaction aborted due to an unexpected error: %s", e)
            response["error"] = True
            response["message"] = f"Transaction aborted due to an unexpected error: {e}"
        finally:
            session.close()
        logger.info(
            "Roster update for course %s %s (add=%d, remove=%d)",
            course_id, state.value, len(add_user_ids), len(remove_user_ids),
        )
        return response
