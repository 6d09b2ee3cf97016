# /codelab_store/services/database_helpers/submission_repository_sql.py

"""
This module contains the SQLAlchemy queries for assignment submissions.

A submission supersedes every earlier submission of the same assignment by
the same user AND every earlier submission of that assignment by anyone in
the same group. Grading reads by either key, so both must point at the
latest record. The replacement is done as one transaction: delete by user,
delete by group, insert. Readers therefore see either the old record or the
new one, never neither and never both.

No in-memory lock is taken and no unique index backs the rule. Submits that
run one after another always leave a single record, the latest. Two submits
for the same key whose transactions overlap are not serialised: under
READ COMMITTED neither DELETE sees the other's uncommitted INSERT, so both
records can survive until the next submit for that key clears them.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import delete, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from codelab_store.core.exceptions import StoreUnavailableError, SubmissionStoreError
from codelab_store.db.connection import is_store_unreachable
from codelab_store.db.models.submission_models import Submission

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SubmissionRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def submit(
        self,
        username: str,
        group_number: int,
        environment: str,
        terminal_states: List[Any],
        submitted_files: List[Dict[str, Any]],
    ) -> Dict:
        """
        Replaces the user's and the group's submission for `environment` with
        a new record stamped with the current time.

        Returns:
            The stored record projected to `assignmentName` and `lastChanged`.

        Raises:
            SubmissionStoreError: if any step fails. The transaction is rolled
                back, so the previous submission (if any) is still in place.
            StoreUnavailableError: if the failure was a lost connection; the
                transaction is rolled back the same way.
        """
        logger.info(
            "Storing assignment result for user: %s assignment environment: %s terminalStates: %s",
            username, environment, terminal_states,
        )
        now = datetime.now(timezone.utc)
        phase = "delete previous submissions for this user"
        try:
            self.db.execute(
                delete(Submission)
                .where(Submission.username == username, Submission.environment == environment)
                .execution_options(synchronize_session=False)
            )
            phase = "delete previous submissions for this group"
            self.db.execute(
                delete(Submission)
                .where(Submission.group_number == group_number, Submission.environment == environment)
                .execution_options(synchronize_session=False)
            )
            phase = "store the new submission"
            self.db.add(
                Submission(
                    username=username,
                    group_number=group_number,
                    environment=environment,
                    submission_created=now,
                    terminal_status=list(terminal_states),
                    submitted_files=list(submitted_files),
                )
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            if is_store_unreachable(e, self.db.get_bind()):
                logger.error("Submission of %s by %s failed, the database is unreachable: %s", environment, username, e)
                raise StoreUnavailableError(f"The database is unreachable: {e}") from e
            logger.error("Submission of %s by %s rolled back, unable to %s: %s", environment, username, phase, e)
            raise SubmissionStoreError(f"Unable to {phase}: {e}") from e
        return {"assignmentName": environment, "lastChanged": now}

    def get_submissions(self, username: str, group_number: int) -> List[Dict]:
        """
        Returns every submission made by the user or by anyone in the group.
        No particular order is guaranteed.
        """
        try:
            rows = (
                self.db.query(Submission.environment, Submission.submission_created)
                .filter(or_(Submission.username == username, Submission.group_number == group_number))
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            if is_store_unreachable(e, self.db.get_bind()):
                raise StoreUnavailableError(f"The database is unreachable: {e}") from e
            logger.error("Unable to retrieve submissions of user %s or group %s: %s", username, group_number, e)
            raise SubmissionStoreError(f"Unable to retrieve submissions of user or group: {e}") from e
        return [
            {"assignmentName": environment, "lastChanged": _as_utc(created)}
            for environment, created in rows
        ]
