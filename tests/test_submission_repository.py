# /tests/test_submission_repository.py

import pytest
from sqlalchemy.exc import OperationalError

from codelab_store.core.exceptions import StoreUnavailableError, SubmissionStoreError
from codelab_store.db.models.submission_models import Submission


def _count(session, **filters):
    return session.query(Submission).filter_by(**filters).count()


def test_submit_then_get_returns_single_entry(db_service):
    stored = db_service.submit_user_environment("alice", 3, "hw1", ["passed"], [{"name": "main.py"}])

    submissions = db_service.get_user_submissions("alice", 3)

    assert submissions == [{"assignmentName": "hw1", "lastChanged": stored["lastChanged"]}]


def test_submit_stores_states_and_files(db_service, db_session):
    db_service.submit_user_environment("alice", 3, "hw1", ["passed", "failed"], [{"name": "main.py", "content": "print(1)"}])
    record = db_session.query(Submission).one()
    assert record.username == "alice"
    assert record.group_number == 3
    assert record.terminal_status == ["passed", "failed"]
    assert record.submitted_files == [{"name": "main.py", "content": "print(1)"}]


def test_resubmission_leaves_only_the_latest_record(db_service, db_session):
    """
    GIVEN: a user who already submitted an assignment.
    WHEN: they submit the same assignment again.
    THEN: exactly one record remains and it carries the second timestamp.
    """
    db_service.submit_user_environment("alice", 3, "hw1", ["failed"], [])
    second = db_service.submit_user_environment("alice", 3, "hw1", ["passed"], [])

    assert _count(db_session, username="alice", environment="hw1") == 1
    assert db_service.get_user_submissions("alice", 3) == [
        {"assignmentName": "hw1", "lastChanged": second["lastChanged"]}
    ]


def test_group_submission_supersedes_teammate(db_service, db_session):
    """
    GIVEN: alice and bob share group 3 and alice has submitted hw1.
    WHEN: bob submits hw1.
    THEN: a single record exists for (group 3, hw1) and both see bob's timestamp.
    """
    first = db_service.submit_user_environment("alice", 3, "hw1", ["passed"], [{"name": "main.py"}])
    second = db_service.submit_user_environment("bob", 3, "hw1", ["passed"], [{"name": "main.py"}])

    assert second["lastChanged"] >= first["lastChanged"]
    assert _count(db_session, group_number=3, environment="hw1") == 1
    expected = [{"assignmentName": "hw1", "lastChanged": second["lastChanged"]}]
    assert db_service.get_user_submissions("alice", 3) == expected
    assert db_service.get_user_submissions("bob", 3) == expected


def test_other_assignments_and_groups_are_untouched(db_service):
    db_service.submit_user_environment("alice", 3, "hw1", ["passed"], [])
    db_service.submit_user_environment("alice", 3, "hw2", ["passed"], [])
    db_service.submit_user_environment("carol", 4, "hw1", ["passed"], [])

    names = sorted(s["assignmentName"] for s in db_service.get_user_submissions("alice", 3))
    assert names == ["hw1", "hw2"]
    assert [s["assignmentName"] for s in db_service.get_user_submissions("carol", 4)] == ["hw1"]


def test_user_submission_is_found_after_group_change(db_service):
    """Records match by username OR group, so a user still sees their own submission."""
    db_service.submit_user_environment("alice", 3, "hw1", ["passed"], [])
    assert [s["assignmentName"] for s in db_service.get_user_submissions("alice", 7)] == ["hw1"]


def test_get_submissions_for_unknown_user_and_group_is_empty(db_service):
    assert db_service.get_user_submissions("nobody", 99) == []


def test_failed_submit_rolls_back_and_keeps_previous_record(db_service, db_session, monkeypatch):
    """
    GIVEN: an existing submission.
    WHEN: the replacing transaction fails at commit.
    THEN: a SubmissionStoreError is raised and the previous record is still there.
    """
    original = db_service.submit_user_environment("alice", 3, "hw1", ["passed"], [])

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", failing_commit)
    with pytest.raises(SubmissionStoreError) as exc_info:
        db_service.submit_user_environment("bob", 3, "hw1", ["failed"], [])
    monkeypatch.undo()

    assert "store the new submission" in str(exc_info.value)
    assert db_service.get_user_submissions("alice", 3) == [
        {"assignmentName": "hw1", "lastChanged": original["lastChanged"]}
    ]
    assert _count(db_session, environment="hw1") == 1


def test_failed_group_delete_is_reported_with_its_phase(db_service, db_session, monkeypatch):
    real_execute = db_session.execute
    calls = []

    def execute(statement, *args, **kwargs):
        calls.append(statement)
        if len(calls) == 2:
            raise OperationalError("DELETE", {}, Exception("database is locked"))
        return real_execute(statement, *args, **kwargs)

    db_service.submit_user_environment("alice", 3, "hw1", ["passed"], [])
    monkeypatch.setattr(db_session, "execute", execute)
    with pytest.raises(SubmissionStoreError) as exc_info:
        db_service.submit_user_environment("alice", 3, "hw1", ["failed"], [])
    monkeypatch.undo()

    assert "delete previous submissions for this group" in str(exc_info.value)
    # The user-level delete was rolled back together with the rest.
    assert _count(db_session, username="alice", environment="hw1") == 1


def test_outage_after_connect_is_reported_as_store_unavailable(db_service, store_outage):
    """
    GIVEN: a store that was reachable when the service connected.
    WHEN: it goes away before a submit.
    THEN: the caller sees StoreUnavailableError, not a submission failure.
    """
    db_service.submit_user_environment("alice", 3, "hw1", ["passed"], [])
    store_outage()

    with pytest.raises(StoreUnavailableError):
        db_service.submit_user_environment("alice", 3, "hw1", ["failed"], [])
    with pytest.raises(StoreUnavailableError):
        db_service.get_user_submissions("alice", 3)
