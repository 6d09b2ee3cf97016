# /codelab_store/routers/submissions_router.py

from fastapi import APIRouter, Depends, Query, status
from typing import List

from ..models import submission_model
from ..services import database_service

router = APIRouter()


@router.post("", response_model=submission_model.SubmissionSummary, status_code=status.HTTP_201_CREATED, summary="Submit an Assignment Environment")
def submit_environment(submission: submission_model.SubmissionCreate, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    """
    Stores a submission, replacing any earlier submission of the same
    assignment by this user or by anyone in the same group.
    """
    return db.submit_user_environment(
        submission.username,
        submission.groupNumber,
        submission.environment,
        submission.terminalStates,
        submission.submittedFiles,
    )


@router.get("", response_model=List[submission_model.SubmissionSummary], summary="Get Submissions of a User or Group")
def get_submissions(
    username: str = Query(...),
    groupNumber: int = Query(...),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return db.get_user_submissions(username, groupNumber)
