# /codelab_store/models/submission_model.py

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class SubmissionCreate(BaseModel):
    """
    The payload for submitting an assignment environment.
    Assignment name and group number are passed through without validation.
    """
    username: str
    groupNumber: int
    environment: str = Field(..., description="The assignment (environment) name.")
    terminalStates: List[Any] = Field(default_factory=list, description="Recorded terminal outcomes, in order.")
    submittedFiles: List[Dict[str, Any]] = Field(default_factory=list, description="Submitted file entries, in order.")


class SubmissionSummary(BaseModel):
    assignmentName: str
    lastChanged: datetime
