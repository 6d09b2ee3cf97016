# /codelab_store/models/course_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field
from typing import Any, List

# --- Model Definitions ---

class CourseData(BaseModel):
    """The projected representation of a course returned by the course listing."""
    id: str
    name: str
    assignments: List[Any] = Field(default_factory=list)

class CourseUserRef(BaseModel):
    userID: str

class CourseMembershipUpdate(BaseModel):
    """
    The users to add to and remove from a course, applied as one transaction.
    A user listed in both ends up removed.
    """
    add: List[CourseUserRef] = Field(default_factory=list)
    remove: List[CourseUserRef] = Field(default_factory=list)

class ResponseObject(BaseModel):
    error: bool = False
    message: str = "Success"
