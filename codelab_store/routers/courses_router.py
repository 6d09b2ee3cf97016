# /codelab_store/routers/courses_router.py

from fastapi import APIRouter, Depends
from typing import List

from ..models import course_model
from ..services import database_service, roster_service

router = APIRouter()


@router.get("", response_model=List[course_model.CourseData], summary="List All Courses")
def get_all_courses(db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return db.get_all_courses()


@router.put("/{course_id}/members", response_model=course_model.ResponseObject, summary="Update Course Membership")
def update_course_membership(course_id: str, update: course_model.CourseMembershipUpdate, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    # A failed transaction is reported in the body, not as an HTTP error.
    return roster_service.update_course_membership(update=update, course_id=course_id, db=db)
