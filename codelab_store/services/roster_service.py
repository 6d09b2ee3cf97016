# /codelab_store/services/roster_service.py

import logging

from ..models.course_model import CourseMembershipUpdate, ResponseObject
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def update_course_membership(
    update: CourseMembershipUpdate,
    course_id: str,
    db: DatabaseService,
) -> ResponseObject:
    """
    Applies a roster change for one course.

    Translates the `{add: [{userID}], remove: [{userID}]}` payload into id
    lists and hands them to the transactional repository method. Failures come
    back as `ResponseObject(error=True, ...)`; no partial change is ever kept.
    """
    add_ids = [ref.userID for ref in update.add]
    remove_ids = [ref.userID for ref in update.remove]
    overlap = set(add_ids) & set(remove_ids)
    if overlap:
        logger.warning(
            "Users %s are both added to and removed from course %s; they will be removed.",
            sorted(overlap), course_id,
        )
    result = db.update_course_for_users(add_ids, remove_ids, course_id)
    return ResponseObject(**result)
