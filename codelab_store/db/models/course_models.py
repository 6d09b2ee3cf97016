# /codelab_store/db/models/course_models.py

from sqlalchemy import Column, String, JSON

from ..base_class import Base


class Course(Base):
    """
    SQLAlchemy model representing a course. Users reference courses through
    the `user_courses` association table; a course never embeds its members.
    """
    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    # Ordered list of assignment descriptors, stored as-is.
    assignments = Column(JSON, nullable=False, default=list)
