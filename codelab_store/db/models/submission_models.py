# /codelab_store/db/models/submission_models.py

"""
This module defines the SQLAlchemy ORM model for assignment submissions.

At most one row exists for a given (username, environment) pair and at most
one for a given (group_number, environment) pair. That rule is enforced by
the submission repository, which replaces rows inside a single transaction.
Rows are never updated in place.
"""

from sqlalchemy import Column, String, Integer, JSON, DateTime, Index

from ..base_class import Base


class Submission(Base):
    __table_args__ = (
        Index("ix_submissions_user_environment", "username", "environment"),
        Index("ix_submissions_group_environment", "group_number", "environment"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False)
    group_number = Column(Integer, nullable=True)
    environment = Column(String, nullable=False)
    submission_created = Column(DateTime(timezone=True), nullable=False)
    terminal_status = Column(JSON, nullable=False, default=list)
    submitted_files = Column(JSON, nullable=False, default=list)
