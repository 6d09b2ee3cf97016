# /codelab_store/db/models/user_models.py

"""
This module defines the SQLAlchemy ORM models for user accounts and the
sandbox environments each user owns.

A user's course memberships are not embedded in the user row. They live in
the `user_courses` association table, which is a set of
(user_id, course_id) references. The composite primary key is what gives
"add course" its set semantics.
"""

from sqlalchemy import Column, String, Integer, ForeignKey, Table, UniqueConstraint
from sqlalchemy.orm import relationship

from ..base_class import Base

user_courses = Table(
    "user_courses",
    Base.metadata,
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("course_id", String, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """
    SQLAlchemy model representing a platform account.
    """
    id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=True)
    # Older accounts were provisioned with a plaintext password. It is cleared
    # the first time the password is changed.
    password = Column(String, nullable=True)
    group_number = Column(Integer, index=True, nullable=True)
    role = Column(String, nullable=True)

    environments = relationship(
        "Environment",
        back_populates="owner",
        order_by="Environment.id",
        cascade="all, delete-orphan",
    )
    courses = relationship("Course", secondary=user_courses, order_by="Course.id")


class Environment(Base):
    """
    One sandbox environment descriptor in a user's environment list.
    The autoincrement `id` preserves the order in which entries were added.
    """
    __table_args__ = (UniqueConstraint("user_id", "environment", name="uq_user_environment"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    environment = Column(String, nullable=False)
    description = Column(String, nullable=True)
    # Reference to the backing runtime instance, opaque to this layer.
    instance = Column(String, nullable=True)

    owner = relationship("User", back_populates="environments")
