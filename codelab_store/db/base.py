# /codelab_store/db/base.py

# This file acts as a central registry for all our SQLAlchemy models.
# Importing them here guarantees that `Base.metadata` knows every table
# before the connection manager calls `create_all`.

from .base_class import Base

from .models.user_models import User, Environment, user_courses
from .models.course_models import Course
from .models.submission_models import Submission
