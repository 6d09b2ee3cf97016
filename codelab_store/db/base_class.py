# /codelab_store/db/base_class.py

from sqlalchemy.orm import declarative_base, declared_attr


class _Base:
    # Table names are derived from the class name: `User` -> `users`.
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"


# Every ORM model in the project inherits from this Base.
Base = declarative_base(cls=_Base)
