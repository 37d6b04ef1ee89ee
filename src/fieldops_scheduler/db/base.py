from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """Declarative base; table names are the lower-cased class names."""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
