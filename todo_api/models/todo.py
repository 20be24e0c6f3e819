"""Todo model."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, String, Uuid, false
from sqlalchemy.orm import relationship

from todo_api.database import Base
from todo_api.models.enums import Category, Priority
from todo_api.models.mixins import TimestampMixin


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Todo(Base, TimestampMixin):
    """Todo item owned by exactly one user."""

    __tablename__ = "todos"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    text = Column(String, nullable=False)
    priority = Column(
        Enum(Priority, name="todopriority", values_callable=_enum_values),
        nullable=False,
        default=Priority.MEDIUM,
        server_default=Priority.MEDIUM.value,
    )
    category = Column(
        Enum(Category, name="todocategory", values_callable=_enum_values),
        nullable=False,
        default=Category.PERSONAL,
        server_default=Category.PERSONAL.value,
    )
    due_date = Column(DateTime(timezone=True), nullable=True)
    completed = Column(Boolean, nullable=False, default=False, server_default=false())
    # Owner; set once at creation and never reassigned
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    user = relationship("User", back_populates="todos")
