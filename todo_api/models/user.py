"""User model."""

import uuid

from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship

from todo_api.database import Base
from todo_api.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and todo ownership."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    todos = relationship("Todo", back_populates="user", passive_deletes=True)
