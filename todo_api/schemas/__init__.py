"""Pydantic schemas for API requests and responses."""

from todo_api.schemas.auth import (
    AuthResponse,
    MeResponse,
    MessageResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from todo_api.schemas.todo import TodoCreate, TodoDeleteResponse, TodoResponse, TodoUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "MeResponse",
    "MessageResponse",
    "TodoCreate",
    "TodoUpdate",
    "TodoResponse",
    "TodoDeleteResponse",
]
