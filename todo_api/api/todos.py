"""Todo API endpoints."""

from typing import Annotated
from fastapi import APIRouter, Depends, status

from todo_api.api.dependencies import get_current_identity, get_todo_service
from todo_api.schemas.todo import (
    TodoCreate,
    TodoDeleteResponse,
    TodoId,
    TodoResponse,
    TodoUpdate,
)
from todo_api.services.identity import CallerIdentity
from todo_api.services.todos import TodoService

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.get("", response_model=list[TodoResponse])
def list_todos(
    caller: Annotated[CallerIdentity, Depends(get_current_identity)],
    todos: Annotated[TodoService, Depends(get_todo_service)],
):
    """Get all todos for the current user, newest first."""
    return todos.list_todos(caller)


@router.get("/{todo_id}", response_model=TodoResponse)
def get_todo(
    todo_id: TodoId,
    caller: Annotated[CallerIdentity, Depends(get_current_identity)],
    todos: Annotated[TodoService, Depends(get_todo_service)],
):
    """Get a specific todo."""
    return todos.get_todo(caller, todo_id)


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
def create_todo(
    todo_data: TodoCreate,
    caller: Annotated[CallerIdentity, Depends(get_current_identity)],
    todos: Annotated[TodoService, Depends(get_todo_service)],
):
    """Create a new todo owned by the current user."""
    return todos.create_todo(caller, todo_data)


@router.put("/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: TodoId,
    todo_data: TodoUpdate,
    caller: Annotated[CallerIdentity, Depends(get_current_identity)],
    todos: Annotated[TodoService, Depends(get_todo_service)],
):
    """Update a todo. Fields left out of the body keep their values."""
    return todos.update_todo(caller, todo_id, todo_data)


@router.delete("/{todo_id}", response_model=TodoDeleteResponse)
def delete_todo(
    todo_id: TodoId,
    caller: Annotated[CallerIdentity, Depends(get_current_identity)],
    todos: Annotated[TodoService, Depends(get_todo_service)],
):
    """Delete a todo."""
    return TodoDeleteResponse(id=todos.delete_todo(caller, todo_id))
