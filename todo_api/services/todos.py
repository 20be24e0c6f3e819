"""Todo service for per-user CRUD."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from todo_api.errors import NotFoundError
from todo_api.models.todo import Todo
from todo_api.schemas.todo import TodoCreate, TodoUpdate
from todo_api.services.identity import CallerIdentity
from todo_api.services.ownership import require_owner

logger = logging.getLogger(__name__)


class TodoService:
    """Service for todo operations on behalf of an authenticated caller."""

    def __init__(self, db: Session):
        self.db = db

    def _get_owned(self, caller: CallerIdentity, todo_id: UUID, action: str) -> Todo:
        todo = self.db.get(Todo, todo_id)
        if todo is None:
            raise NotFoundError("Todo not found")
        require_owner(todo.user_id, caller, f"Not authorized to {action} this todo")
        return todo

    def list_todos(self, caller: CallerIdentity) -> list[Todo]:
        """Get all of the caller's todos, newest first.

        The query is scoped to the caller, so other users' rows are never loaded.
        """
        return (
            self.db.query(Todo)
            .filter(Todo.user_id == caller.id)
            .order_by(Todo.created_at.desc())
            .all()
        )

    def get_todo(self, caller: CallerIdentity, todo_id: UUID) -> Todo:
        return self._get_owned(caller, todo_id, "access")

    def create_todo(self, caller: CallerIdentity, data: TodoCreate) -> Todo:
        todo = Todo(
            text=data.text,
            priority=data.priority,
            category=data.category,
            due_date=data.due_date,
            completed=data.completed,
            user_id=caller.id,
        )
        self.db.add(todo)
        self.db.commit()
        self.db.refresh(todo)

        logger.info(f"Todo {todo.id} created by user {caller.id}")
        return todo

    def update_todo(self, caller: CallerIdentity, todo_id: UUID, data: TodoUpdate) -> Todo:
        """Apply the fields present in ``data``; everything else keeps its value."""
        todo = self._get_owned(caller, todo_id, "update")

        for field, value in data.changes().items():
            setattr(todo, field, value)

        self.db.commit()
        self.db.refresh(todo)
        return todo

    def delete_todo(self, caller: CallerIdentity, todo_id: UUID) -> UUID:
        todo = self._get_owned(caller, todo_id, "delete")

        self.db.delete(todo)
        self.db.commit()

        logger.info(f"Todo {todo_id} deleted by user {caller.id}")
        return todo_id
