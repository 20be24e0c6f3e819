"""FastAPI dependencies for session authentication and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from todo_api.config import get_settings
from todo_api.database import get_db
from todo_api.errors import UnauthenticatedError
from todo_api.services.auth import AuthService
from todo_api.services.identity import CallerIdentity
from todo_api.services.todos import TodoService
from todo_api.services.tokens import (
    TokenExpiredError,
    TokenMalformedError,
    TokenService,
    get_token_service,
)

settings = get_settings()

session_cookie = APIKeyCookie(name=settings.cookie_name, auto_error=False)


def get_current_identity(
    token: Annotated[str | None, Depends(session_cookie)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> CallerIdentity:
    """Resolve the caller from the session cookie.

    Only the token is checked; the user row is not looked up.
    """
    if not token:
        raise UnauthenticatedError("Not authenticated")

    try:
        user_id = tokens.verify(token)
    except TokenExpiredError:
        raise UnauthenticatedError("Session expired") from None
    except TokenMalformedError:
        raise UnauthenticatedError("Invalid authentication credentials") from None

    return CallerIdentity(id=user_id)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, tokens)


def get_todo_service(
    db: Annotated[Session, Depends(get_db)],
) -> TodoService:
    """Get todo service with dependencies."""
    return TodoService(db)
