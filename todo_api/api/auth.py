"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from todo_api.api.dependencies import get_auth_service, get_current_identity
from todo_api.config import get_settings
from todo_api.schemas.auth import (
    AuthResponse,
    MeResponse,
    MessageResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from todo_api.services.auth import AuthService
from todo_api.services.identity import CallerIdentity

settings = get_settings()

router = APIRouter(prefix="/api/auth", tags=["auth"])


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token as an httpOnly cookie."""
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.cookie_max_age,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session cookie using the attributes it was set with."""
    response.delete_cookie(
        key=settings.cookie_name,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user and start a session."""
    user, token = auth.register(user_data.name, user_data.email, user_data.password)
    set_session_cookie(response, token)
    return AuthResponse(user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    user, token = auth.login(credentials.email, credentials.password)
    set_session_cookie(response, token)
    return AuthResponse(user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    """Logout by clearing the session cookie."""
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=MeResponse)
def get_me(
    caller: Annotated[CallerIdentity, Depends(get_current_identity)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get current user information."""
    return auth.get_me(caller)
