"""Authentication service for password handling, registration and login."""

import logging
from uuid import UUID

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from todo_api.config import get_settings
from todo_api.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    is_unique_violation,
)
from todo_api.models.user import User
from todo_api.services.identity import CallerIdentity
from todo_api.services.tokens import TokenService

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)

EMAIL_TAKEN_MESSAGE = "User with this email already exists"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


class AuthService:
    """Registration, login and account lookup."""

    def __init__(self, db: Session, token_service: TokenService):
        self.db = db
        self.tokens = token_service

    def get_user_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        return self.db.query(User).filter(User.email == email).first()

    def register(self, name: str, email: str, password: str) -> tuple[User, str]:
        """Create an account and return it with a fresh session token.

        Raises:
            ConflictError: the email is already registered, either found up
                front or reported by the unique index at insert time.
        """
        if self.get_user_by_email(email) is not None:
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        user = User(name=name, email=email, password_hash=get_password_hash(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                # Lost a race with a concurrent registration for the same email
                raise ConflictError(EMAIL_TAKEN_MESSAGE) from None
            raise
        self.db.refresh(user)

        logger.info(f"User registered: {user.id}")
        return user, self.tokens.issue(user.id)

    def authenticate(self, email: str, password: str) -> User:
        """Check credentials.

        Unknown email and wrong password raise the same error, and both paths
        run one hash verification.
        """
        user = self.get_user_by_email(email)
        if user is None:
            pwd_context.dummy_verify()
            raise InvalidCredentialsError()
        if not verify_password(password, user.password_hash):
            logger.info(f"Login failed for user {user.id}")
            raise InvalidCredentialsError()
        return user

    def login(self, email: str, password: str) -> tuple[User, str]:
        """Authenticate and return the user with a fresh session token."""
        user = self.authenticate(email, password)
        logger.info(f"User logged in: {user.id}")
        return user, self.tokens.issue(user.id)

    def get_user(self, user_id: UUID) -> User | None:
        return self.db.get(User, user_id)

    def get_me(self, caller: CallerIdentity) -> User:
        """Load the caller's account.

        The token may outlive the account, so this is where existence is checked.
        """
        user = self.get_user(caller.id)
        if user is None:
            raise NotFoundError("User not found")
        return user
