# =============================================================================
# core/services/user_service.py - Registration and Login
# =============================================================================
# Bare-bones accounts: register stores a bcrypt hash, login compares it.
# No sessions or tokens are issued.
# =============================================================================

import logging

from passlib.context import CryptContext

from app.exceptions import EmailAlreadyRegisteredError, InvalidPasswordError, UserNotFoundError
from core.models.user import UserRecord
from lib.supabase_client import DuplicateKeyError, SupabaseClient

logger = logging.getLogger(__name__)


def build_password_context(rounds: int = 10) -> CryptContext:
    """bcrypt hashing context with the given cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Service for user registration and login."""

    def __init__(self, store: SupabaseClient, passwords: CryptContext):
        self.store = store
        self.passwords = passwords

    def register(self, username: str | None, email: str, password: str) -> UserRecord:
        """
        Create a user with a hashed password.

        Raises:
            EmailAlreadyRegisteredError: If the email already has an account
        """
        email = normalize_email(email)

        if self.store.fetch_user_by_email(email) is not None:
            logger.info(f"Registration rejected, email already registered: {email}")
            raise EmailAlreadyRegisteredError(email)

        user = UserRecord(
            email=email,
            username=username,
            password=self.passwords.hash(password),
        )

        try:
            self.store.insert_user(user.model_dump())
        except DuplicateKeyError as e:
            # Lost a race with a concurrent registration
            raise EmailAlreadyRegisteredError(email) from e

        logger.info(f"Registered user: {email}")
        return user

    def login(self, email: str, password: str) -> UserRecord:
        """
        Check credentials.

        Raises:
            UserNotFoundError: If no user has this email
            InvalidPasswordError: If the password does not match
        """
        email = normalize_email(email)

        row = self.store.fetch_user_by_email(email)
        if row is None:
            raise UserNotFoundError(email)

        user = UserRecord.from_row(row)
        if not self.passwords.verify(password, user.password):
            logger.info(f"Invalid password for user: {email}")
            raise InvalidPasswordError()

        return user
