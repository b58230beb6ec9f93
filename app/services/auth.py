"""Registration, login, token refresh and role promotion."""

import logging
from dataclasses import dataclass
from typing import Callable

from app.core.errors import DuplicateUserError, InvalidCredentialsError, UserNotFoundError
from app.core.security import hash_password, verify_password
from app.core.tokens import TokenService
from app.models.user import User
from app.repositories.users import UserRepository
from app.schemas.auth import AuthenticationResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"
INVALID_REFRESH_TOKEN_MESSAGE = "Invalid refresh token"


@dataclass(frozen=True)
class RegisterUserCommand:
    username: str
    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True)
class LoginCommand:
    username: str
    password: str


class AuthenticationService:
    """
    Account workflows on top of the user store, password hasher and TokenService.

    The hasher is injectable so tests can avoid bcrypt's cost.
    """

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        hasher: Callable[[str], str] = hash_password,
        verifier: Callable[[str, str], bool] = verify_password,
    ) -> None:
        self.users = users
        self.tokens = tokens
        self.hasher = hasher
        self.verifier = verifier

    def register(self, command: RegisterUserCommand) -> User:
        logger.info("Registering new user with username: %s", command.username)
        if self.users.exists_by_username(command.username):
            logger.warning("Registration failed: username already exists - %s", command.username)
            raise DuplicateUserError.with_username(command.username)
        if self.users.exists_by_email(command.email):
            logger.warning("Registration failed: email already exists - %s", command.email)
            raise DuplicateUserError.with_email(command.email)

        user = User.create(
            username=command.username,
            email=command.email,
            password_hash=self.hasher(command.password),
            first_name=command.first_name,
            last_name=command.last_name,
        )
        saved = self.users.save(user)
        logger.info("User registered successfully with id: %s", saved.id)
        return saved

    def login(self, command: LoginCommand) -> User:
        logger.info("Login attempt for username: %s", command.username)
        user = self.users.find_by_username(command.username)
        if user is None:
            logger.warning("Login failed: user not found - %s", command.username)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)
        if not self.verifier(command.password, user.password_hash):
            logger.warning("Login failed: invalid password - %s", command.username)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        saved = self.users.save(user.record_login())
        logger.info("User logged in successfully: %s", command.username)
        return saved

    def refresh(self, refresh_token: str) -> User:
        """Resolve the user behind a refresh token; access tokens are rejected."""
        if not self.tokens.is_refresh_token(refresh_token):
            logger.warning("Token refresh failed: invalid refresh token")
            raise InvalidCredentialsError(INVALID_REFRESH_TOKEN_MESSAGE)
        username = self.tokens.extract_username(refresh_token)
        if username is None:
            logger.warning("Token refresh failed: could not extract username from token")
            raise InvalidCredentialsError(INVALID_REFRESH_TOKEN_MESSAGE)
        user = self.users.find_by_username(username)
        if user is None:
            logger.warning("Token refresh failed: user not found - %s", username)
            raise UserNotFoundError.with_username(username)
        logger.info("Token refreshed successfully for user: %s", username)
        return user

    def get_user_by_username(self, username: str) -> User:
        user = self.users.find_by_username(username)
        if user is None:
            logger.warning("Get user failed: user not found - %s", username)
            raise UserNotFoundError.with_username(username)
        return user

    def promote_to_admin(self, user_id: str) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError.with_id(user_id)
        if user.is_admin:
            return user
        saved = self.users.save(user.promote_to_admin())
        logger.info("User promoted to admin: %s", saved.username)
        return saved

    def list_users(self) -> list[User]:
        return self.users.find_all()

    def issue_tokens(self, user: User) -> AuthenticationResponse:
        return AuthenticationResponse(
            access_token=self.tokens.issue_access_token(user),
            refresh_token=self.tokens.issue_refresh_token(user),
            token_type="Bearer",
            expires_in=self.tokens.access_token_expires_in,
        )
