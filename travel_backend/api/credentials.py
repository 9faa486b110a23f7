"""
Credential store: registration, login and bearer-token resolution.

Passwords are hashed with bcrypt through passlib; verification always goes
through CryptContext.verify, never string comparison. Each user gets a
256-character hex access token from 128 bytes of `secrets` randomness at
registration. The token is stored as-is and never rotated.
"""
import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError

from travel_database.db import Database
from travel_database.models import User

from .errors import DuplicateUsername, InvalidCredentials, ValidationError, WeakPassword
from .validation import is_weak_password, validate_username

logger = logging.getLogger("travel_notes.auth")

TOKEN_BYTES = 128

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# PUBLIC_INTERFACE
def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# PUBLIC_INTERFACE
def generate_access_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


@dataclass(frozen=True)
class UserIdentity:
    """The authenticated caller, as attached to a request by the auth gate."""

    user_id: int
    username: str


@dataclass(frozen=True)
class UserPublic:
    """What register/login hand back to the client."""

    username: str
    access_token: str
    user_id: int

    def to_dict(self):
        return {"username": self.username, "accessToken": self.access_token, "userId": self.user_id}


def _public(user: User) -> UserPublic:
    return UserPublic(username=user.username, access_token=user.access_token, user_id=user.id)


# PUBLIC_INTERFACE
class CredentialStore:
    def __init__(self, database: Database):
        self.database = database

    def _normalize(self, username) -> str:
        validation = validate_username(username)
        if not validation.ok:
            raise ValidationError(details={"errors": validation.errors})
        return validation.values["username"]

    def register(self, username: str, password: str) -> UserPublic:
        """
        Creates a user with a salted bcrypt hash and a fresh access token.

        The duplicate check runs before the password-strength check, so an
        existing name is reported as a duplicate whatever the password.
        """
        username = self._normalize(username)
        with self.database.session() as session:
            if session.query(User).filter(User.username == username).first() is not None:
                raise DuplicateUsername()
            if is_weak_password(password):
                raise WeakPassword()
            user = User(
                username=username,
                password_hash=get_password_hash(password),
                access_token=generate_access_token(),
            )
            session.add(user)
            try:
                session.commit()
            except IntegrityError:
                # Lost a race with a concurrent registration of the same name.
                session.rollback()
                raise DuplicateUsername()
            session.refresh(user)
            logger.info("Registered user %s (id=%s)", user.username, user.id)
            return _public(user)

    def login(self, username: str, password: str) -> UserPublic:
        """Returns the stored (unrotated) token when the password matches."""
        try:
            username = self._normalize(username)
        except ValidationError:
            raise InvalidCredentials()
        with self.database.session() as session:
            user = session.query(User).filter(User.username == username).first()
            if user is None:
                pwd_context.dummy_verify()
                logger.info("Login failed for unknown user")
                raise InvalidCredentials()
            if not verify_password(password, user.password_hash):
                logger.info("Login failed for user id=%s", user.id)
                raise InvalidCredentials()
            return _public(user)

    def resolve_token(self, token: Optional[str]) -> Optional[UserIdentity]:
        if not token:
            return None
        with self.database.session() as session:
            user = session.query(User).filter(User.access_token == token).first()
            if user is None:
                return None
            return UserIdentity(user_id=user.id, username=user.username)

    def get_user(self, user_id: int) -> Optional[UserIdentity]:
        with self.database.session() as session:
            user = session.get(User, user_id)
            if user is None:
                return None
            return UserIdentity(user_id=user.id, username=user.username)
