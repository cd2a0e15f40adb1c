"""
FILE: kanban/core/users.py
PURPOSE: Registration, login sessions, and the "is this user logged in" predicate
EXPORTS:
  - Session (dataclass)
  - UserRegistry (class)
  - validate_email(email) / validate_password_strength(password)
DEPENDENCIES:
  - logging, re, secrets (stdlib)
  - werkzeug.security (password hashing)
  - kanban.core.repository (Repository)
  - kanban.core.exceptions
NOTES:
  - Sessions are explicit tokens; there is no global current user
  - Sessions are persisted so a CLI login survives between invocations
  - One active session per email
"""

import logging
import re
import secrets
from dataclasses import dataclass
from typing import Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from .constants import COMMON_PASSWORDS, PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH
from .exceptions import (
    AlreadyExistsError,
    UnauthorizedError,
    UserNotFoundError,
    ValidationError,
)
from .repository import Repository

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)+$"
)
PASSWORD_PATTERN = re.compile(
    rf"^(?=.*?[A-Z])(?=.*?[a-z])(?=.*?\d).{{{PASSWORD_MIN_LENGTH},{PASSWORD_MAX_LENGTH}}}$"
)


def validate_email(email: Optional[str]) -> None:
    if not email or not EMAIL_PATTERN.match(email) or ".." in email:
        raise ValidationError("Email is not in a valid format")


def validate_password_strength(password: Optional[str]) -> None:
    if not password:
        raise ValidationError("Please enter a password")
    if password in COMMON_PASSWORDS:
        raise ValidationError("Low password strength")
    if not PASSWORD_PATTERN.match(password):
        raise ValidationError(
            f"Password must be {PASSWORD_MIN_LENGTH} to {PASSWORD_MAX_LENGTH} characters "
            "and include an uppercase letter, a lowercase letter and a number"
        )


@dataclass(frozen=True)
class Session:
    """Proof that `email` logged in; passed into every board operation."""

    token: str
    email: str


class UserRegistry:
    """Registered users and their active sessions."""

    def __init__(self, repository: Repository):
        self._repository = repository
        self._password_hashes: Dict[str, str] = {}
        self._sessions: Dict[str, Session] = {}

    def load(self) -> None:
        """Rebuild users and sessions from storage."""
        self.clear()
        for user in self._repository.list_users():
            self._password_hashes[user.email] = user.password_hash
        for record in self._repository.list_sessions():
            self._sessions[record.token] = Session(token=record.token, email=record.email)
        logger.debug("Loaded %s user(s), %s session(s)", len(self._password_hashes), len(self._sessions))

    def clear(self) -> None:
        self._password_hashes.clear()
        self._sessions.clear()

    def exists(self, email: str) -> bool:
        return email in self._password_hashes

    # --- Registration ---

    def register(self, email: str, password: str) -> None:
        """
        Raises:
            ValidationError: If the email or password is malformed or weak
            AlreadyExistsError: If the email is already registered
        """
        try:
            validate_email(email)
            validate_password_strength(password)
        except ValidationError as e:
            logger.error("Registration of %r rejected: %s", email, e)
            raise
        if self.exists(email):
            logger.error("Email %s already registered", email)
            raise AlreadyExistsError(f"Email {email} is already registered")

        password_hash = generate_password_hash(password)
        self._repository.create_user(email, password_hash)
        self._password_hashes[email] = password_hash
        logger.debug("Registered %s", email)

    @staticmethod
    def validate_password(password: Optional[str], confirmation: Optional[str]) -> None:
        """
        Raises:
            ValidationError: If either field is missing or they differ
        """
        if not password or not confirmation:
            raise ValidationError("Please enter a password in both fields")
        if password != confirmation:
            raise ValidationError("Passwords do not match")

    # --- Sessions ---

    def login(self, email: str, password: str) -> Session:
        """
        Raises:
            UserNotFoundError: If the email is not registered
            UnauthorizedError: If the password is wrong
            AlreadyExistsError: If the user already has an active session
        """
        if not self.exists(email):
            logger.error("Login for unknown email %s", email)
            raise UserNotFoundError(email)
        if not check_password_hash(self._password_hashes[email], password or ""):
            logger.error("Wrong password for %s", email)
            raise UnauthorizedError("Invalid password for this user")
        if self.is_user_logged(email):
            logger.error("%s is already logged in", email)
            raise AlreadyExistsError(f"{email} is already logged in")

        session = Session(token=secrets.token_hex(32), email=email)
        self._repository.create_session(session.token, email)
        self._sessions[session.token] = session
        logger.info("%s logged in", email)
        return session

    def resume(self, token: str) -> Session:
        """
        Look up an active session by token.

        Raises:
            UnauthorizedError: If the token is unknown or logged out
        """
        session = self._sessions.get(token)
        if session is None:
            logger.error("Unknown session token")
            raise UnauthorizedError("Session is not active, please log in")
        return session

    def logout(self, session: Session) -> None:
        """
        Raises:
            UnauthorizedError: If the session is not active
        """
        active = self._sessions.get(session.token)
        if active is None:
            logger.error("%s is not logged in", session.email)
            raise UnauthorizedError(f"{session.email} is not logged in")
        self._repository.delete_session(active.token)
        del self._sessions[active.token]
        logger.info("%s logged out", active.email)

    def is_user_logged(self, email: str) -> bool:
        return any(session.email == email for session in self._sessions.values())
