"""
Business logic for accounts and authentication.

Users sign up with a unique username and email; passwords are stored as
bcrypt hashes.  Both signup and login return a signed bearer token
together with the public user fields.
"""

import logging
import sqlite3

from bazaar_api.app.core.db import get_connection
from bazaar_api.app.core.errors import ConflictError, InvalidCredentials, NotFoundError, ValidationError
from bazaar_api.app.core.security import create_access_token, hash_password, verify_password
from bazaar_api.app.schemas.user import AuthResponse, UserRead


logger = logging.getLogger(__name__)


class AuthService:
    """Service for signup, login and user lookup."""

    @classmethod
    def _issue(cls, user: UserRead) -> AuthResponse:
        token = create_access_token({"id": user.id, "username": user.username})
        return AuthResponse(token=token, user=user)

    @classmethod
    async def signup(cls, username: str, email: str, password: str) -> AuthResponse:
        """Register a new user and return a token.

        Raises ``ValidationError`` when any field is missing and
        ``ConflictError`` when the username or email is already taken.
        """
        if not username or not email or not password:
            raise ValidationError("Missing fields")
        hashed = hash_password(password)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO users (username, email, password_hash) VALUES (?, ?, ?)",
                    (username, email, hashed),
                )
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if "UNIQUE" in str(e):
                    raise ConflictError("Username or email already exists") from e
                raise
            user_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("Registered user %s (%s)", user_id, username)
        return cls._issue(UserRead(id=user_id, username=username, email=email))

    @classmethod
    async def login(cls, email: str, password: str) -> AuthResponse:
        """Authenticate by email and password.

        Raises ``InvalidCredentials`` when no user has this email or the
        password does not match the stored hash.
        """
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, username, email, password_hash FROM users WHERE email = ?",
                (email,),
            ).fetchone()
        finally:
            conn.close()
        if not row or not password or not verify_password(password, row["password_hash"]):
            raise InvalidCredentials("Invalid credentials")
        return cls._issue(UserRead(id=row["id"], username=row["username"], email=row["email"]))

    @classmethod
    async def get_user(cls, user_id: int) -> UserRead:
        """Return the public fields of a user or raise ``NotFoundError``."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, username, email FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"User {user_id} not found")
        return UserRead(id=row["id"], username=row["username"], email=row["email"])
