"""Authentication: registration, login and bearer tokens."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from werkzeug.security import check_password_hash

from budgetdesk.database.base import Database
from budgetdesk.domain.entities import User, UserRole
from budgetdesk.domain.errors import AuthenticationError
from budgetdesk.domain.user import UserService, hash_password
from budgetdesk.domain.validation import optional_url, require_text

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Self-service account operations and token handling.

    Tokens carry the user's ID and token version. Bumping the stored version
    revokes every token issued before it.
    """

    def __init__(self, db: Database, secret_key: str, token_ttl_hours: int = 24):
        """Initialize auth service.

        Args:
            db: Database instance
            secret_key: Key used to sign tokens
            token_ttl_hours: Token lifetime
        """
        self.db = db
        self.secret_key = secret_key
        self.token_ttl = timedelta(hours=token_ttl_hours)
        self.users = UserService(db)

    def register(self, name: str, email: str, password: str, department: str) -> User:
        """Create a regular user account.

        Elevated roles are only granted by an administrator.

        Raises:
            ValidationError: If a field is invalid
            ConflictError: If the email is already registered
        """
        return self.users.create_user(
            name=name,
            email=email,
            password=password,
            department=department,
            role=UserRole.USER,
        )

    def login(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and issue a token.

        Returns:
            Tuple of (user, token)

        Raises:
            AuthenticationError: If the credentials are wrong or the account is inactive
        """
        user = self.db.get_user_by_email(email or "")
        if user is None or not check_password_hash(user.password_hash, password or ""):
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        self.db.update_user(user.id, last_login=datetime.now(timezone.utc))
        user = self.db.get_user(user.id)
        logger.info("User %s logged in", user.email)
        return user, self.issue_token(user)

    def issue_token(self, user: User, now: Optional[datetime] = None) -> str:
        """Sign a token for the user's current token version."""
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "ver": user.token_version,
            "iat": now,
            "exp": now + self.token_ttl,
        }
        return jwt.encode(payload, self.secret_key, algorithm=TOKEN_ALGORITHM)

    def verify_token(self, token: str) -> User:
        """Resolve a bearer token to an active user.

        Raises:
            AuthenticationError: If the token is malformed, expired or revoked,
                or the user is gone or inactive
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[TOKEN_ALGORITHM])
            user_id = int(payload["sub"])
            version = int(payload["ver"])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")

        user = self.db.get_user(user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("User not found or inactive")
        if user.token_version != version:
            raise AuthenticationError("Token has been revoked")
        return user

    def update_profile(
        self,
        user: User,
        name: Optional[str] = None,
        department: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> User:
        """Update the caller's own name, department or avatar."""
        self.db.update_user(
            user.id,
            name=require_text(name, "Name", max_length=100) if name is not None else None,
            department=(
                require_text(department, "Department", max_length=100)
                if department is not None
                else None
            ),
            avatar=optional_url(avatar, "Avatar"),
        )
        return self.db.get_user(user.id)

    def change_own_password(self, user: User, current_password: str, new_password: str) -> User:
        """Change the caller's password after checking the current one.

        Every existing token, including the one used for this call, is revoked.

        Raises:
            AuthenticationError: If the current password is wrong
            ValidationError: If the new password is too short
        """
        if not check_password_hash(user.password_hash, current_password or ""):
            raise AuthenticationError("Current password is incorrect")
        self.db.update_user(user.id, password_hash=hash_password(new_password))
        self.db.increment_token_version(user.id)
        return self.db.get_user(user.id)
