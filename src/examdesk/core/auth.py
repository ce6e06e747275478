"""Registration and login.

A single unsalted sha256 password check; no sessions or tokens are issued.
"""

from __future__ import annotations

import hashlib

import structlog

from examdesk.core.errors import AuthError, ValidationError
from examdesk.db.database import Database
from examdesk.db.users_repository import (
    UserRecord,
    get_user_by_email,
    get_user_by_id,
    insert_user,
)
from examdesk.utils.ids import generate_id
from examdesk.utils.validators import require_fields

logger = structlog.get_logger(__name__)

VALID_ROLES = ("teacher", "student")

_ROLE_ID_PREFIX = {
    "teacher": "teach",
    "student": "stud",
}


def hash_password(password: str) -> str:
    """Hex sha256 of the UTF-8 password."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def register_user(
    db: Database,
    name: str | None,
    email: str | None,
    password: str | None,
    role: str | None,
) -> UserRecord:
    """Create a teacher or student account.

    Raises:
        ValidationError: Missing fields, unknown role or email already registered
    """
    require_fields("Missing required fields", name=name, email=email, password=password, role=role)

    if role not in VALID_ROLES:
        raise ValidationError("Invalid role")

    user_id = generate_id(_ROLE_ID_PREFIX[role])

    with db.transaction() as conn:
        if get_user_by_email(conn, email) is not None:
            raise ValidationError("Email already registered")

        insert_user(conn, user_id, name, email, hash_password(password), role)
        user = get_user_by_id(conn, user_id)

    logger.info("auth.registered", user_id=user_id, role=role)
    return user


def login(db: Database, email: str | None, password: str | None) -> UserRecord:
    """Check credentials and return the matching user.

    Unknown email and wrong password fail identically.

    Raises:
        ValidationError: If email or password is missing
        AuthError: If the credentials do not match
    """
    require_fields("Email and password required", email=email, password=password)

    with db.snapshot() as conn:
        user = get_user_by_email(conn, email)

    if user is None or user.password != hash_password(password):
        logger.warning("auth.login_rejected")
        raise AuthError("Invalid credentials")

    logger.info("auth.login", user_id=user.id)
    return user
