"""Registration and login endpoints."""

from fastapi import APIRouter, Depends, status

from examdesk.core.auth import login, register_user
from examdesk.db.database import Database
from examdesk.db.users_repository import UserRecord
from examdesk.web.deps import get_database
from examdesk.web.schemas import LoginRequest, RegisterRequest, UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


def _to_response(user: UserRecord) -> UserResponse:
    return UserResponse(user_id=user.id, name=user.name, email=user.email, role=user.role)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: Database = Depends(get_database)) -> UserResponse:
    """Register a teacher or student."""
    user = register_user(db, body.name, body.email, body.password, body.role)
    return _to_response(user)


@router.post("/login", response_model=UserResponse)
def login_user(body: LoginRequest, db: Database = Depends(get_database)) -> UserResponse:
    """Check credentials and return the user."""
    user = login(db, body.email, body.password)
    return _to_response(user)
