"""Authentication API router.

Registration, login and profile management for dietitians. Tokens are
HS256 JWTs issued by `core.security`; every other router depends on
`get_current_user` to resolve them.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.exceptions import AuthenticationError, ConflictError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, save
from core.security import create_access_token, get_current_user, hash_password, verify_password
from database import models
from database.deps import get_db_write
from schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)
from services.form_helpers import clean_payload, format_phone_number

logger = get_logger("api.auth")
router = APIRouter(prefix="/api/auth", tags=["auth"])


def user_to_response(user: models.User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        bio=user.bio,
        phone=user.phone,
        profile_picture=user.profile_picture,
        telegram_configured=bool(user.telegram_token),
        created_at=user.created_at.isoformat() if user.created_at else None,
    )


def _email_taken(db: Session, email: str, exclude_id: int = None) -> bool:
    query = db.query(models.User).filter(models.User.email == email)
    if exclude_id is not None:
        query = query.filter(models.User.id != exclude_id)
    return query.first() is not None


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db_write)):
    """Create a dietitian account and return it with a fresh token.

    Raises:
        ConflictError: If the e-mail address is already registered.
    """
    email = payload.email.lower()
    if _email_taken(db, email):
        raise ConflictError("This e-mail address is already registered", field="email")

    user = models.User(
        name=payload.name.strip(),
        email=email,
        password_hash=hash_password(payload.password),
        bio=payload.bio,
        phone=format_phone_number(payload.phone),
        profile_picture=payload.profile_picture,
    )
    user = save(db, user)
    logger.info("Registered user %s (id=%s)", user.email, user.id)
    return AuthResponse(user=user_to_response(user), token=create_access_token(user.id, user.email))


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db_write)):
    """Exchange e-mail and password for a token.

    Raises:
        AuthenticationError: For an unknown e-mail or a wrong password.
    """
    user = db.query(models.User).filter(models.User.email == payload.email.lower()).first()
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for %s", payload.email)
        raise AuthenticationError("Invalid email or password")
    return AuthResponse(user=user_to_response(user), token=create_access_token(user.id, user.email))


@router.get("/me", response_model=UserResponse)
def me(current_user: models.User = Depends(get_current_user)):
    return user_to_response(current_user)


@router.put("/profile", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Update the caller's profile with the fields that were sent.

    Raises:
        ValidationError: If the body contains nothing to update.
        ConflictError: If the new e-mail belongs to another account.
    """
    changes = clean_payload(payload.model_dump(exclude_unset=True))
    if not changes:
        raise ValidationError("No profile fields to update")

    if "email" in changes:
        changes["email"] = changes["email"].lower()
        if _email_taken(db, changes["email"], exclude_id=current_user.id):
            raise ConflictError("This e-mail address is already registered", field="email")
    if "phone" in changes:
        changes["phone"] = format_phone_number(changes["phone"])

    user = BaseRepository(models.User, db, "User").update(current_user, changes)
    logger.info("Profile updated for user %s: %s", user.id, sorted(changes))
    return user_to_response(user)


@router.put("/password", response_model=MessageResponse)
def change_password(
    payload: PasswordChangeRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Replace the caller's password after checking the current one.

    Raises:
        AuthenticationError: If the current password does not match.
    """
    if not verify_password(payload.current_password, current_user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    current_user.password_hash = hash_password(payload.new_password)
    save(db, current_user)
    logger.info("Password changed for user %s", current_user.id)
    return MessageResponse(message="Password updated")
