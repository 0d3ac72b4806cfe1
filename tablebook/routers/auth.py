"""
Authentication router with register, login, logout, and refresh endpoints.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from tablebook.core.errors import ConflictError
from tablebook.core.security import (
    REFRESH_TOKEN_TYPE,
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_token,
    token_expiry,
    blacklist_token,
    is_token_blacklisted,
)
from tablebook.core.deps import get_current_token, get_current_user
from tablebook.db.session import get_db
from tablebook.models.user import User
from tablebook.schemas.auth import (
    AuthResponse,
    UserRegister,
    UserLogin,
    Token,
    TokenRefresh,
    UserResponse,
)
from tablebook.schemas.common import MessageResponse

router = APIRouter(prefix="/auth", tags=["auth"])


def issue_tokens(user: User) -> Token:
    return Token(
        access_token=create_access_token(subject=str(user.id), role=user.role),
        refresh_token=create_refresh_token(subject=str(user.id), role=user.role),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)) -> AuthResponse:
    """
    Register a new user account.
    Returns the profile plus access and refresh tokens.
    """
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise ConflictError("User with this email already exists", code="EMAIL_TAKEN")

    new_user = User(
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        name=user_data.name,
        phone=user_data.phone,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    return AuthResponse(user=UserResponse.model_validate(new_user), tokens=issue_tokens(new_user))


@router.post("/login", response_model=Token)
def login(user_data: UserLogin, db: Session = Depends(get_db)) -> Token:
    """
    Authenticate user and return tokens.
    """
    user = db.query(User).filter(User.email == user_data.email).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not verify_password(user_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return issue_tokens(user)


@router.post("/refresh", response_model=Token)
def refresh(token_data: TokenRefresh, db: Session = Depends(get_db)) -> Token:
    """
    Exchange a refresh token for a new access and refresh token.

    Refresh tokens are single-use: the presented token is blacklisted and a
    new pair is issued.
    """
    old_token = token_data.refresh_token
    payload = decode_token(old_token, expected_type=REFRESH_TOKEN_TYPE)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    if is_token_blacklisted(old_token, db):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token has already been used. Please log in again.",
        )

    user_id = payload.get("sub")
    user = None
    try:
        if user_id:
            user = db.query(User).filter(User.id == UUID(user_id)).first()
    except ValueError:
        pass
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    blacklist_token(old_token, token_expiry(payload), db)

    return issue_tokens(user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    token: str = Depends(get_current_token),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """
    Revoke the presented access token. Clients should discard their
    refresh token as well.
    """
    payload = decode_token(token) or {}
    blacklist_token(token, token_expiry(payload), db)
    return MessageResponse(message="Successfully logged out")


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)) -> User:
    """
    Get the current authenticated user's profile.
    """
    return current_user

