import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from flashcard_api.services.auth import (
    register_user,
    authenticate_user,
    get_current_user,
    create_access_token,
    trial_active,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth")

_PASSWORD_CLASSES = (
    (str.isupper, "uppercase letter"),
    (str.islower, "lowercase letter"),
    (str.isdigit, "digit"),
)


class SignupRequest(BaseModel):
    email: EmailStr
    username: str
    password: str

    @field_validator("password")
    @classmethod
    def _password_policy(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password needs at least 8 characters")
        # bcrypt silently truncates beyond this
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password may be at most 72 bytes")
        for check, label in _PASSWORD_CLASSES:
            if not any(check(c) for c in v):
                raise ValueError(f"Password needs at least one {label}")
        return v

    @field_validator("username")
    @classmethod
    def _username_length(cls, v: str) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 50:
            raise ValueError("Username must be 2-50 characters")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    username: str
    trial_end_date: datetime
    is_subscribed: bool
    trial_active: bool


def _user_response(user) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        username=user.username,
        trial_end_date=user.trial_end_date,
        is_subscribed=user.is_subscribed,
        trial_active=trial_active(user),
    )


@router.post("/signup", response_model=UserResponse)
async def signup(request: SignupRequest):
    logger.info("Signup attempt for email: %s", request.email)
    user = await register_user(request.email, request.username, request.password)
    logger.info("User registered successfully: %s (trial ends %s)", user.id, user.trial_end_date)
    return _user_response(user)


@router.post("/login", response_model=AccessTokenResponse)
async def login(request: LoginRequest):
    logger.info("Login attempt for email: %s", request.email)
    user = await authenticate_user(request.email, request.password)

    if not user:
        logger.warning("Failed login attempt for email: %s", request.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    access_token = create_access_token(data={"sub": str(user.id)})
    logger.info("User logged in successfully: %s", user.id)
    return AccessTokenResponse(access_token=access_token)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user=Depends(get_current_user)):
    return _user_response(current_user)
