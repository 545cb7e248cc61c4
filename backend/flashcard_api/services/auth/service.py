import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from typing import Optional
from datetime import datetime, timedelta, timezone

from flashcard_api.db.database import async_session_maker
from flashcard_api.db.models import Account
from flashcard_api.services.auth.access_gate import Denied, authorize
from flashcard_api.services.auth.security import (
    access_token_subject,
    hash_password,
    verify_password,
)
from flashcard_api.services.flashcard.errors import AccessDeniedError
from flashcard_api.core.config import settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def register_user(email: str, username: str, password: str) -> Account:
    async with async_session_maker() as session:
        existing = await session.scalar(select(Account).where(Account.email == email))
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        now = datetime.now(timezone.utc)
        account = Account(
            email=email,
            username=username,
            hashed_password=hash_password(password),
            trial_end_date=now + timedelta(days=settings.TRIAL_DURATION_DAYS),
            is_subscribed=False,
            created_at=now,
        )
        session.add(account)
        await session.commit()
        await session.refresh(account)
        return account


async def authenticate_user(email: str, password: str) -> Optional[Account]:
    async with async_session_maker() as session:
        account = await session.scalar(select(Account).where(Account.email == email))

    if not account:
        return None
    if not verify_password(password, account.hashed_password):
        return None
    return account


async def get_user_by_id(user_id: str) -> Optional[Account]:
    async with async_session_maker() as session:
        return await session.get(Account, user_id)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Account:
    """Extract and validate user from Bearer token in Authorization header."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = access_token_subject(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user = await get_user_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"}
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is disabled"
        )

    return user


async def require_generation_access(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Account:
    """Run the access gate for the generation endpoint.

    Raises:
        AccessDeniedError: 401 for ``unauthenticated``, 403 for ``trial_expired``.
    """
    token = credentials.credentials if credentials else None
    user_id = access_token_subject(token)
    account = await get_user_by_id(user_id) if user_id else None
    if account is not None and not account.is_active:
        account = None

    decision = authorize(token, account)
    if isinstance(decision, Denied):
        logger.info("Generation denied: %s (user=%s)", decision.reason, user_id or "-")
        raise AccessDeniedError(decision.reason)
    return account
