# fintrack/api/deps.py
from datetime import date
from typing import Optional, Tuple
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import jwt
import uuid

from fintrack.core.database import get_async_session
from fintrack.core.auth import User, TOKEN_AUDIENCE
from fintrack.core.config import settings

optional_security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials] = None) -> Optional[str]:
    """
    Token from the Authorization header, the ``token``/``access_token`` query
    parameter, or the ``access_token`` cookie, in that order.
    """
    auth_header = request.headers.get("Authorization", "")
    token = None

    if auth_header.startswith("Bearer "):
        token = auth_header[7:]
    elif credentials and credentials.credentials:
        token = credentials.credentials

    if not token:
        token = request.query_params.get("token") or request.query_params.get("access_token")

    if not token:
        token = request.cookies.get("access_token")
        if token and token.startswith("Bearer "):
            token = token[7:]

    return token


async def user_from_token(token: Optional[str], db: AsyncSession) -> User:
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=TOKEN_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise _unauthorized("Invalid token")

    user_id_str = payload.get("sub")
    if not user_id_str:
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        raise _unauthorized("Invalid user ID format in token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()

    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise _unauthorized("Inactive user")

    return user


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> User:
    return await user_from_token(extract_token(request, credentials), db)


# Optional version of get_current_user that doesn't raise exceptions
async def get_optional_current_user(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[User]:
    """
    Like get_current_user but returns None when nobody is signed in. Write
    endpoints use it so the store layer itself refuses ownerless writes.
    """
    try:
        return await get_current_user(request, db, credentials)
    except HTTPException:
        return None


def owner_id_of(user: Optional[User]) -> Optional[uuid.UUID]:
    return uuid.UUID(str(user.id)) if user is not None else None


def chart_window(
    start: Optional[date] = Query(None, description="First day shown, YYYY-MM-DD"),
    end: Optional[date] = Query(None, description="Last day shown, YYYY-MM-DD"),
) -> Tuple[Optional[str], Optional[str]]:
    """Requested chart window as day keys; rejects windows longer than MAX_CHART_DAYS."""
    if start and end and (end - start).days + 1 > settings.MAX_CHART_DAYS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Chart window is limited to {settings.MAX_CHART_DAYS} days",
        )
    return (
        start.isoformat() if start else None,
        end.isoformat() if end else None,
    )
