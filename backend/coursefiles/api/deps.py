"""FastAPI dependency injection — token claims, capabilities, course."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from coursefiles.config import settings
from coursefiles.database import get_db
from coursefiles.models.context import Context
from coursefiles.services.course_files import get_course_context

logger = logging.getLogger(__name__)

CAP_VIEW = "local/coursefiles:view"
CAP_CHANGE_LICENSE = "local/coursefiles:change_license"

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.api_prefix}/auth/login",
    auto_error=False,
)


@dataclass
class CurrentUser:
    """Caller as described by the LMS-issued token."""
    username: str
    userid: int | None = None
    capabilities: set[str] = field(default_factory=set)
    # Course ids the capabilities apply to; None means site-wide
    courses: set[int] | None = None

    def has_capability(self, capability: str, course_id: int | None = None) -> bool:
        if capability not in self.capabilities:
            return False
        return self.courses is None or course_id is None or course_id in self.courses


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> CurrentUser:
    """Decode the bearer token issued by the LMS."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No authentication token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.token_algorithm],
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    username: str | None = payload.get("sub") or payload.get("username")
    if not username:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: no subject claim",
        )
    courses = payload.get("courses")
    return CurrentUser(
        username=username,
        userid=payload.get("uid"),
        capabilities=set(payload.get("capabilities", [])),
        courses=set(courses) if courses is not None else None,
    )


async def get_course_scope(course_id: int, db: AsyncSession = Depends(get_db)) -> Context:
    """Context of the course in the path; 404 when the course is unknown."""
    context = await get_course_context(db, course_id)
    if context is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return context


def require_capability(capability: str):
    """Dependency factory — 403 unless the caller holds ``capability``."""

    async def _check(course_id: int, user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not user.has_capability(capability, course_id):
            logger.debug("User %s lacks %s in course %s", user.username, capability, course_id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing capability {capability}",
            )
        return user

    return _check
