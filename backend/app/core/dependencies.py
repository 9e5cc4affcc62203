"""
Dependency injection utilities
"""
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from backend.app.core.config import ROLE_EMPLOYER, ROLE_JOBSEEKER, settings
from backend.app.db import session as db_session
from backend.app.models.user import User
from backend.app.services.change_feed import ChangeFeed
from backend.app.services.change_feed import get_change_feed as _get_change_feed

security = HTTPBearer(auto_error=False)


def get_db() -> Session:
    """Get database session"""
    db = db_session.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> Callable[[], Session]:
    """Session factory for view models that open their own sessions per refresh."""
    return lambda: db_session.SessionLocal()


def get_change_feed() -> ChangeFeed:
    return _get_change_feed()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current authenticated user from JWT"""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = credentials.credentials
    try:
        payload = jwt.decode(
            token, settings.secret_key, algorithms=[settings.algorithm]
        )
        user_id: str = payload.get("sub")
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token",
            )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = db.query(User).filter(User.id == int(user_id)).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is inactive",
        )
    return user


def require_role(role: str):
    """Dependency factory: current user must have the given role."""
    def _check(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {role} accounts can access this resource",
            )
        return current_user
    return _check


get_current_seeker = require_role(ROLE_JOBSEEKER)
get_current_employer = require_role(ROLE_EMPLOYER)
