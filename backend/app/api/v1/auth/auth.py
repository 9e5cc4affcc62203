"""
Authentication endpoints - Register, Login, Get Current User, and Token Refresh
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.dependencies import get_current_user, get_db, security
from backend.app.core.logging_config import get_logger
from backend.app.core.security import create_access_token
from backend.app.models.user import User
from backend.app.schemas.user import TokenResponse, UserLogin, UserRegister, UserResponse
from backend.app.services.auth_service import AuthService

logger = get_logger("api.auth")
router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new account. Returns an access token (user is logged in after register).

    - **full_name**: Display name
    - **email**: Email address (must be unique)
    - **password**: Password
    - **role**: jobseeker or employer
    """
    logger.info("Registration attempt for email=%s role=%s", user_data.email, user_data.role)
    try:
        result = AuthService.register_user(db, user_data)

        if not result["success"]:
            logger.warning(
                "Registration failed email=%s reason=%s",
                user_data.email,
                result["message"],
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=result["message"],
            )

        user = result["user"]
        logger.info("User registered successfully user_id=%s role=%s", user.id, user.role)
        return TokenResponse(
            access_token=result["access_token"],
            token_type=result["token_type"],
            user=UserResponse.model_validate(user),
            message=result["message"],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Registration error email=%s error=%s", user_data.email, str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration error",
        )


@router.post("/login", response_model=TokenResponse)
def login(login_data: UserLogin, db: Session = Depends(get_db)):
    """
    Login user and get access token

    - **email**: User's email address
    - **password**: User's password
    """
    logger.info("Login attempt for email=%s", login_data.email)
    result = AuthService.login_user(db, login_data)

    if not result["success"]:
        logger.warning("Login failed email=%s reason=%s", login_data.email, result["message"])
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result["message"],
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = result["user"]
    logger.info("User logged in successfully user_id=%s", user.id)
    return TokenResponse(
        access_token=result["access_token"],
        token_type=result["token_type"],
        user=UserResponse.model_validate(user),
        message=result["message"],
    )


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Current account (id, full_name, email, role). Used to restore auth state on app load."""
    return UserResponse.model_validate(current_user)


@router.post("/refresh", response_model=TokenResponse)
def refresh_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    """Exchange a current (possibly expired) token for a new one."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"verify_exp": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = payload.get("sub")
    user = db.query(User).filter(User.id == int(user_id)).first() if user_id else None
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    access_token = create_access_token(data={"sub": str(user.id), "email": user.email, "role": user.role})
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )
