"""
Authentication service business logic
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.config import ROLE_JOBSEEKER
from backend.app.core.logging_config import get_logger
from backend.app.core.security import create_access_token, get_password_hash, verify_password
from backend.app.models.profile import UserProfile
from backend.app.models.user import User
from backend.app.schemas.user import UserLogin, UserRegister

logger = get_logger("services.auth")


def _token_for(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "email": user.email, "role": user.role})


class AuthService:
    """Service for authentication operations"""

    @staticmethod
    def register_user(db: Session, user_data: UserRegister):
        """Register a new user. Job seekers get an empty profile record right away."""
        email = user_data.email.strip().lower()
        if not user_data.full_name.strip():
            return {"success": False, "message": "Full name is required"}
        existing_user = db.query(User).filter(User.email == email).first()
        if existing_user:
            return {"success": False, "message": "Email already registered"}

        try:
            new_user = User(
                full_name=user_data.full_name.strip(),
                email=email,
                hashed_password=get_password_hash(user_data.password),
                role=user_data.role,
            )
            db.add(new_user)
            db.flush()
            if new_user.role == ROLE_JOBSEEKER:
                db.add(UserProfile(user_id=new_user.id, full_name=new_user.full_name, email=email))
            db.commit()
            db.refresh(new_user)
        except IntegrityError:
            db.rollback()
            logger.warning("Registration integrity error email=%s", email)
            return {"success": False, "message": "Error registering user"}

        return {
            "success": True,
            "user": new_user,
            "message": "User registered successfully",
            "access_token": _token_for(new_user),
            "token_type": "bearer",
        }

    @staticmethod
    def login_user(db: Session, login_data: UserLogin):
        """Authenticate user and return access token"""
        user = db.query(User).filter(User.email == login_data.email.strip().lower()).first()

        if not user or not verify_password(login_data.password, user.hashed_password):
            return {"success": False, "message": "Invalid email or password"}

        if not user.is_active:
            return {"success": False, "message": "User account is inactive"}

        return {
            "success": True,
            "access_token": _token_for(user),
            "token_type": "bearer",
            "user": user,
            "message": "Login successful",
        }
