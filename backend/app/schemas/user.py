"""
User Pydantic schemas for request/response validation
"""
from typing import Literal, Optional

from pydantic import BaseModel


class UserRegister(BaseModel):
    """Schema for user registration"""
    full_name: str
    email: str
    password: str
    role: Literal["jobseeker", "employer"] = "jobseeker"


class UserLogin(BaseModel):
    """Schema for user login"""
    email: str
    password: str


class UserResponse(BaseModel):
    """Schema for user response"""
    id: Optional[int] = None
    full_name: str
    email: str
    role: str

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Schema for token response"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    message: Optional[str] = None
