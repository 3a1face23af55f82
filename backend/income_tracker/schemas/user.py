# income_tracker/schemas/user.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional

from income_tracker.db.models import Role


class SecurityQuestionCreate(BaseModel):
    question: str = Field(min_length=1, max_length=500)
    answer: str = Field(min_length=1)


class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(min_length=3, max_length=20)
    email: EmailStr
    phone: str = Field(min_length=10, max_length=32)
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=6)
    role: Optional[Role] = None
    security_question: Optional[SecurityQuestionCreate] = Field(None, alias="securityQuestion")


class UserUpdate(BaseModel):
    """Admin patch; anything outside these three flags is ignored."""
    model_config = ConfigDict(populate_by_name=True)

    is_active: Optional[bool] = Field(None, alias="isActive")
    is_approved: Optional[bool] = Field(None, alias="isApproved")
    role: Optional[Role] = None
