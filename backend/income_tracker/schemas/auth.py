# income_tracker/schemas/auth.py
from pydantic import BaseModel, Field
from typing import Optional


class LoginRequest(BaseModel):
    # username, email or phone
    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenPayload(BaseModel):
    sub: str
    username: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    exp: Optional[int] = None
