from pydantic import BaseModel, EmailStr, Field
from typing import Optional

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    nickname: Optional[str] = None
    weight: Optional[float] = Field(default=None, gt=0)

class AuthResponse(BaseModel):
    access_token: str
    token_type: str
