from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field


class User(BaseModel):
    name: str = Field(..., min_length=1, description="Display name")
    email: EmailStr = Field(..., description="Email")
    password: str = Field(..., min_length=1, description="Password")
    phone: str = Field("", description="Phone number")
    available: bool = Field(True, description="Whether the user can send and receive messages")


class UpdateUser(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    available: Optional[bool] = None


class UserOut(BaseModel):
    id: str = Field(..., alias="_id")
    name: str
    email: EmailStr
    phone: str = ""
    available: bool
    packets: List[str] = []
    createdAt: datetime
    updatedAt: Optional[datetime] = None
