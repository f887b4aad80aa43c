from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserSchema(BaseModel):
    id: int
    clerk_id: str
    email: str
    username: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    photo: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    clerk_id: str
    email: str
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    photo: str = ""


class UserUpdate(BaseModel):
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    photo: str = ""
