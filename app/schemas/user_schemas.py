from pydantic import BaseModel, EmailStr
from typing import Optional

class UserBase(BaseModel):
    name: Optional[str] = None
    email: EmailStr

class UserRead(UserBase):
    id: int
    role: str

    class Config:
        from_attributes = True
