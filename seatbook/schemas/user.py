from typing import Optional
from pydantic import BaseModel, UUID4


# Compact user for nested booking responses
class UserSummary(BaseModel):
    id: UUID4
    name: str
    email: str
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str


class AdminProfile(BaseModel):
    username: str
    role: str
