from pydantic import BaseModel
from typing import Optional
from evcharge.models.mod_auth import UserRole

# Error schema shared by every router
class ErrorDetail(BaseModel):
    code: str
    message: str

class ProfileResponse(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: UserRole

    class Config:
        from_attributes = True

class RoleUpdateRequest(BaseModel):
    role: UserRole
