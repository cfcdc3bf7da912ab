from enum import Enum
from pydantic import BaseModel, EmailStr
from typing import Literal, Optional, Union

class UserRole(str, Enum):
    USER = "user"
    OWNER = "owner"

class Caller(BaseModel):
    """Identity of the authenticated caller, passed explicitly to every service call"""
    id: str
    name: str
    email: Optional[EmailStr] = None
    role: UserRole = UserRole.USER

class TokenData(BaseModel):
    id: str
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    exp: Optional[float] = None

class UserProfile(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: UserRole = UserRole.USER

    class Config:
        from_attributes = True

# Which bookings a caller may list, resolved once per request from the role
class OwnBookingsScope(BaseModel):
    kind: Literal["own"] = "own"
    user_id: str

class OwnedStationsScope(BaseModel):
    kind: Literal["owned_stations"] = "owned_stations"
    owner_id: str

BookingScope = Union[OwnBookingsScope, OwnedStationsScope]

def resolve_booking_scope(caller: Caller) -> BookingScope:
    if caller.role == UserRole.OWNER:
        return OwnedStationsScope(owner_id=caller.id)
    return OwnBookingsScope(user_id=caller.id)
