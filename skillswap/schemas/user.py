from pydantic import BaseModel, EmailStr, Field, UUID4
from typing import Optional, List
from datetime import datetime
from enum import Enum

class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"

class Availability(BaseModel):
    weekends: bool = False
    evenings: bool = False

class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    location: Optional[str] = Field(None, max_length=200)
    profile_photo: Optional[str] = None
    skills_offered: List[str] = []
    skills_wanted: List[str] = []
    availability: Availability = Availability()
    is_public: bool = True

class UserCreate(UserBase):
    password: str = Field(..., min_length=8)
    admin_token: Optional[str] = None

class UserUpdate(BaseModel):
    """Fields a user may change on their own profile. Anything else in the body is ignored."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, max_length=200)
    profile_photo: Optional[str] = None
    skills_offered: Optional[List[str]] = None
    skills_wanted: Optional[List[str]] = None
    availability: Optional[Availability] = None
    is_public: Optional[bool] = None

class UserResponse(BaseModel):
    id: UUID4
    name: str
    email: EmailStr
    location: Optional[str] = None
    profile_photo: Optional[str] = None
    skills_offered: List[str] = []
    skills_wanted: List[str] = []
    availability: Availability = Availability()
    is_public: bool = True
    role: Role = Role.USER
    banned: bool = False
    rating: float = 0.0
    review_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class PublicProfile(BaseModel):
    """Profile as shown to anonymous visitors: no email, role or moderation state."""
    id: UUID4
    name: str
    location: Optional[str] = None
    profile_photo: Optional[str] = None
    skills_offered: List[str] = []
    skills_wanted: List[str] = []
    availability: Availability = Availability()
    rating: float = 0.0
    review_count: int = 0
    created_at: Optional[datetime] = None

class UserSummary(BaseModel):
    id: UUID4
    name: str
    location: Optional[str] = None
    profile_photo: Optional[str] = None
    rating: float = 0.0
    review_count: int = 0

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class AuthResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
