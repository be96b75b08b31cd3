from pydantic import BaseModel, Field, UUID4
from typing import Optional
from datetime import datetime
from enum import Enum

from .user import UserSummary

class SwapStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

class SwapCreate(BaseModel):
    receiver_id: UUID4
    skill_offered: str = Field(..., min_length=1, max_length=100)
    skill_wanted: str = Field(..., min_length=1, max_length=100)
    message: Optional[str] = Field(None, max_length=500)

class SwapUpdate(BaseModel):
    # Plain string so unknown values reach the service and fail as an invalid status
    status: str

class SwapResponse(BaseModel):
    id: UUID4
    requester_id: UUID4
    receiver_id: UUID4
    skill_offered: str
    skill_wanted: str
    message: Optional[str] = None
    status: SwapStatus = SwapStatus.PENDING
    created_at: datetime
    updated_at: datetime

class SwapDetailResponse(SwapResponse):
    requester: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None
