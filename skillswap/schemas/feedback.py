from pydantic import BaseModel, Field, UUID4
from typing import Optional
from datetime import datetime

from .user import UserSummary

class FeedbackCreate(BaseModel):
    swap_id: UUID4
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)

class FeedbackResponse(BaseModel):
    id: UUID4
    swap_id: UUID4
    from_user_id: UUID4
    to_user_id: UUID4
    rating: int
    comment: Optional[str] = None
    created_at: datetime

class FeedbackDetailResponse(FeedbackResponse):
    from_user: Optional[UserSummary] = None
