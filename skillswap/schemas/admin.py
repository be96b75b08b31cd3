from pydantic import BaseModel, UUID4
from datetime import datetime

class SwapStats(BaseModel):
    total: int
    pending: int
    accepted: int
    rejected: int
    cancelled: int
    completed: int

class UserStats(BaseModel):
    total: int
    active: int
    banned: int

class PlatformReport(BaseModel):
    users: int
    active_users: int
    banned_users: int
    total_swaps: int
    pending_swaps: int
    completed_swaps: int
    total_feedback: int
    generated_at: datetime

class DeletedUserResponse(BaseModel):
    user_id: UUID4
    swaps_deleted: int
    feedback_deleted: int
