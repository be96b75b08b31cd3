from fastapi import APIRouter, Depends, Path, Query, status
from typing import List
from pydantic import UUID4

from ....core.dependencies import get_feedback_service
from ....schemas.feedback import FeedbackCreate, FeedbackDetailResponse, FeedbackResponse
from ....services.feedback_service import FeedbackService
from ...v1.endpoints.users import get_current_user

router = APIRouter(tags=["feedbacks"])

@router.post("", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def leave_feedback(
    feedback: FeedbackCreate,
    current_user: dict = Depends(get_current_user),
    feedbacks: FeedbackService = Depends(get_feedback_service),
):
    """
    Rate the other party of a completed swap.
    """
    return await feedbacks.submit_feedback(current_user, feedback)

@router.get("/{user_id}", response_model=List[FeedbackDetailResponse])
async def get_user_feedback(
    user_id: UUID4 = Path(...),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    feedbacks: FeedbackService = Depends(get_feedback_service),
):
    """
    Get all feedback a user has received.
    """
    return await feedbacks.list_feedback_for_user(str(user_id), skip=skip, limit=limit)
