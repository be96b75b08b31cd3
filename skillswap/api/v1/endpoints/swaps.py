from fastapi import APIRouter, Depends, Path, Query, status
from typing import List, Optional
from pydantic import UUID4

from ....core.dependencies import get_swap_service
from ....schemas.swap import SwapCreate, SwapDetailResponse, SwapResponse, SwapUpdate
from ....services.swap_service import SwapService
from ...v1.endpoints.users import get_current_user

router = APIRouter(tags=["swaps"])

@router.post("/request", response_model=SwapResponse, status_code=status.HTTP_201_CREATED)
async def request_swap(
    swap: SwapCreate,
    current_user: dict = Depends(get_current_user),
    swaps: SwapService = Depends(get_swap_service),
):
    """
    Create a new swap request.

    The current user offers one of their skills in exchange for one the receiver offers.
    """
    return await swaps.create_swap(current_user, swap)

@router.get("/{user_id}", response_model=List[SwapDetailResponse])
async def get_user_swaps(
    user_id: UUID4 = Path(...),
    status: Optional[str] = Query(None, description="Only return swaps in this status"),
    current_user: dict = Depends(get_current_user),
    swaps: SwapService = Depends(get_swap_service),
):
    """
    Get every swap where the user is requester or receiver, newest first.
    """
    return await swaps.list_user_swaps(str(user_id), viewer=current_user, status=status)

@router.patch("/{swap_id}", response_model=SwapResponse)
async def update_swap_status(
    swap_update: SwapUpdate,
    swap_id: UUID4 = Path(...),
    current_user: dict = Depends(get_current_user),
    swaps: SwapService = Depends(get_swap_service),
):
    """
    Update a swap status (accept, reject, cancel, complete).
    """
    return await swaps.update_status(str(swap_id), swap_update.status, actor=current_user)
