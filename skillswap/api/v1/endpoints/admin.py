from fastapi import APIRouter, Depends, Path, Query
from typing import List, Optional
from pydantic import UUID4

from ....core.dependencies import get_admin_service, get_swap_service
from ....core.exceptions import PermissionDeniedError
from ....schemas.admin import DeletedUserResponse, PlatformReport, SwapStats, UserStats
from ....schemas.swap import SwapDetailResponse
from ....schemas.user import UserResponse
from ....services.admin_service import AdminService
from ....services.swap_service import SwapService
from ....services.user_service import is_admin
from ...v1.endpoints.users import get_current_user

router = APIRouter(tags=["admin"])

async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    if not is_admin(current_user):
        raise PermissionDeniedError(detail="Admin access required")
    return current_user

@router.patch("/ban/{user_id}", response_model=UserResponse)
async def ban_user(
    user_id: UUID4 = Path(...),
    admin: dict = Depends(require_admin),
    moderation: AdminService = Depends(get_admin_service),
):
    return await moderation.ban_user(admin, str(user_id))

@router.patch("/unban/{user_id}", response_model=UserResponse)
async def unban_user(
    user_id: UUID4 = Path(...),
    admin: dict = Depends(require_admin),
    moderation: AdminService = Depends(get_admin_service),
):
    return await moderation.unban_user(admin, str(user_id))

@router.get("/banned-users", response_model=List[UserResponse])
async def get_banned_users(
    admin: dict = Depends(require_admin),
    moderation: AdminService = Depends(get_admin_service),
):
    return await moderation.list_banned_users()

@router.get("/users", response_model=List[UserResponse])
async def get_all_users(
    admin: dict = Depends(require_admin),
    moderation: AdminService = Depends(get_admin_service),
):
    return await moderation.users.list_users()

@router.delete("/users/{user_id}", response_model=DeletedUserResponse)
async def delete_user(
    user_id: UUID4 = Path(...),
    admin: dict = Depends(require_admin),
    moderation: AdminService = Depends(get_admin_service),
):
    """
    Delete a user and every swap and feedback that references them.
    """
    return await moderation.delete_user(admin, str(user_id))

@router.get("/swaps", response_model=List[SwapDetailResponse])
async def get_all_swaps(
    status: Optional[str] = Query(None),
    admin: dict = Depends(require_admin),
    swaps: SwapService = Depends(get_swap_service),
):
    return await swaps.list_all_swaps(status=status)

@router.get("/stats/swaps", response_model=SwapStats)
async def get_swap_stats(
    admin: dict = Depends(require_admin),
    moderation: AdminService = Depends(get_admin_service),
):
    return await moderation.swap_stats()

@router.get("/stats/users", response_model=UserStats)
async def get_user_stats(
    admin: dict = Depends(require_admin),
    moderation: AdminService = Depends(get_admin_service),
):
    return await moderation.user_stats()

@router.get("/report", response_model=PlatformReport)
async def get_report(
    admin: dict = Depends(require_admin),
    moderation: AdminService = Depends(get_admin_service),
):
    """
    Platform summary for the admin dashboard export.
    """
    return await moderation.report()
