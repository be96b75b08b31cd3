from fastapi import APIRouter, Depends, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Dict, List, Optional
from pydantic import UUID4
import logging

from ....core.config import Settings
from ....core.dependencies import get_app_settings, get_user_service
from ....core.exceptions import AuthenticationError, NotFoundError, PermissionDeniedError
from ....core.security import decode_access_token
from ....schemas.user import AuthResponse, LoginRequest, PublicProfile, UserCreate, UserResponse, UserUpdate
from ....services.user_service import UserService, role_for_admin_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])

bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Enter the access token returned by /users/login or /users/register",
)

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings),
) -> Dict:
    """Resolve the bearer token to the calling user. Banned accounts are refused."""
    if not credentials:
        raise AuthenticationError(detail="Not authenticated")

    payload = decode_access_token(credentials.credentials, settings)
    if not payload or not payload.get("sub"):
        raise AuthenticationError(detail="Invalid or expired token")

    try:
        user = await users.get_user_by_id(payload["sub"])
    except NotFoundError:
        raise AuthenticationError(detail="User not found")

    if user.get("banned"):
        raise PermissionDeniedError(detail="This account has been banned")
    return user

# Routes
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings),
):
    """Register a new user and return it with an access token."""
    role = role_for_admin_token(user_data.admin_token, settings.admin_token)
    user = await users.register(user_data, role=role)
    return {"user": user, "access_token": users.issue_token(user), "token_type": "bearer"}

@router.post("/login", response_model=AuthResponse)
async def login(credentials: LoginRequest, users: UserService = Depends(get_user_service)):
    """Log in a user and return an access token."""
    user = await users.authenticate(credentials.email, credentials.password)
    logger.info("User %s logged in", user["id"])
    return {"user": user, "access_token": users.issue_token(user), "token_type": "bearer"}

@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: dict = Depends(get_current_user)):
    return current_user

@router.get("/browse", response_model=List[PublicProfile])
async def browse_profiles(
    skill: Optional[str] = Query(None, description="Exact skill name offered or wanted"),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or skills"),
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=100),
    users: UserService = Depends(get_user_service),
):
    """
    Get public profiles, optionally filtered by skill.
    """
    return await users.browse(skill=skill, search=search, skip=skip, limit=limit)

@router.get("/profile/{user_id}", response_model=UserResponse)
async def get_profile(
    user_id: UUID4,
    current_user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """
    Get a single profile.

    Private profiles are visible to their owner, admins and users who share a swap with them.
    """
    return await users.get_profile(str(user_id), viewer=current_user)

@router.put("/profile", response_model=UserResponse)
async def update_profile(
    updates: UserUpdate,
    current_user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """Update the current user's profile."""
    return await users.update_profile(current_user["id"], updates)
