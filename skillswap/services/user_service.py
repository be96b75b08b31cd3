import logging
import uuid
from typing import Dict, List, Optional

from ..core.config import Settings
from ..core.exceptions import AuthenticationError, NotFoundError, PermissionDeniedError, ValidationError
from ..core.security import create_access_token, get_password_hash, verify_password
from ..core.storage import DocumentStore, SWAPS_TABLE, USERS_TABLE, timestamp
from ..schemas.user import Role, UserCreate, UserUpdate

logger = logging.getLogger(__name__)

# Profile fields that may be cleared by sending null
NULLABLE_PROFILE_FIELDS = {"location", "profile_photo"}


def is_admin(user: Dict) -> bool:
    return user.get("role") == Role.ADMIN.value


def role_for_admin_token(presented: Optional[str], configured: str) -> Role:
    """
    Role granted to a registration that presents ``presented``.

    No token means a regular user. A token must equal the configured admin
    token, and no token matches when none is configured.
    """
    if not presented:
        return Role.USER
    if not configured or presented != configured:
        raise PermissionDeniedError(detail="Invalid admin token")
    return Role.ADMIN


class UserService:
    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings

    async def get_user_by_id(self, user_id: str) -> Dict:
        users = await self.store.execute_query(
            table=USERS_TABLE,
            query_type="select",
            filters={"id": str(user_id)}
        )
        if not users:
            raise NotFoundError(detail="User not found")
        return users[0]

    async def get_user_by_email(self, email: str) -> Optional[Dict]:
        users = await self.store.execute_query(
            table=USERS_TABLE,
            query_type="select",
            filters={"email": email.lower()}
        )
        return users[0] if users else None

    async def register(self, user: UserCreate, role: Role = Role.USER) -> Dict:
        """Create a new account with the given role."""
        email = user.email.lower()
        if await self.get_user_by_email(email):
            raise ValidationError(detail="Email already registered")

        now = timestamp()
        new_user = {
            **user.model_dump(exclude={"password", "admin_token"}),
            "id": str(uuid.uuid4()),
            "email": email,
            "hashed_password": get_password_hash(user.password, self.settings),
            "role": role.value,
            "banned": False,
            "rating": 0.0,
            "review_count": 0,
            "created_at": now,
            "updated_at": now,
        }

        created = await self.store.execute_query(
            table=USERS_TABLE,
            query_type="insert",
            data=new_user
        )
        logger.info("Registered user %s with role %s", new_user["id"], role.value)
        return created[0]

    async def authenticate(self, email: str, password: str) -> Dict:
        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.get("hashed_password", ""), self.settings):
            logger.warning("Failed login attempt for %s", email)
            raise AuthenticationError(detail="Invalid credentials")
        if user.get("banned"):
            logger.warning("Banned user %s tried to log in", user["id"])
            raise PermissionDeniedError(detail="This account has been banned")
        return user

    def issue_token(self, user: Dict) -> str:
        return create_access_token(
            data={"sub": user["id"], "role": user.get("role", Role.USER.value)},
            settings=self.settings,
        )

    async def browse(
        self,
        skill: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict]:
        """
        List public, non-banned profiles.

        Args:
            skill: Exact skill name that must appear in the offered or wanted list
            search: Case-insensitive text matched against the name and every skill
            skip: Number of matching profiles to skip
            limit: Maximum number of profiles to return

        Returns:
            The matching profiles, oldest account first
        """
        users = await self.store.execute_query(
            table=USERS_TABLE,
            query_type="select",
            filters={"is_public": True, "banned": False},
            order_by={"created_at": "asc"}
        )

        # Array membership is filtered here so both store backends behave the same
        if skill:
            users = [
                user for user in users
                if skill in user.get("skills_offered", []) or skill in user.get("skills_wanted", [])
            ]

        if search:
            term = search.lower()
            users = [
                user for user in users
                if term in user.get("name", "").lower()
                or any(term in s.lower() for s in user.get("skills_offered", []))
                or any(term in s.lower() for s in user.get("skills_wanted", []))
            ]

        end = skip + limit if limit is not None else None
        return users[skip:end]

    async def has_swap_between(self, user_a: str, user_b: str) -> bool:
        swaps = await self.store.execute_query(
            table=SWAPS_TABLE,
            query_type="select",
            or_filters=[
                {"requester_id": user_a, "receiver_id": user_b},
                {"requester_id": user_b, "receiver_id": user_a},
            ],
            limit=1
        )
        return bool(swaps)

    async def get_profile(self, user_id: str, viewer: Dict) -> Dict:
        """Return a profile if the viewer is allowed to see it."""
        user = await self.get_user_by_id(user_id)

        if user.get("is_public"):
            return user
        if viewer["id"] == user["id"] or is_admin(viewer):
            return user
        if await self.has_swap_between(viewer["id"], user["id"]):
            return user

        raise PermissionDeniedError(detail="This profile is private")

    async def update_profile(self, user_id: str, updates: UserUpdate) -> Dict:
        update_data = {
            key: value
            for key, value in updates.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_PROFILE_FIELDS
        }
        if not update_data:
            return await self.get_user_by_id(user_id)

        update_data["updated_at"] = timestamp()
        updated = await self.store.execute_query(
            table=USERS_TABLE,
            query_type="update",
            filters={"id": str(user_id)},
            data=update_data
        )
        if not updated:
            raise NotFoundError(detail="User not found")

        logger.info("User %s updated fields %s", user_id, sorted(update_data))
        return updated[0]

    async def set_banned(self, user_id: str, banned: bool) -> Dict:
        await self.get_user_by_id(user_id)
        updated = await self.store.execute_query(
            table=USERS_TABLE,
            query_type="update",
            filters={"id": str(user_id)},
            data={"banned": banned, "updated_at": timestamp()}
        )
        return updated[0]

    async def list_users(self, banned: Optional[bool] = None) -> List[Dict]:
        filters = {"banned": banned} if banned is not None else None
        return await self.store.execute_query(
            table=USERS_TABLE,
            query_type="select",
            filters=filters,
            order_by={"created_at": "asc"}
        )
