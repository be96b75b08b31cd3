import logging
from datetime import datetime, timezone
from typing import Dict, List

from ..core.config import Settings
from ..core.exceptions import ValidationError
from ..core.storage import DocumentStore, FEEDBACKS_TABLE, SWAPS_TABLE, USERS_TABLE
from ..schemas.swap import SwapStatus
from ..schemas.user import Role
from .feedback_service import FeedbackService
from .user_service import UserService

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.users = UserService(store, settings)
        self.feedback = FeedbackService(store)

    async def ban_user(self, admin: Dict, user_id: str) -> Dict:
        if str(user_id) == admin["id"]:
            raise ValidationError(detail="You cannot ban yourself")
        user = await self.users.set_banned(str(user_id), True)
        logger.info("Admin %s banned user %s", admin["id"], user_id)
        return user

    async def unban_user(self, admin: Dict, user_id: str) -> Dict:
        user = await self.users.set_banned(str(user_id), False)
        logger.info("Admin %s unbanned user %s", admin["id"], user_id)
        return user

    async def list_banned_users(self) -> List[Dict]:
        return await self.users.list_users(banned=True)

    async def delete_user(self, admin: Dict, user_id: str) -> Dict:
        """
        Delete a user together with every swap and feedback that names them.

        Users who received feedback from the deleted user get their rating
        recomputed, since that feedback no longer counts.
        """
        user_id = str(user_id)
        if user_id == admin["id"]:
            raise ValidationError(detail="You cannot delete yourself")
        await self.users.get_user_by_id(user_id)

        authored = await self.store.execute_query(
            table=FEEDBACKS_TABLE,
            query_type="select",
            filters={"from_user_id": user_id}
        )
        affected_ratees = {entry["to_user_id"] for entry in authored} - {user_id}

        deleted_feedback = await self.store.execute_query(
            table=FEEDBACKS_TABLE,
            query_type="delete",
            or_filters=[{"from_user_id": user_id}, {"to_user_id": user_id}]
        )
        deleted_swaps = await self.store.execute_query(
            table=SWAPS_TABLE,
            query_type="delete",
            or_filters=[{"requester_id": user_id}, {"receiver_id": user_id}]
        )
        await self.store.execute_query(
            table=USERS_TABLE,
            query_type="delete",
            filters={"id": user_id}
        )

        for ratee_id in sorted(affected_ratees):
            await self.feedback.recompute_rating(ratee_id)

        logger.info(
            "Admin %s deleted user %s (%d swaps, %d feedback)",
            admin["id"], user_id, len(deleted_swaps), len(deleted_feedback),
        )
        return {
            "user_id": user_id,
            "swaps_deleted": len(deleted_swaps),
            "feedback_deleted": len(deleted_feedback),
        }

    async def swap_stats(self) -> Dict[str, int]:
        stats = {
            "total": await self.store.execute_query(table=SWAPS_TABLE, query_type="count"),
        }
        for swap_status in SwapStatus:
            stats[swap_status.value] = await self.store.execute_query(
                table=SWAPS_TABLE,
                query_type="count",
                filters={"status": swap_status.value}
            )
        return stats

    async def user_stats(self) -> Dict[str, int]:
        return {
            "total": await self.store.execute_query(table=USERS_TABLE, query_type="count"),
            "active": await self.store.execute_query(
                table=USERS_TABLE,
                query_type="count",
                filters={"role": Role.USER.value, "banned": False}
            ),
            "banned": await self.store.execute_query(
                table=USERS_TABLE,
                query_type="count",
                filters={"role": Role.USER.value, "banned": True}
            ),
        }

    async def report(self) -> Dict:
        swaps = await self.swap_stats()
        users = await self.user_stats()
        return {
            "users": users["total"],
            "active_users": users["active"],
            "banned_users": users["banned"],
            "total_swaps": swaps["total"],
            "pending_swaps": swaps[SwapStatus.PENDING.value],
            "completed_swaps": swaps[SwapStatus.COMPLETED.value],
            "total_feedback": await self.store.execute_query(table=FEEDBACKS_TABLE, query_type="count"),
            "generated_at": datetime.now(timezone.utc),
        }
