import logging
import uuid
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from ..core.exceptions import PermissionDeniedError, ValidationError
from ..core.storage import DocumentStore, FEEDBACKS_TABLE, USERS_TABLE, timestamp
from ..schemas.feedback import FeedbackCreate
from ..schemas.swap import SwapStatus
from .swap_service import SwapService

logger = logging.getLogger(__name__)


def average_rating(ratings: List[int]) -> float:
    """Mean of ``ratings`` rounded half up to one decimal place; 0.0 when empty."""
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class FeedbackService:
    def __init__(self, store: DocumentStore):
        self.store = store
        self.swaps = SwapService(store)

    async def submit_feedback(self, rater: Dict, feedback: FeedbackCreate) -> Dict:
        """
        Record feedback on a completed swap and refresh the ratee's rating.

        The ratee is always the other party of the swap.
        """
        swap = await self.swaps.get_swap(str(feedback.swap_id))
        rater_id = rater["id"]

        if rater_id not in (swap["requester_id"], swap["receiver_id"]):
            raise PermissionDeniedError(detail="You don't have permission to rate this swap")

        if swap["status"] != SwapStatus.COMPLETED.value:
            raise ValidationError(detail="You can only leave feedback on completed swaps")

        ratee_id = swap["receiver_id"] if swap["requester_id"] == rater_id else swap["requester_id"]

        existing = await self.store.execute_query(
            table=FEEDBACKS_TABLE,
            query_type="select",
            filters={"swap_id": swap["id"], "from_user_id": rater_id}
        )
        if existing:
            raise ValidationError(detail="You have already left feedback for this swap")

        feedback_data = {
            "id": str(uuid.uuid4()),
            "swap_id": swap["id"],
            "from_user_id": rater_id,
            "to_user_id": ratee_id,
            "rating": feedback.rating,
            "comment": feedback.comment,
            "created_at": timestamp(),
        }

        new_feedback = await self.store.execute_query(
            table=FEEDBACKS_TABLE,
            query_type="insert",
            data=feedback_data
        )
        logger.info("Feedback %s left by %s for %s on swap %s", feedback_data["id"], rater_id, ratee_id, swap["id"])

        await self.recompute_rating(ratee_id)
        return new_feedback[0]

    async def recompute_rating(self, user_id: str) -> Optional[Dict]:
        """
        Recompute a user's rating from every feedback they have received.

        Returns:
            The updated user, or None if the user no longer exists
        """
        received = await self.store.execute_query(
            table=FEEDBACKS_TABLE,
            query_type="select",
            filters={"to_user_id": user_id}
        )
        ratings = [entry["rating"] for entry in received]

        updated = await self.store.execute_query(
            table=USERS_TABLE,
            query_type="update",
            filters={"id": user_id},
            data={
                "rating": average_rating(ratings),
                "review_count": len(ratings),
                "updated_at": timestamp(),
            }
        )
        if not updated:
            return None

        logger.info("Rating for user %s is now %s over %d reviews", user_id, updated[0]["rating"], len(ratings))
        return updated[0]

    async def list_feedback_for_user(self, user_id: str, skip: int = 0, limit: Optional[int] = None) -> List[Dict]:
        feedbacks = await self.store.execute_query(
            table=FEEDBACKS_TABLE,
            query_type="select",
            filters={"to_user_id": str(user_id)},
            order_by={"created_at": "desc"}
        )
        end = skip + limit if limit is not None else None
        feedbacks = feedbacks[skip:end]

        raters: Dict[str, Optional[Dict]] = {}
        for entry in feedbacks:
            rater_id = entry["from_user_id"]
            if rater_id not in raters:
                users = await self.store.execute_query(
                    table=USERS_TABLE,
                    query_type="select",
                    filters={"id": rater_id}
                )
                raters[rater_id] = users[0] if users else None
            entry["from_user"] = raters[rater_id]
        return feedbacks
