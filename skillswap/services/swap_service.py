"""Swap request lifecycle: creation, status transitions and listings."""

import logging
import uuid
from typing import Dict, List, Optional, Set

from ..core.exceptions import (
    InvalidStatusError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from ..core.storage import DocumentStore, SWAPS_TABLE, USERS_TABLE, timestamp
from ..schemas.swap import SwapCreate, SwapStatus
from .user_service import is_admin

logger = logging.getLogger(__name__)

# Allowed transitions: from_status -> {to_status, ...}. Nothing moves back to pending.
ALLOWED_TRANSITIONS: Dict[SwapStatus, Set[SwapStatus]] = {
    SwapStatus.PENDING: {
        SwapStatus.ACCEPTED,
        SwapStatus.REJECTED,
        SwapStatus.CANCELLED,
        SwapStatus.COMPLETED,
    },
    SwapStatus.ACCEPTED: {SwapStatus.COMPLETED},
    SwapStatus.REJECTED: set(),
    SwapStatus.CANCELLED: set(),
    SwapStatus.COMPLETED: set(),
}


def parse_status(value: str) -> SwapStatus:
    try:
        return SwapStatus(value)
    except ValueError:
        raise InvalidStatusError(value)


def allowed_transitions(current: SwapStatus, require_accepted_before_completion: bool = False) -> Set[SwapStatus]:
    allowed = set(ALLOWED_TRANSITIONS[current])
    if require_accepted_before_completion and current == SwapStatus.PENDING:
        allowed.discard(SwapStatus.COMPLETED)
    return allowed


class SwapService:
    def __init__(self, store: DocumentStore, require_accepted_before_completion: bool = False):
        self.store = store
        self.require_accepted_before_completion = require_accepted_before_completion

    async def _get_user(self, user_id: str) -> Optional[Dict]:
        users = await self.store.execute_query(
            table=USERS_TABLE,
            query_type="select",
            filters={"id": user_id}
        )
        return users[0] if users else None

    async def create_swap(self, requester: Dict, swap: SwapCreate) -> Dict:
        """
        Create a pending swap request from ``requester`` to ``swap.receiver_id``.

        The requester must offer ``skill_offered`` and the receiver must offer
        ``skill_wanted``.
        """
        receiver_id = str(swap.receiver_id)
        if receiver_id == requester["id"]:
            raise ValidationError(detail="You cannot request a swap with yourself")

        receiver = await self._get_user(receiver_id)
        if not receiver:
            raise NotFoundError(detail="Receiver not found")

        if requester.get("banned"):
            raise PermissionDeniedError(detail="This account has been banned")
        if receiver.get("banned"):
            raise PermissionDeniedError(detail="You cannot request a swap with a banned user")

        if swap.skill_offered not in requester.get("skills_offered", []):
            raise ValidationError(detail=f"You do not offer the skill '{swap.skill_offered}'")
        if swap.skill_wanted not in receiver.get("skills_offered", []):
            raise ValidationError(detail=f"{receiver['name']} does not offer the skill '{swap.skill_wanted}'")

        now = timestamp()
        swap_data = {
            "id": str(uuid.uuid4()),
            "requester_id": requester["id"],
            "receiver_id": receiver_id,
            "skill_offered": swap.skill_offered,
            "skill_wanted": swap.skill_wanted,
            "message": swap.message,
            "status": SwapStatus.PENDING.value,
            "created_at": now,
            "updated_at": now,
        }

        new_swap = await self.store.execute_query(
            table=SWAPS_TABLE,
            query_type="insert",
            data=swap_data
        )
        logger.info("Swap %s requested by %s to %s", swap_data["id"], requester["id"], receiver_id)
        return new_swap[0]

    async def get_swap(self, swap_id: str) -> Dict:
        swaps = await self.store.execute_query(
            table=SWAPS_TABLE,
            query_type="select",
            filters={"id": str(swap_id)}
        )
        if not swaps:
            raise NotFoundError(detail="Swap not found")
        return swaps[0]

    @staticmethod
    def _check_actor(swap: Dict, target: SwapStatus, actor: Dict) -> None:
        if is_admin(actor):
            return

        is_requester = actor["id"] == swap["requester_id"]
        is_receiver = actor["id"] == swap["receiver_id"]

        if not is_requester and not is_receiver:
            raise PermissionDeniedError(detail="You don't have permission to update this swap")
        if target in (SwapStatus.ACCEPTED, SwapStatus.REJECTED) and not is_receiver:
            raise PermissionDeniedError(detail="Only the receiver can accept or reject a swap")
        if target == SwapStatus.CANCELLED and not is_requester:
            raise PermissionDeniedError(detail="Only the requester can cancel a swap")

    async def update_status(self, swap_id: str, new_status: str, actor: Dict) -> Dict:
        """
        Move a swap to ``new_status``.

        Raises:
            InvalidStatusError: ``new_status`` is not a known status
            NotFoundError: the swap does not exist
            PermissionDeniedError: ``actor`` may not make this change
            InvalidTransitionError: the swap cannot move from its current status
        """
        target = parse_status(new_status)
        swap = await self.get_swap(swap_id)
        current = SwapStatus(swap["status"])

        self._check_actor(swap, target, actor)

        if target not in allowed_transitions(current, self.require_accepted_before_completion):
            raise InvalidTransitionError(current.value, target.value)

        updated_swap = await self.store.execute_query(
            table=SWAPS_TABLE,
            query_type="update",
            filters={"id": str(swap_id)},
            data={"status": target.value, "updated_at": timestamp()}
        )
        if not updated_swap:
            raise NotFoundError(detail="Swap not found")

        logger.info("Swap %s moved from %s to %s by %s", swap_id, current.value, target.value, actor["id"])
        return updated_swap[0]

    async def attach_parties(self, swaps: List[Dict]) -> List[Dict]:
        """Add ``requester`` and ``receiver`` profiles to each swap."""
        cache: Dict[str, Optional[Dict]] = {}
        for swap in swaps:
            for key, field in (("requester", "requester_id"), ("receiver", "receiver_id")):
                user_id = swap[field]
                if user_id not in cache:
                    cache[user_id] = await self._get_user(user_id)
                swap[key] = cache[user_id]
        return swaps

    async def list_user_swaps(self, user_id: str, viewer: Dict, status: Optional[str] = None) -> List[Dict]:
        user_id = str(user_id)
        if viewer["id"] != user_id and not is_admin(viewer):
            raise PermissionDeniedError(detail="You don't have permission to view these swaps")

        filters = {"status": parse_status(status).value} if status else None
        swaps = await self.store.execute_query(
            table=SWAPS_TABLE,
            query_type="select",
            filters=filters,
            or_filters=[{"requester_id": user_id}, {"receiver_id": user_id}],
            order_by={"created_at": "desc"}
        )
        return await self.attach_parties(swaps)

    async def list_all_swaps(self, status: Optional[str] = None) -> List[Dict]:
        filters = {"status": parse_status(status).value} if status else None
        swaps = await self.store.execute_query(
            table=SWAPS_TABLE,
            query_type="select",
            filters=filters,
            order_by={"created_at": "desc"}
        )
        return await self.attach_parties(swaps)
