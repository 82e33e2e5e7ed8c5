"""
Filter construction for chat and user lookups.

Lookups receive partially filled criteria. Each present field contributes one
clause; how clauses combine depends on the lookup:

- ``build_chat_filter``: every clause must match (``$and``).
- ``build_any_filter``: any clause may match (``$or``).
- ``build_personal_chat_filter``: the personal chat shared by two users.

Filters are plain dicts handed unchanged to pymongo.
"""

from enum import Flag, auto
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel

from chat_service.repositories.errors import CannotFindError
from chat_service.repositories.interactions.models.chats_model import ChatType

Filter = Dict[str, Any]


class LookupMode(Flag):
    """Which criteria fields a chat lookup uses. ``NONE`` cannot be searched."""

    NONE = 0
    BY_ID = auto()
    BY_OWNER = auto()
    BY_PARTICIPANTS = auto()


class ChatCriteria(BaseModel):
    """Partial chat criteria for ``CRUDChat.find``."""

    id: Optional[str] = None
    owner_id: Optional[str] = None
    participants: List[str] = []

    @property
    def lookup_mode(self) -> LookupMode:
        mode = LookupMode.NONE
        if self.participants:
            mode |= LookupMode.BY_PARTICIPANTS
        if self.owner_id:
            mode |= LookupMode.BY_OWNER
        if self.id:
            mode |= LookupMode.BY_ID
        return mode


def build_chat_filter(criteria: ChatCriteria) -> Filter:
    """
    Build a conjunctive filter from chat criteria.

    Participants use ``$all``: the stored list must contain every given id,
    extra participants are allowed.

    Args:
        criteria (ChatCriteria): Criteria with at least one field set.

    Returns:
        Filter: ``{"$and": [...]}`` with one clause per present field.

    Raises:
        CannotFindError: If no field is set.
    """
    mode = criteria.lookup_mode
    if mode is LookupMode.NONE:
        raise CannotFindError("incorrect data to find chat")

    match: List[Filter] = []
    if LookupMode.BY_PARTICIPANTS in mode:
        match.append({"participants": {"$all": list(criteria.participants)}})
    if LookupMode.BY_OWNER in mode:
        match.append({"owner_id": criteria.owner_id})
    if LookupMode.BY_ID in mode:
        match.append({"id": criteria.id})
    return {"$and": match}


def build_any_filter(clauses: Sequence[Filter]) -> Filter:
    """Combine clauses so that a document matching any one of them is returned."""
    match = [clause for clause in clauses if clause]
    if not match:
        raise CannotFindError("incorrect data to search")
    return {"$or": match}


def build_personal_chat_filter(first_user_id: str, second_user_id: str) -> Filter:
    """
    Build the filter for the personal chat between two users.

    The owner must be one of the two users; which one does not matter, so the
    filter is the same for either argument order.
    """
    users = sorted([first_user_id, second_user_id])
    return {
        "$and": [
            {"type": ChatType.PERSONAL.value},
            {"participants": {"$all": users}},
            {"owner_id": {"$in": users}},
        ]
    }
