"""Derive the membership records created together with a chat."""

import uuid
from datetime import datetime, timezone
from typing import Callable, List, Sequence

from chat_service.repositories.interactions.models.chats_users_model import ChatsUsers

MEMBERSHIP_WINDOW_YEARS = 10


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def membership_window_end(start_ms: int) -> int:
    """Return ``start_ms`` moved forward by ten calendar years.

    The far-future end keeps a new membership open-ended. Feb 29 maps to
    Feb 28 when the target year is not a leap year.
    """
    start = datetime.fromtimestamp(start_ms / 1000, tz=timezone.utc)
    year = start.year + MEMBERSHIP_WINDOW_YEARS
    try:
        end = start.replace(year=year)
    except ValueError:
        end = start.replace(year=year, day=28)
    return start_ms + int(round((end - start).total_seconds() * 1000))


def materialize_memberships(
    chat_id: str,
    participant_ids: Sequence[str],
    now: int,
    id_factory: Callable[[], str] = new_id,
) -> List[ChatsUsers]:
    """
    Build one membership record per participant.

    All records of one call share ``now``: they are added, start and are read
    at the same instant.

    Args:
        chat_id (str): The chat being created.
        participant_ids (Sequence[str]): Participant user ids, in order.
        now (int): Creation time in epoch milliseconds.
        id_factory (Callable[[], str]): Unique id generator.

    Returns:
        List[ChatsUsers]: Records in participant order; empty for no participants.
    """
    end = membership_window_end(now)
    return [
        ChatsUsers(
            id=id_factory(),
            chat_id=chat_id,
            user_id=user_id,
            added_at=now,
            start_message_id=now,
            end_message_id=end,
            max_read_date=now,
        )
        for user_id in participant_ids
    ]
