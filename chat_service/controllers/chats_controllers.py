"""Endpoints for creating and looking up chats and their memberships."""

from typing import List

from fastapi import APIRouter, Depends, status
from pymongo.database import Database

from chat_service.controllers.errors import to_http_error
from chat_service.repositories.errors import RepositoryError
from chat_service.repositories.interactions.dependencies import get_db
from chat_service.repositories.interactions.models.chats_model import Chat
from chat_service.repositories.interactions.schemas.chats_schema import (
    ChatCreate,
    PersonalChatRequest,
    ReadMarkRequest,
)
from chat_service.services.interactions.chats_services import (
    ChatsService,
    get_chats_service,
)

chats_router = APIRouter(prefix="/chats", tags=["Chats"])


@chats_router.post("", status_code=status.HTTP_201_CREATED)
def create_chat(
    data: ChatCreate,
    db: Database = Depends(get_db),  # type: ignore[type-arg]
    chats_service: ChatsService = Depends(get_chats_service),
) -> Chat:
    """
    Create a chat and its membership records.

    Args:
        data (ChatCreate): The chat draft.

    Returns:
        Chat: The persisted chat.
    """
    try:
        return chats_service.create(db, data)
    except RepositoryError as e:
        raise to_http_error(e) from e


@chats_router.post("/personal")
def get_or_create_personal_chat(
    data: PersonalChatRequest,
    db: Database = Depends(get_db),  # type: ignore[type-arg]
    chats_service: ChatsService = Depends(get_chats_service),
) -> Chat:
    """Return the personal chat between two users, creating it when missing."""
    try:
        return chats_service.get_or_create_personal(
            db, data.owner_id, data.participant_id, title=data.title
        )
    except RepositoryError as e:
        raise to_http_error(e) from e


@chats_router.get("/owned/{owner_id}")
def list_owned_chats(
    owner_id: str,
    db: Database = Depends(get_db),  # type: ignore[type-arg]
    chats_service: ChatsService = Depends(get_chats_service),
) -> List[Chat]:
    try:
        return chats_service.list_owned(db, owner_id)
    except RepositoryError as e:
        raise to_http_error(e) from e


@chats_router.get("/{chat_id}")
def get_chat(
    chat_id: str,
    db: Database = Depends(get_db),  # type: ignore[type-arg]
    chats_service: ChatsService = Depends(get_chats_service),
) -> Chat:
    try:
        return chats_service.get(db, chat_id)
    except RepositoryError as e:
        raise to_http_error(e) from e


@chats_router.post("/{chat_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_read(
    chat_id: str,
    data: ReadMarkRequest,
    db: Database = Depends(get_db),  # type: ignore[type-arg]
    chats_service: ChatsService = Depends(get_chats_service),
) -> None:
    try:
        chats_service.mark_read(db, chat_id, data.user_id, data.read_date)
    except RepositoryError as e:
        raise to_http_error(e) from e


@chats_router.delete(
    "/{chat_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
def leave_chat(
    chat_id: str,
    user_id: str,
    db: Database = Depends(get_db),  # type: ignore[type-arg]
    chats_service: ChatsService = Depends(get_chats_service),
) -> None:
    try:
        chats_service.leave(db, chat_id, user_id)
    except RepositoryError as e:
        raise to_http_error(e) from e
