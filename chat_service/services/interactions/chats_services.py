"""This module provides the ChatsService class for managing chats in the application."""

from typing import List, Optional

from pymongo.database import Database

from chat_service.configs import get_settings
from chat_service.repositories.errors import InvalidArgumentError, NotFoundError
from chat_service.repositories.interactions.crud.chats_crud import CRUDChat
from chat_service.repositories.interactions.crud.chats_users_crud import CRUDChatsUsers
from chat_service.repositories.interactions.models.chats_model import Chat, ChatType
from chat_service.repositories.interactions.query.chat_filters import ChatCriteria
from chat_service.repositories.interactions.schemas.chats_schema import ChatCreate


class ChatsService:
    """Service layer for handling chat-related operations."""

    def __init__(
        self,
        chat_repository: CRUDChat,
        chats_users_repository: CRUDChatsUsers,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the ChatsService with its repositories.

        Args:
            chat_repository (CRUDChat): Repository for chat documents.
            chats_users_repository (CRUDChatsUsers): Repository for memberships.
            timeout (Optional[float]): Deadline applied to chat repository calls.
        """
        self.chat_repository = chat_repository
        self.chats_users_repository = chats_users_repository
        self.timeout = timeout

    def create(self, db: Database, chat_in: ChatCreate) -> Chat:  # type: ignore[type-arg]
        """Create a chat with its participants."""
        return self.chat_repository.create(db, chat_in, timeout=self.timeout)

    def get(self, db: Database, chat_id: str) -> Chat:  # type: ignore[type-arg]
        """
        Retrieve a chat by id.

        Raises:
            NotFoundError: If the chat does not exist.
        """
        return self.chat_repository.find(
            db, ChatCriteria(id=chat_id), timeout=self.timeout
        )

    def list_owned(self, db: Database, owner_id: str) -> List[Chat]:  # type: ignore[type-arg]
        """List the chats owned by a user."""
        return self.chat_repository.find_owned_chats(db, owner_id, timeout=self.timeout)

    def get_or_create_personal(
        self,
        db: Database,  # type: ignore[type-arg]
        owner_id: str,
        participant_id: str,
        title: str = "",
    ) -> Chat:
        """
        Return the personal chat between two users, creating it when missing.

        Two callers racing for the same pair can both miss the lookup and create
        two personal chats.

        Args:
            db (Database): The database.
            owner_id (str): User asking for the chat; owner if it gets created.
            participant_id (str): The other user.
            title (str): Title used when the chat is created.

        Returns:
            Chat: The existing or the new personal chat.

        Raises:
            InvalidArgumentError: If both ids name the same user.
        """
        if owner_id == participant_id:
            raise InvalidArgumentError("a personal chat needs two different users")

        try:
            return self.chat_repository.find_personal_chat_between_users(
                db, owner_id, participant_id, timeout=self.timeout
            )
        except NotFoundError:
            pass

        chat_in = ChatCreate(
            title=title,
            type=ChatType.PERSONAL,
            participants=[owner_id, participant_id],
            owner_id=owner_id,
        )
        return self.create(db, chat_in)

    def mark_read(
        self,
        db: Database,  # type: ignore[type-arg]
        chat_id: str,
        user_id: str,
        read_date: int,
    ) -> None:
        """Advance the read watermark of a member."""
        self.chats_users_repository.advance_read_date(db, chat_id, user_id, read_date)

    def leave(self, db: Database, chat_id: str, user_id: str) -> None:  # type: ignore[type-arg]
        """Remove a participant's membership record."""
        self.chats_users_repository.delete(db, chat_id, user_id)


# Dependency for FastAPI
def get_chats_service() -> ChatsService:
    """Retrieve an instance of ChatsService with its repositories."""
    return ChatsService(
        CRUDChat(),
        CRUDChatsUsers(),
        timeout=get_settings().REQUEST_TIMEOUT_SECONDS,
    )
