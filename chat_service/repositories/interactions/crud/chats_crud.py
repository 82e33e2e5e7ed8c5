"""
CRUD operations for managing chats in the database.

This module provides a `CRUDChat` class with methods to:
- Create a chat together with its membership records, in one transaction.
- Find a chat by any combination of id, owner and participants.
- List the chats owned by a user.
- Find the personal chat between two users.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional

import pymongo
from pydantic import ValidationError
from pymongo import ASCENDING, IndexModel
from pymongo.database import Database
from pymongo.errors import PyMongoError

from chat_service.configs import get_settings
from chat_service.logger_config import OperationLogger, get_logger, operation_logger
from chat_service.repositories.errors import (
    CursorCloseError,
    EmptyError,
    InternalError,
    NotFoundError,
    RepositoryError,
)
from chat_service.repositories.interactions.database import (
    CHAT_COLLECTION,
    CHATS_USERS_COLLECTION,
)
from chat_service.repositories.interactions.models.chats_model import Chat
from chat_service.repositories.interactions.participants import (
    materialize_memberships,
    new_id,
    now_ms,
)
from chat_service.repositories.interactions.query.chat_filters import (
    ChatCriteria,
    Filter,
    build_chat_filter,
    build_personal_chat_filter,
)
from chat_service.repositories.interactions.schemas.chats_schema import ChatCreate
from chat_service.repositories.interactions.transaction import TransactionCoordinator

COMPONENT = "chat-repository"


class CRUDChat:
    """
    Repository class for handling database operations related to chats.

    Every operation takes the database per call and an optional ``timeout`` in
    seconds. The timeout bounds all storage calls of the operation, including
    an open transaction.
    """

    def __init__(
        self,
        transaction: Optional[TransactionCoordinator] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """
        Init class.

        Args:
            transaction (Optional[TransactionCoordinator]): Runs the creation write.
            logger (Optional[logging.Logger]): Logger used for per-call records.
            clock (Callable[[], int]): Current time in epoch milliseconds.
        """
        self.logger = logger or get_logger(__name__, get_settings().LOG_LEVEL)
        self.transaction = transaction or TransactionCoordinator(self.logger)
        self.clock = clock

    def create(
        self,
        db: Database,  # type: ignore[type-arg]
        chat_in: Optional[ChatCreate],
        timeout: Optional[float] = None,
    ) -> Chat:
        """
        Create a chat and one membership record per participant.

        Args:
            db (Database): The database.
            chat_in (ChatCreate): The chat draft.
            timeout (Optional[float]): Deadline for the whole write, in seconds.

        Returns:
            Chat: The persisted chat, with its id and creation date set.

        Raises:
            EmptyError: If the draft is missing or has no participants.
            TransactionError: If the write failed and was rolled back.
            TransactionAbortError: If the rollback failed as well.
        """
        log = operation_logger(self.logger, COMPONENT, "create")
        if chat_in is None:
            log.error("chat is nil")
            raise EmptyError("chat is nil")

        now = self.clock()
        chat = chat_in.to_chat(chat_in.id or new_id(), now)
        memberships = materialize_memberships(chat.id, chat.participants, now)

        try:
            with pymongo.timeout(timeout):
                self.transaction.create_chat(db, chat, memberships)
        except RepositoryError as exc:
            log.error("failed insert chat with transaction: %s", exc)
            raise

        log.info("chat %s created", chat.id)
        return chat

    def find(
        self,
        db: Database,  # type: ignore[type-arg]
        criteria: Optional[ChatCriteria],
        timeout: Optional[float] = None,
    ) -> Chat:
        """
        Find a chat matching every given criterion.

        Args:
            db (Database): The database.
            criteria (ChatCriteria): Any of id, owner id and participants.
            timeout (Optional[float]): Deadline for the query, in seconds.

        Returns:
            Chat: The first matching chat.

        Raises:
            EmptyError: If no criteria object is given.
            CannotFindError: If the criteria are all empty. No query is issued.
            NotFoundError: If nothing matches.
            InternalError: On any other storage fault.
        """
        log = operation_logger(self.logger, COMPONENT, "find")
        if criteria is None:
            log.error("chat is nil")
            raise EmptyError("chat is nil")

        try:
            query = build_chat_filter(criteria)
        except RepositoryError as exc:
            log.error("incorrect data to find chat: %s", exc)
            raise

        return self._find_one(db, query, timeout, log)

    def find_owned_chats(
        self,
        db: Database,  # type: ignore[type-arg]
        owner_id: str,
        timeout: Optional[float] = None,
    ) -> List[Chat]:
        """
        List every chat owned by a user, soft-deleted ones included.

        Args:
            db (Database): The database.
            owner_id (str): The owner user id.
            timeout (Optional[float]): Deadline for the scan, in seconds.

        Returns:
            List[Chat]: The chats in storage order.

        Raises:
            EmptyError: If ``owner_id`` is empty.
            InternalError: If the scan failed.
            CursorCloseError: If the scan succeeded but the cursor did not close.
        """
        log = operation_logger(self.logger, COMPONENT, "find_owned_chats")
        if not owner_id:
            log.error("owner id is empty")
            raise EmptyError("owner id is empty")

        cursor = None
        try:
            with pymongo.timeout(timeout):
                cursor = db[CHAT_COLLECTION].find({"owner_id": owner_id})
                documents = list(cursor)
        except PyMongoError as exc:
            log.error("failed scan owned chats: %s", exc)
            if cursor is not None:
                try:
                    cursor.close()
                except PyMongoError as close_exc:
                    log.error("failed close cursor after scan error: %s", close_exc)
            raise InternalError("find owned chats error") from exc

        try:
            cursor.close()
        except PyMongoError as exc:
            log.error("failed close cursor: %s", exc)
            raise CursorCloseError() from exc

        chats = [self._decode(document, log) for document in documents]
        log.info("found %d owned chats", len(chats))
        return chats

    def find_personal_chat_between_users(
        self,
        db: Database,  # type: ignore[type-arg]
        owner_id: str,
        participant_id: str,
        timeout: Optional[float] = None,
    ) -> Chat:
        """
        Find the personal chat shared by two users, whichever of them owns it.

        Raises:
            EmptyError: If either id is empty.
            NotFoundError: If the users have no personal chat.
            InternalError: On any other storage fault.
        """
        log = operation_logger(
            self.logger, COMPONENT, "find_personal_chat_between_users"
        )
        if not owner_id or not participant_id:
            log.error("owner id or participant id is empty")
            raise EmptyError("owner id or participant id is empty")

        query = build_personal_chat_filter(owner_id, participant_id)
        return self._find_one(db, query, timeout, log)

    def ensure_indexes(self, db: Database) -> None:  # type: ignore[type-arg]
        """Create the indexes backing chat and membership identity."""
        db[CHAT_COLLECTION].create_indexes(
            [
                IndexModel([("id", ASCENDING)], unique=True),
                IndexModel([("owner_id", ASCENDING)]),
            ]
        )
        db[CHATS_USERS_COLLECTION].create_indexes(
            [
                IndexModel([("id", ASCENDING)], unique=True),
                IndexModel([("chat_id", ASCENDING), ("user_id", ASCENDING)], unique=True),
            ]
        )

    def _find_one(
        self,
        db: Database,  # type: ignore[type-arg]
        query: Filter,
        timeout: Optional[float],
        log: OperationLogger,
    ) -> Chat:
        try:
            with pymongo.timeout(timeout):
                document = db[CHAT_COLLECTION].find_one(query)
        except PyMongoError as exc:
            log.error("find error: %s", exc)
            raise InternalError("find error") from exc

        if document is None:
            log.error("chat not found in database")
            raise NotFoundError("chat not found")

        chat = self._decode(document, log)
        log.info("found chat %s", chat.id)
        return chat

    @staticmethod
    def _decode(document: Mapping[str, Any], log: OperationLogger) -> Chat:
        try:
            return Chat.from_document(document)
        except ValidationError as exc:
            log.error("malformed chat document: %s", exc)
            raise InternalError("malformed chat document") from exc
