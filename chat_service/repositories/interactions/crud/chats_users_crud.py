"""
CRUD operations for chat membership records.

Memberships are created with their chat by the transactional path in
`CRUDChat`; this repository covers the single-document operations that follow:
reading a membership, moving its read watermark and removing it when a
participant leaves. None of them run in a transaction.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError
from pymongo.database import Database
from pymongo.errors import PyMongoError

from chat_service.configs import get_settings
from chat_service.logger_config import get_logger, operation_logger
from chat_service.repositories.errors import EmptyError, InternalError, NotFoundError
from chat_service.repositories.interactions.database import CHATS_USERS_COLLECTION
from chat_service.repositories.interactions.models.chats_users_model import ChatsUsers

COMPONENT = "chats-users-repository"


class CRUDChatsUsers:
    """Repository class for the ``chats_users`` collection."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or get_logger(__name__, get_settings().LOG_LEVEL)

    def create(self, db: Database, membership: ChatsUsers) -> None:  # type: ignore[type-arg]
        """
        Store a single membership record.

        Raises:
            EmptyError: If the record has no id.
            InternalError: If the insert failed.
        """
        log = operation_logger(self.logger, COMPONENT, "create")
        if membership is None or not membership.id:
            log.error("empty request")
            raise EmptyError("empty request")

        try:
            db[CHATS_USERS_COLLECTION].insert_one(membership.to_document())
        except PyMongoError as exc:
            log.error("insert error: %s", exc)
            raise InternalError("insert error") from exc
        log.info("membership %s created", membership.id)

    def find(self, db: Database, chat_id: str, user_id: str) -> ChatsUsers:  # type: ignore[type-arg]
        """
        Find the membership of a user in a chat.

        Raises:
            EmptyError: If ``chat_id`` is empty.
            NotFoundError: If the user is not a member of the chat.
            InternalError: On any other storage fault.
        """
        log = operation_logger(self.logger, COMPONENT, "find")
        if not chat_id:
            log.error("empty request")
            raise EmptyError("empty request")

        try:
            document = db[CHATS_USERS_COLLECTION].find_one(
                {"chat_id": chat_id, "user_id": user_id}
            )
        except PyMongoError as exc:
            log.error("find error: %s", exc)
            raise InternalError("find error") from exc

        if document is None:
            log.error("not found in database")
            raise NotFoundError("membership not found")
        return self._decode(document)

    def find_by_chat(self, db: Database, chat_id: str) -> List[ChatsUsers]:  # type: ignore[type-arg]
        """Return every membership record of a chat."""
        log = operation_logger(self.logger, COMPONENT, "find_by_chat")
        if not chat_id:
            log.error("empty request")
            raise EmptyError("empty request")

        try:
            with db[CHATS_USERS_COLLECTION].find({"chat_id": chat_id}) as cursor:
                documents = list(cursor)
        except PyMongoError as exc:
            log.error("find error: %s", exc)
            raise InternalError("find error") from exc
        return [self._decode(document) for document in documents]

    def advance_read_date(
        self,
        db: Database,  # type: ignore[type-arg]
        chat_id: str,
        user_id: str,
        read_date: int,
    ) -> None:
        """
        Move the read watermark of a member forward.

        The watermark never moves back: an older ``read_date`` leaves it as is.

        Raises:
            EmptyError: If ``chat_id`` or ``user_id`` is empty.
            NotFoundError: If the user is not a member of the chat.
            InternalError: On any other storage fault.
        """
        log = operation_logger(self.logger, COMPONENT, "advance_read_date")
        if not chat_id or not user_id:
            log.error("empty request")
            raise EmptyError("empty request")

        try:
            result = db[CHATS_USERS_COLLECTION].update_one(
                {"chat_id": chat_id, "user_id": user_id},
                {"$max": {"max_read_date": read_date}},
            )
        except PyMongoError as exc:
            log.error("update error: %s", exc)
            raise InternalError("update error") from exc

        if result.matched_count == 0:
            log.error("not found in database")
            raise NotFoundError("membership not found")
        log.info("read date of %s in %s set to %d", user_id, chat_id, read_date)

    def delete(self, db: Database, chat_id: str, user_id: str) -> None:  # type: ignore[type-arg]
        """Remove the membership of a user who leaves a chat."""
        log = operation_logger(self.logger, COMPONENT, "delete")
        if not chat_id or not user_id:
            log.error("empty request")
            raise EmptyError("empty request")

        try:
            result = db[CHATS_USERS_COLLECTION].delete_one(
                {"chat_id": chat_id, "user_id": user_id}
            )
        except PyMongoError as exc:
            log.error("delete error: %s", exc)
            raise InternalError("delete error") from exc

        if result.deleted_count == 0:
            log.error("not found in database")
            raise NotFoundError("membership not found")
        log.info("user %s left chat %s", user_id, chat_id)

    @staticmethod
    def _decode(document: dict) -> ChatsUsers:  # type: ignore[type-arg]
        try:
            return ChatsUsers.from_document(document)
        except ValidationError as exc:
            raise InternalError("malformed membership document") from exc
