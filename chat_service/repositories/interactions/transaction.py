"""
Transactional creation of a chat and its membership records.

The chat document and its ``chats_users`` rows are written as one unit: both
become visible on commit, neither on failure. A single attempt is made; a
transient transaction error (e.g. a write conflict) is reported to the caller,
who owns any retry policy.
"""

import logging
from typing import Optional, Sequence

from pymongo.client_session import ClientSession, TransactionOptions
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from chat_service.configs import get_settings
from chat_service.logger_config import OperationLogger, get_logger, operation_logger
from chat_service.repositories.errors import (
    EmptyError,
    InternalError,
    TransactionAbortError,
    TransactionError,
)
from chat_service.repositories.interactions.database import (
    CHAT_COLLECTION,
    CHATS_USERS_COLLECTION,
)
from chat_service.repositories.interactions.models.chats_model import Chat
from chat_service.repositories.interactions.models.chats_users_model import ChatsUsers

COMPONENT = "chat-transaction"


class TransactionCoordinator:
    """Runs the two-collection insert of a new chat inside one transaction."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        """
        Initialize the coordinator.

        Args:
            logger (Optional[logging.Logger]): Logger used for per-call records.
        """
        self.logger = logger or get_logger(__name__, get_settings().LOG_LEVEL)
        self.read_concern = ReadConcern("local")
        self.write_concern = WriteConcern(w="majority")

    def create_chat(
        self,
        db: Database,  # type: ignore[type-arg]
        chat: Optional[Chat],
        memberships: Sequence[ChatsUsers],
    ) -> None:
        """
        Insert ``chat`` and ``memberships`` atomically.

        Args:
            db (Database): The service database.
            chat (Chat): The chat document.
            memberships (Sequence[ChatsUsers]): Membership records of the chat.

        Raises:
            EmptyError: If the chat is missing or there are no memberships.
            InternalError: If no session could be started.
            TransactionError: If the write failed and was rolled back.
            TransactionAbortError: If the write failed and the rollback failed too.
        """
        log = operation_logger(self.logger, COMPONENT, "create_chat")
        if chat is None:
            log.error("chat is nil")
            raise EmptyError("empty chat document")
        if not memberships:
            # No participants or no derived documents: an upstream bug.
            log.error("empty documents for the transaction")
            raise EmptyError("empty documents for the transaction")

        try:
            session = db.client.start_session(
                default_transaction_options=TransactionOptions(
                    read_concern=self.read_concern
                )
            )
        except PyMongoError as exc:
            log.error("failed start session: %s", exc)
            raise InternalError("failed start session") from exc

        with session:
            stage = "start transaction"
            try:
                session.start_transaction(
                    read_concern=self.read_concern, write_concern=self.write_concern
                )
                stage = "insert to chat collection"
                db[CHAT_COLLECTION].insert_one(chat.to_document(), session=session)
                stage = "insert to chats_users collection"
                db[CHATS_USERS_COLLECTION].insert_many(
                    [membership.to_document() for membership in memberships],
                    session=session,
                )
                stage = "commit transaction"
                session.commit_transaction()
            except PyMongoError as exc:
                log.error("failed %s: %s", stage, exc)
                self._abort(session, exc, log)
                raise TransactionError(f"failed {stage}", cause=exc) from exc

        log.info(
            "created chat %s with %d participants", chat.id, len(memberships)
        )

    def _abort(
        self, session: ClientSession, cause: PyMongoError, log: OperationLogger
    ) -> None:
        if cause.has_error_label("TransientTransactionError"):
            log.warning("transient transaction error, not retried")
        if not session.in_transaction:
            # Never started, or commit was attempted and the server finalized it.
            log.info("transaction already finalized, nothing to abort")
            return
        try:
            session.abort_transaction()
        except PyMongoError as abort_exc:
            log.error("failed abort transaction: %s", abort_exc)
            raise TransactionAbortError(cause, abort_exc) from abort_exc
        log.info("transaction aborted")
