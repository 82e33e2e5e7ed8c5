"""CRUD helpers for user accounts."""

import logging
import uuid
from typing import List, Optional

from pydantic import ValidationError
from pymongo import ASCENDING, IndexModel
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from chat_service.configs import get_settings
from chat_service.logger_config import get_logger, operation_logger
from chat_service.repositories.errors import (
    AlreadyExistsError,
    CannotFindError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
)
from chat_service.repositories.interactions.database import USER_COLLECTION
from chat_service.repositories.interactions.models.user_model import User
from chat_service.repositories.interactions.query.chat_filters import (
    Filter,
    build_any_filter,
)

COMPONENT = "user-repository"


class CRUDUser:
    """Database access for users."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or get_logger(__name__, get_settings().LOG_LEVEL)

    def create(self, db: Database, user: Optional[User]) -> User:  # type: ignore[type-arg]
        log = operation_logger(self.logger, COMPONENT, "create")
        log.debug("creating new user")
        if user is None:
            log.error("user is nil")
            raise InvalidArgumentError("user is nil")

        if not user.id:
            user = user.model_copy(update={"id": str(uuid.uuid4())})

        try:
            db[USER_COLLECTION].insert_one(user.to_document())
        except DuplicateKeyError as exc:
            log.error("user already exists: %s", exc)
            raise AlreadyExistsError("user already exists") from exc
        except PyMongoError as exc:
            log.error("insert error: %s", exc)
            raise InternalError("insert error") from exc

        log.info("successfully created user %s", user.id)
        return user

    def find(self, db: Database, user: Optional[User]) -> User:  # type: ignore[type-arg]
        """
        Find a user by email or username, or by id when neither is given.

        Raises:
            InvalidArgumentError: If ``user`` is None.
            CannotFindError: If no searchable field is set.
            NotFoundError: If no user matches.
            InternalError: On any other storage fault.
        """
        log = operation_logger(self.logger, COMPONENT, "find")
        if user is None:
            log.error("user is nil")
            raise InvalidArgumentError("user is nil")

        clauses: List[Filter] = []
        if user.email:
            clauses.append({"email": user.email})
        if user.username:
            clauses.append({"username": user.username})
        if not clauses and user.id:
            clauses.append({"id": user.id})

        try:
            query = build_any_filter(clauses)
        except CannotFindError:
            log.error("incorrect data to search user")
            raise

        try:
            document = db[USER_COLLECTION].find_one(query)
        except PyMongoError as exc:
            log.error("find error: %s", exc)
            raise InternalError("find error") from exc

        if document is None:
            log.error("users record not found in database")
            raise NotFoundError("user not found")

        try:
            found = User.from_document(document)
        except ValidationError as exc:
            log.error("malformed user document: %s", exc)
            raise InternalError("malformed user document") from exc
        log.info("successful find user")
        return found

    def update(self, db: Database, user: Optional[User]) -> None:  # type: ignore[type-arg]
        log = operation_logger(self.logger, COMPONENT, "update")
        if user is None or not user.id:
            log.error("user is nil or has no id")
            raise InvalidArgumentError("user is nil or has no id")

        data = user.to_document()
        try:
            db[USER_COLLECTION].update_one(
                {"id": data["id"]}, {"$set": data}, upsert=True
            )
        except PyMongoError as exc:
            log.error("update user data error: %s", exc)
            raise InternalError("update error") from exc
        log.info("successful update user data")

    def ensure_indexes(self, db: Database) -> None:  # type: ignore[type-arg]
        db[USER_COLLECTION].create_indexes(
            [
                IndexModel([("id", ASCENDING)], unique=True),
                IndexModel([("username", ASCENDING)], unique=True),
                IndexModel(
                    [("email", ASCENDING)],
                    unique=True,
                    partialFilterExpression={"email": {"$type": "string"}},
                ),
            ]
        )

    def exist(self, db: Database, user_id: str) -> bool:  # type: ignore[type-arg]
        return self._exists(db, "id", user_id, "exist")

    def exist_username(self, db: Database, username: str) -> bool:  # type: ignore[type-arg]
        return self._exists(db, "username", username, "exist_username")

    def _exists(
        self,
        db: Database,  # type: ignore[type-arg]
        field: str,
        value: str,
        operation: str,
    ) -> bool:
        log = operation_logger(self.logger, COMPONENT, operation)
        if not value:
            log.error("%s is empty", field)
            raise InvalidArgumentError(f"{field} is empty")

        try:
            document = db[USER_COLLECTION].find_one({field: value}, {"_id": 1})
        except PyMongoError as exc:
            log.error("check exist error: %s", exc)
            raise InternalError("check exist error") from exc

        log.info("%s exists: %s", field, document is not None)
        return document is not None
