"""Test the user repository."""

import pytest
from pymongo.errors import DuplicateKeyError, PyMongoError

from chat_service.repositories.errors import (
    AlreadyExistsError,
    CannotFindError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
)
from chat_service.repositories.interactions.crud.users_crud import CRUDUser
from chat_service.repositories.interactions.models.user_model import User


class TestCRUDUser:
    """Test cases for CRUDUser."""

    def setup_method(self) -> None:
        self.repository = CRUDUser()
        self.user = User(
            id="7d05392e-1675-43df-a3e6-bd3a834dd729",
            email="test@example.com",
            username="test_user",
            firstname="Test",
            lastname="User",
        )

    def test_create_assigns_missing_id(self, fake_db) -> None:
        created = self.repository.create(fake_db, self.user.model_copy(update={"id": ""}))

        assert created.id
        assert fake_db["user"].documents[0]["id"] == created.id

    def test_create_rejects_none(self, fake_db) -> None:
        with pytest.raises(InvalidArgumentError):
            self.repository.create(fake_db, None)

    def test_create_duplicate_key_is_already_exists(self, fake_db) -> None:
        fake_db["user"].errors["insert_one"] = DuplicateKeyError("E11000 username")

        with pytest.raises(AlreadyExistsError):
            self.repository.create(fake_db, self.user)

    def test_ensure_indexes_makes_username_and_email_unique(self, fake_db) -> None:
        self.repository.ensure_indexes(fake_db)

        unique = [
            list(index.document["key"].keys())
            for index in fake_db["user"].indexes
            if index.document.get("unique")
        ]
        assert ["username"] in unique
        assert ["email"] in unique

    def test_find_by_email(self, fake_db) -> None:
        self.repository.create(fake_db, self.user)

        assert self.repository.find(fake_db, User(email="test@example.com")) == self.user

    def test_find_by_id_when_nothing_else_is_set(self, fake_db) -> None:
        self.repository.create(fake_db, self.user)

        assert self.repository.find(fake_db, User(id=self.user.id)) == self.user

    def test_find_without_criteria(self, fake_db) -> None:
        with pytest.raises(CannotFindError):
            self.repository.find(fake_db, User())
        assert fake_db.collections == {}

    def test_find_missing_user(self, fake_db) -> None:
        with pytest.raises(NotFoundError):
            self.repository.find(fake_db, User(username="ghost"))

    def test_update_upserts_by_id(self, fake_db) -> None:
        self.repository.update(fake_db, self.user)
        self.repository.update(fake_db, self.user.model_copy(update={"firstname": "New"}))

        documents = fake_db["user"].documents
        assert len(documents) == 1
        assert documents[0]["firstname"] == "New"

    def test_update_failure_is_internal(self, fake_db) -> None:
        fake_db["user"].errors["update_one"] = PyMongoError("down")

        with pytest.raises(InternalError):
            self.repository.update(fake_db, self.user)

    def test_exist_and_exist_username(self, fake_db) -> None:
        self.repository.create(fake_db, self.user)

        assert self.repository.exist(fake_db, self.user.id) is True
        assert self.repository.exist(fake_db, "other") is False
        assert self.repository.exist_username(fake_db, "test_user") is True

    def test_exist_rejects_empty_input(self, fake_db) -> None:
        with pytest.raises(InvalidArgumentError):
            self.repository.exist(fake_db, "")
        with pytest.raises(InvalidArgumentError):
            self.repository.exist_username(fake_db, "")
