"""Test Users Services."""

from unittest.mock import MagicMock

import pytest

from chat_service.repositories.errors import AlreadyExistsError, NotFoundError
from chat_service.repositories.interactions.crud.users_crud import CRUDUser
from chat_service.repositories.interactions.models.user_model import User
from chat_service.repositories.interactions.schemas.user_schema import UserCreate
from chat_service.services.interactions.users_services import UsersService


class TestUsersService:
    """Test cases for UsersService class."""

    def setup_method(self) -> None:
        """Set up test fixtures before each test method."""
        self.mock_user_repository = MagicMock(spec=CRUDUser)
        self.service = UsersService(self.mock_user_repository)
        self.db = MagicMock()
        self.user_in = UserCreate(username="neo", email="neo@example.com")

    def test_register_stores_a_new_user(self) -> None:
        # Arrange
        stored = User(id="u1", username="neo", email="neo@example.com")
        self.mock_user_repository.find.side_effect = NotFoundError()
        self.mock_user_repository.create.return_value = stored

        # Act
        result = self.service.register(self.db, self.user_in)

        # Assert
        assert result == stored
        looked_up = self.mock_user_repository.find.call_args.args[1]
        assert looked_up.username == "neo"
        assert looked_up.email == "neo@example.com"
        self.mock_user_repository.create.assert_called_once()

    def test_register_rejects_a_taken_email_or_username(self) -> None:
        self.mock_user_repository.find.return_value = User(id="u0", username="neo")

        with pytest.raises(AlreadyExistsError):
            self.service.register(self.db, self.user_in)

        self.mock_user_repository.create.assert_not_called()

    def test_exists_checks_by_id(self) -> None:
        self.mock_user_repository.exist.return_value = True

        assert self.service.exists(self.db, "u1") is True
        self.mock_user_repository.exist.assert_called_once_with(self.db, "u1")
