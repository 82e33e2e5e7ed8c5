"""Service helpers for user accounts."""

from pymongo.database import Database

from chat_service.repositories.errors import AlreadyExistsError, NotFoundError
from chat_service.repositories.interactions.crud.users_crud import CRUDUser
from chat_service.repositories.interactions.models.user_model import User
from chat_service.repositories.interactions.schemas.user_schema import UserCreate


class UsersService:
    """Business logic around user registration and lookup."""

    def __init__(self, user_repository: CRUDUser) -> None:
        self.user_repository = user_repository

    def register(self, db: Database, user_in: UserCreate) -> User:  # type: ignore[type-arg]
        """
        Store a new user.

        Username and email must be unique.

        Raises:
            AlreadyExistsError: If a user with the same email or username exists.
        """
        user = user_in.to_user()
        try:
            self.user_repository.find(db, user)
        except NotFoundError:
            return self.user_repository.create(db, user)
        raise AlreadyExistsError("user with this email or username already exists")

    def get(self, db: Database, user_id: str) -> User:  # type: ignore[type-arg]
        return self.user_repository.find(db, User(id=user_id))

    def exists(self, db: Database, user_id: str) -> bool:  # type: ignore[type-arg]
        return self.user_repository.exist(db, user_id)


def get_users_service() -> UsersService:
    """Retrieve an instance of UsersService."""
    return UsersService(CRUDUser())
