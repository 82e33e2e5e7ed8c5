"""Pydantic schemas for users."""

from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, StringConstraints

from chat_service.repositories.interactions.models.user_model import User


class UserCreate(BaseModel):
    """Payload required to register a user."""

    id: Optional[str] = None
    firstname: Annotated[str, StringConstraints(max_length=120)] = ""
    lastname: Annotated[str, StringConstraints(max_length=120)] = ""
    username: Annotated[str, StringConstraints(min_length=1, max_length=64)]
    email: EmailStr

    def to_user(self) -> User:
        return User(**self.model_dump(exclude={"id"}), id=self.id or "")
