"""This module defines the User document stored in the ``user`` collection."""

from typing import Optional

from pydantic import EmailStr

from chat_service.repositories.interactions.models.document import DocumentModel


class User(DocumentModel):
    """A user account."""

    id: str = ""
    firstname: str = ""
    lastname: str = ""
    username: str = ""
    email: Optional[EmailStr] = None
