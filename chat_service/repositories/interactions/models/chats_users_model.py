"""This module defines the membership record stored in ``chats_users``."""

from pydantic import model_validator

from chat_service.repositories.interactions.models.document import DocumentModel


class ChatsUsers(DocumentModel):
    """Visibility window and read state of one user in one chat.

    Attributes:
        id (str): Membership identifier.
        chat_id (str): Chat the user belongs to.
        user_id (str): Member user id.
        added_at (int): Join time, epoch milliseconds.
        start_message_id (int): Earliest visible message time.
        end_message_id (int): Latest visible message time.
        max_read_date (int): Time of the last read message.
    """

    id: str
    chat_id: str
    user_id: str
    added_at: int
    start_message_id: int
    end_message_id: int
    max_read_date: int

    @model_validator(mode="after")
    def check_window(self) -> "ChatsUsers":
        if self.start_message_id > self.end_message_id:
            raise ValueError("start_message_id must not be after end_message_id")
        return self
