"""
This module defines Pydantic models for handling chat-related requests.

It includes the chat draft accepted by the creation path and the payloads
used by the personal-chat and read-mark endpoints.
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, StringConstraints, field_validator, model_validator

from chat_service.repositories.interactions.models.chats_model import Chat, ChatType

UserId = Annotated[str, StringConstraints(min_length=1)]


class ChatCreate(BaseModel):
    """
    Represents the data required to create a new chat.

    Attributes:
        id (Optional[str]): Chat id; generated at creation when absent.
        title (str): Chat title.
        type (ChatType): Chat type, personal by default.
        participants (List[str]): Participant user ids, de-duplicated in order.
        owner_id (str): User id of the owner.
        label (Optional[str]): Free-form label.
    """

    id: Optional[str] = None
    title: str = ""
    type: ChatType = ChatType.PERSONAL
    participants: List[UserId] = []
    owner_id: UserId
    label: Optional[str] = None

    @field_validator("participants")
    @classmethod
    def unique_participants(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def check_personal_chat(self) -> "ChatCreate":
        if self.type == ChatType.PERSONAL:
            if len(self.participants) != 2:
                raise ValueError("a personal chat must have exactly two participants")
            if self.owner_id not in self.participants:
                raise ValueError("the owner of a personal chat must be a participant")
        return self

    def to_chat(self, chat_id: str, create_date: int) -> Chat:
        """Build the chat document persisted for this draft."""
        return Chat(
            id=chat_id,
            title=self.title,
            create_date=create_date,
            type=self.type,
            participants=list(self.participants),
            owner_id=self.owner_id,
            label=self.label,
        )


class PersonalChatRequest(BaseModel):
    """Two users whose personal chat is looked up or created."""

    owner_id: UserId
    participant_id: UserId
    title: str = ""

    @model_validator(mode="after")
    def check_distinct_users(self) -> "PersonalChatRequest":
        if self.owner_id == self.participant_id:
            raise ValueError("a personal chat needs two different users")
        return self


class ReadMarkRequest(BaseModel):
    """Advance the read watermark of a member."""

    user_id: UserId
    read_date: int
