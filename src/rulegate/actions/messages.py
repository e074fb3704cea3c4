"""Service messages - the output channel of an action."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MessageType(str, Enum):
    """Kinds of messages an action can emit."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    SUCCESS = "success"


class ServiceMessage(BaseModel):
    """A reportable message produced while running an action."""

    name: str = Field(..., description="Name of the rule or step that produced the message")
    message: str = Field(..., description="Human-readable text")
    message_type: MessageType = Field(default=MessageType.ERROR, description="Kind of message")
    source: str = Field(default="", description="Action that emitted the message")
    display_to_user: bool = Field(
        default=True,
        description="Whether the message may be shown to an end user",
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "message": self.message,
            "message_type": self.message_type.value,
            "source": self.source,
            "display_to_user": self.display_to_user,
        }


class ServiceContext:
    """Ordered collection of messages emitted by one action."""

    def __init__(self):
        self._messages: list[ServiceMessage] = []

    def add_message(self, message: ServiceMessage) -> None:
        self._messages.append(message)

    @property
    def messages(self) -> list[ServiceMessage]:
        return list(self._messages)

    @property
    def errors(self) -> list[ServiceMessage]:
        return [m for m in self._messages if m.message_type == MessageType.ERROR]

    @property
    def user_messages(self) -> list[ServiceMessage]:
        return [m for m in self._messages if m.display_to_user]

    def has_errors(self) -> bool:
        return any(m.message_type == MessageType.ERROR for m in self._messages)

    def is_good(self) -> bool:
        return not self.has_errors()

    def __len__(self) -> int:
        return len(self._messages)
