"""Base protocol and message types for chat backends."""

from typing import Protocol, TypedDict, Literal, runtime_checkable


Role = Literal["system", "user", "assistant"]


class Message(TypedDict):
    """A single message in a conversation."""
    role: Role
    content: str


# One logical block of messages (header, history, sandwich or current turn)
MessageGroup = list[Message]


def system_message(content: str) -> Message:
    """Build a system message."""
    return {"role": "system", "content": content}


def user_message(content: str) -> Message:
    """Build a user message."""
    return {"role": "user", "content": content}


def assistant_message(content: str) -> Message:
    """Build an assistant message."""
    return {"role": "assistant", "content": content}


def copy_group(messages: list[Message]) -> MessageGroup:
    """Return a shallow copy of every message in a group."""
    return [Message(role=m["role"], content=m["content"]) for m in messages]


@runtime_checkable
class ChatBackend(Protocol):
    """Protocol that all chat backends must implement.

    The chain hands a backend the ordered message groups untouched.
    How group boundaries are rendered (flattened, separated, tagged)
    is up to the backend.
    """

    async def generate(self, messages: list[MessageGroup]) -> Message:
        """Send grouped messages to the model and get one response.

        Args:
            messages: Ordered message groups.

        Returns:
            The model's response message.

        Raises:
            ApiError: If the underlying API call fails.
        """
        ...

    @property
    def model_name(self) -> str:
        """Return the model name being used."""
        ...
