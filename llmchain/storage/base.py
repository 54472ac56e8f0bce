"""Base protocol for conversation history stores."""

from typing import Protocol, runtime_checkable

from llmchain.backends.base import Message


@runtime_checkable
class ChatHistory(Protocol):
    """Protocol that all history stores must implement.

    A history is an ordered, append-only log of messages that a chain
    reads in full before each call and appends to afterwards.
    """

    def messages(self) -> list[Message]:
        """Get every stored message, oldest first.

        Returns:
            A copy of the stored messages.
        """
        ...

    def add_message(self, message: Message) -> None:
        """Append a single message.

        Args:
            message: Message to append.
        """
        ...

    def clear(self) -> None:
        """Remove all stored messages."""
        ...
