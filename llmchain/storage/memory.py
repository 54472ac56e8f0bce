"""In-memory conversation history.

Keeps messages in a list for the lifetime of the process.
"""

from llmchain.backends.base import Message, copy_group


class InMemoryChatHistory:
    """In-memory history store.

    No persistence: data is lost when the process ends.

    Example:
        >>> history = InMemoryChatHistory()
        >>> history.add_message({"role": "user", "content": "Hello"})
        >>> history.messages()
        [{'role': 'user', 'content': 'Hello'}]
    """

    def __init__(self, messages: list[Message] | None = None) -> None:
        """Initialize the store, optionally seeded with messages."""
        self._messages: list[Message] = copy_group(messages or [])

    def __len__(self) -> int:
        return len(self._messages)

    def messages(self) -> list[Message]:
        """Get a copy of every stored message."""
        return copy_group(self._messages)

    def add_message(self, message: Message) -> None:
        """Append a single message."""
        self._messages.append(Message(role=message["role"], content=message["content"]))

    def clear(self) -> None:
        """Remove all stored messages."""
        self._messages = []
