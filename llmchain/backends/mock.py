"""Deterministic backend for offline runs."""

from llmchain.backends.base import Message, MessageGroup, assistant_message


class MockChatBackend:
    """Echo backend: answers with the last user message it was sent.

    Useful to exercise a chain's control flow without a real model.
    """

    def __init__(self, prefix: str = "echo: ") -> None:
        self._prefix = prefix
        self.calls: list[list[MessageGroup]] = []

    @property
    def model_name(self) -> str:
        return "mock"

    async def generate(self, messages: list[MessageGroup]) -> Message:
        self.calls.append(messages)
        last_user = next(
            (m["content"] for group in reversed(messages) for m in reversed(group) if m["role"] == "user"),
            "",
        )
        return assistant_message(f"{self._prefix}{last_user}")
