"""Backend implementations for different LLM providers."""

from llmchain.backends.base import ChatBackend, Message, MessageGroup
from llmchain.backends.mock import MockChatBackend

__all__ = ["ChatBackend", "Message", "MessageGroup", "MockChatBackend"]

# Lazy imports for optional dependencies
def __getattr__(name: str):
    if name == "OpenAIChatBackend":
        from llmchain.backends.openai import OpenAIChatBackend
        return OpenAIChatBackend
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
