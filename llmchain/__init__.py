"""llmchain - Assemble, call, record.

A small orchestration layer that arranges header, history, sandwich and
current-turn messages, sends them to a chat model backend, and keeps a
running conversation history.

Example:
    >>> from openai import AsyncOpenAI
    >>> from llmchain import LLMChain, PromptTemplate, InMemoryChatHistory, OpenAIChatBackend
    >>>
    >>> backend = OpenAIChatBackend(AsyncOpenAI(), model="gpt-4.1")
    >>> chain = LLMChain(PromptTemplate("{{question}}"), backend).with_memory(InMemoryChatHistory())
    >>> reply = await chain.run({"question": "Help me design a distributed system"})
"""

from llmchain.chain import Chain, LLMChain
from llmchain.config import ChainConfig
from llmchain.errors import ApiError, ChainError, PromptError
from llmchain.prompt import BasePrompt, ChatPromptTemplate, PromptTemplate
from llmchain.backends.base import (
    ChatBackend,
    Message,
    MessageGroup,
    assistant_message,
    system_message,
    user_message,
)
from llmchain.backends.mock import MockChatBackend
from llmchain.storage.base import ChatHistory
from llmchain.storage.memory import InMemoryChatHistory
from llmchain.storage.json_file import JsonFileHistory

__version__ = "0.1.0"

__all__ = [
    # Core
    "Chain",
    "LLMChain",
    "ChainConfig",
    # Errors
    "ChainError",
    "PromptError",
    "ApiError",
    # Prompts
    "BasePrompt",
    "PromptTemplate",
    "ChatPromptTemplate",
    # Backends
    "ChatBackend",
    "MockChatBackend",
    "Message",
    "MessageGroup",
    "system_message",
    "user_message",
    "assistant_message",
    # History
    "ChatHistory",
    "InMemoryChatHistory",
    "JsonFileHistory",
    # Version
    "__version__",
]


# Lazy import for OpenAIChatBackend to avoid importing openai up front
def __getattr__(name: str):
    if name == "OpenAIChatBackend":
        from llmchain.backends.openai import OpenAIChatBackend
        return OpenAIChatBackend
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
