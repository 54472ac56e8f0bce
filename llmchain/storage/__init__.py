"""History stores for conversation persistence."""

from llmchain.storage.base import ChatHistory
from llmchain.storage.memory import InMemoryChatHistory
from llmchain.storage.json_file import JsonFileHistory

__all__ = ["ChatHistory", "InMemoryChatHistory", "JsonFileHistory"]
