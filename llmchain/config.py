"""Configuration dataclasses for llmchain."""

from dataclasses import dataclass

from llmchain.backends.base import Message, system_message


@dataclass
class ChainConfig:
    """Configuration for a chain and its model backend.

    Attributes:
        model: Model name passed to the backend.
        temperature: Sampling temperature (0.0 - 2.0).
        max_tokens: Maximum tokens in a response (None for model default).
        system_prompt: Optional system prompt placed in the header block.
                       Sent on every call but never stored in history.
        sandwich_prompt: Optional system prompt placed between history and
                         the current turn (e.g. "Answer in one sentence").
    """

    model: str = "gpt-4.1"
    temperature: float = 0.7
    max_tokens: int | None = None

    system_prompt: str | None = None
    sandwich_prompt: str | None = None

    def __post_init__(self) -> None:
        if not self.model:
            raise ValueError("model must not be empty")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ValueError("max_tokens must be positive")

    def header_messages(self) -> list[Message] | None:
        """Header block built from system_prompt, or None."""
        if not self.system_prompt:
            return None
        return [system_message(self.system_prompt)]

    def sandwich_messages(self) -> list[Message] | None:
        """Sandwich block built from sandwich_prompt, or None."""
        if not self.sandwich_prompt:
            return None
        return [system_message(self.sandwich_prompt)]
