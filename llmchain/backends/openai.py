"""OpenAI backend implementation."""

import logging
from typing import TYPE_CHECKING

import openai

from llmchain.backends.base import Message, MessageGroup, assistant_message
from llmchain.errors import ApiError
from llmchain.token_counter import count_group_tokens

if TYPE_CHECKING:
    from openai import AsyncOpenAI


logger = logging.getLogger(__name__)


class OpenAIChatBackend:
    """Backend for OpenAI Chat Completions models.

    Wraps an async OpenAI client and provides the ChatBackend interface.
    Message groups are flattened in order into a single ``messages`` list,
    which is how the Chat Completions API expects a conversation.

    Example:
        >>> from openai import AsyncOpenAI
        >>> from llmchain.backends.openai import OpenAIChatBackend
        >>>
        >>> client = AsyncOpenAI()
        >>> backend = OpenAIChatBackend(client, model="gpt-4.1")
    """

    def __init__(
        self,
        client: "AsyncOpenAI",
        model: str = "gpt-4.1",
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> None:
        """Initialize the OpenAI backend.

        Args:
            client: An initialized AsyncOpenAI client.
            model: Model name to use for completions.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens in response (None for model default).
        """
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def model_name(self) -> str:
        """Return the model name being used."""
        return self._model

    async def generate(self, messages: list[MessageGroup]) -> Message:
        """Send grouped messages to OpenAI and get the response message.

        Args:
            messages: Ordered message groups.

        Returns:
            The assistant's response message.

        Raises:
            ApiError: If the OpenAI client raises.
        """
        flat = [
            {"role": m["role"], "content": m["content"]}
            for group in messages
            for m in group
        ]
        logger.debug("Sending %d messages to %s", len(flat), self._model)

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=flat,  # type: ignore[arg-type]
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except openai.OpenAIError as exc:
            raise ApiError(f"OpenAI request failed: {exc}") from exc

        if not response.choices:
            raise ApiError("OpenAI returned no choices")

        content = response.choices[0].message.content
        return assistant_message(content if content is not None else "")

    def count_tokens(self, messages: list[MessageGroup]) -> int:
        """Count prompt tokens for grouped messages using tiktoken."""
        return count_group_tokens(messages, self._model)
