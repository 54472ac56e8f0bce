"""Core LLMChain implementation.

The chain assembles grouped messages for one turn, calls the backend once,
and records the exchange in an attached history.

Group order sent to the backend::

    [header?] [history or empty] [sandwich?] [current turn]

Header and sandwich groups are left out entirely when not configured.
The history slot is always present, as an empty group when no history is
attached, so backends can rely on its position.
"""

import logging
from collections.abc import Mapping
from typing import Protocol, Union, runtime_checkable

from llmchain.backends.base import ChatBackend, Message, MessageGroup, copy_group
from llmchain.config import ChainConfig
from llmchain.errors import ApiError, PromptError
from llmchain.prompt import BasePrompt
from llmchain.storage.base import ChatHistory


logger = logging.getLogger(__name__)

ChainInput = Union[Mapping[str, str], str]


@runtime_checkable
class Chain(Protocol):
    """Protocol for anything that can be run with chain inputs."""

    async def run(self, inputs: ChainInput) -> str:
        ...


class LLMChain:
    """Single-shot "assemble, call, record" pipeline.

    An LLMChain owns a prompt and a backend, and optionally holds a history
    store plus fixed header and sandwich messages. Each ``run`` renders the
    prompt, calls the backend once and, when history is attached, stores
    the non-system turn messages followed by the response.

    Not safe for concurrent ``run`` calls on the same instance: the prompt
    accumulates values and the history is appended without locking.

    Example:
        >>> from openai import AsyncOpenAI
        >>> from llmchain import LLMChain, PromptTemplate, InMemoryChatHistory, system_message
        >>> from llmchain.backends.openai import OpenAIChatBackend
        >>>
        >>> backend = OpenAIChatBackend(AsyncOpenAI(), model="gpt-4.1")
        >>> history = InMemoryChatHistory()
        >>> chain = (
        ...     LLMChain(PromptTemplate("My name is {{name}}."), backend)
        ...     .with_memory(history)
        ...     .with_header_prompts([system_message("You are helpful.")])
        ... )
        >>> reply = await chain.run("Luis")
    """

    def __init__(self, prompt: BasePrompt, backend: ChatBackend) -> None:
        """Initialize the chain with no memory, header or sandwich.

        Args:
            prompt: Prompt rendered on every run. Accumulates input values.
            backend: Chat backend called once per run.
        """
        self._prompt = prompt
        self._backend = backend
        self._memory: ChatHistory | None = None
        self._header_prompts: list[Message] | None = None
        self._sandwich_prompts: list[Message] | None = None

    @classmethod
    def from_config(
        cls,
        prompt: BasePrompt,
        backend: ChatBackend,
        config: ChainConfig,
        history: ChatHistory | None = None,
    ) -> "LLMChain":
        """Build a chain whose header and sandwich come from a config."""
        chain = cls(prompt, backend)
        if history is not None:
            chain.with_memory(history)

        header = config.header_messages()
        if header is not None:
            chain.with_header_prompts(header)

        sandwich = config.sandwich_messages()
        if sandwich is not None:
            chain.with_sandwich_prompts(sandwich)

        return chain

    # --- Builder methods ---

    def with_memory(self, memory: ChatHistory) -> "LLMChain":
        """Attach a history store, replacing any previous one."""
        self._memory = memory
        return self

    def with_header_prompts(self, header_prompts: list[Message]) -> "LLMChain":
        """Set the block always sent first."""
        self._header_prompts = copy_group(header_prompts)
        return self

    def with_sandwich_prompts(self, sandwich_prompts: list[Message]) -> "LLMChain":
        """Set the block sent between history and the current turn."""
        self._sandwich_prompts = copy_group(sandwich_prompts)
        return self

    # --- Properties ---

    @property
    def prompt(self) -> BasePrompt:
        """The prompt rendered on every run."""
        return self._prompt

    @property
    def backend(self) -> ChatBackend:
        """The chat backend being used."""
        return self._backend

    @property
    def memory(self) -> ChatHistory | None:
        """The attached history store, if any."""
        return self._memory

    @property
    def header_prompts(self) -> list[Message] | None:
        """A copy of the header block, if configured."""
        return copy_group(self._header_prompts) if self._header_prompts is not None else None

    @property
    def sandwich_prompts(self) -> list[Message] | None:
        """A copy of the sandwich block, if configured."""
        return copy_group(self._sandwich_prompts) if self._sandwich_prompts is not None else None

    # --- Pipeline ---

    def order_messages(self, prompt_messages: list[Message]) -> list[MessageGroup]:
        """Arrange the groups sent to the backend for one turn.

        Args:
            prompt_messages: Messages rendered from the prompt this turn.

        Returns:
            ``[header?, history-or-empty, sandwich?, prompt_messages]``.
        """
        all_messages: list[MessageGroup] = []

        if self._header_prompts is not None:
            all_messages.append(copy_group(self._header_prompts))

        all_messages.append(self._memory.messages() if self._memory is not None else [])

        if self._sandwich_prompts is not None:
            all_messages.append(copy_group(self._sandwich_prompts))

        all_messages.append(copy_group(prompt_messages))

        return all_messages

    async def execute(self, prompt_messages: list[Message]) -> str:
        """Call the backend with this turn's messages and record the exchange.

        History is only written after the backend succeeds. System messages
        from the current turn are never stored; the response always is.

        Args:
            prompt_messages: Messages rendered from the prompt this turn.

        Returns:
            The content of the backend's response.

        Raises:
            ApiError: If the backend call fails.
        """
        all_messages = self.order_messages(prompt_messages)
        logger.debug(
            "Calling %s with %d message groups",
            getattr(self._backend, "model_name", type(self._backend).__name__),
            len(all_messages),
        )

        try:
            ai_response = await self._backend.generate(all_messages)
        except ApiError:
            raise
        except Exception as exc:
            raise ApiError(f"backend call failed: {exc}") from exc

        if self._memory is not None:
            for message in prompt_messages:
                logger.debug("message: %r", message["content"])
                if message["role"] != "system":
                    logger.debug("Adding to memory: %r", message["content"])
                    self._memory.add_message(Message(role=message["role"], content=message["content"]))
            self._memory.add_message(Message(role=ai_response["role"], content=ai_response["content"]))

        return ai_response["content"]

    async def run(self, inputs: ChainInput) -> str:
        """Render the prompt with new inputs and execute one turn.

        Args:
            inputs: A mapping of named values merged into the prompt, or a
                    single string appended as a positional value.

        Returns:
            The content of the backend's response.

        Raises:
            PromptError: If the prompt cannot be rendered. The backend is
                         not called and history is untouched.
            ApiError: If the backend call fails.
            TypeError: If inputs is neither a mapping nor a string.
        """
        if isinstance(inputs, str):
            self._prompt.add_values([inputs])
        elif isinstance(inputs, Mapping):
            self._prompt.add_values(dict(inputs))
        else:
            raise TypeError(f"chain inputs must be a mapping or a string, got {type(inputs).__name__}")

        try:
            prompt_messages = self._prompt.to_chat_messages()
        except PromptError:
            raise
        except Exception as exc:
            raise PromptError(f"prompt rendering failed: {exc}") from exc

        return await self.execute(prompt_messages)
