"""Prompt templates that render accumulated input values into messages.

Placeholders use double braces, e.g. ``"My name is {{name}}."``. A template
keeps every value it has been given across calls:

- named values (a mapping) resolve placeholders by name, later values
  overriding earlier ones;
- positional values (a list of strings) fill whatever placeholders are
  still unresolved, in order of first appearance, using the most recent
  values.

Example:
    >>> prompt = PromptTemplate("My name is {{name}}.")
    >>> prompt.add_values(["Luis"])
    >>> prompt.to_chat_messages()
    [{'role': 'user', 'content': 'My name is Luis.'}]
"""

import re
from collections.abc import Mapping
from typing import Protocol, Union, runtime_checkable

from llmchain.backends.base import Message, Role
from llmchain.errors import PromptError


PromptValues = Union[Mapping[str, str], list[str]]

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")
_ROLES = ("system", "user", "assistant")


@runtime_checkable
class BasePrompt(Protocol):
    """Protocol for prompts a chain can render each turn."""

    def add_values(self, values: PromptValues) -> None:
        """Merge named values or append positional values."""
        ...

    def to_chat_messages(self) -> list[Message]:
        """Render the current turn's messages.

        Raises:
            PromptError: If the accumulated values cannot fill the template.
        """
        ...


class ChatPromptTemplate:
    """A sequence of role-tagged templates sharing one set of values.

    Example:
        >>> prompt = ChatPromptTemplate.from_messages([
        ...     ("system", "Answer in {{language}}."),
        ...     ("user", "{{question}}"),
        ... ])
        >>> prompt.add_values({"language": "Spanish", "question": "Hi?"})
        >>> [m["role"] for m in prompt.to_chat_messages()]
        ['system', 'user']
    """

    def __init__(self, messages: list[tuple[Role, str]]) -> None:
        """Initialize from (role, template) pairs.

        Raises:
            ValueError: If no templates are given or a role is unknown.
        """
        if not messages:
            raise ValueError("a prompt needs at least one message template")
        for role, _ in messages:
            if role not in _ROLES:
                raise ValueError(f"unknown message role {role!r}, expected one of {_ROLES}")

        self._templates: list[tuple[Role, str]] = list(messages)
        self._named: dict[str, str] = {}
        self._positional: list[str] = []

    @classmethod
    def from_messages(cls, messages: list[tuple[Role, str]]) -> "ChatPromptTemplate":
        return cls(messages)

    @property
    def input_variables(self) -> list[str]:
        """Placeholder names in order of first appearance."""
        seen: list[str] = []
        for _, template in self._templates:
            for name in _PLACEHOLDER.findall(template):
                if name not in seen:
                    seen.append(name)
        return seen

    @property
    def positional_values(self) -> list[str]:
        """Positional values accumulated so far."""
        return list(self._positional)

    def add_values(self, values: PromptValues) -> None:
        """Accumulate input values.

        Args:
            values: A mapping of named values, or a list of positional values.

        Raises:
            TypeError: For any other input shape.
        """
        if isinstance(values, Mapping):
            self._named.update({str(k): str(v) for k, v in values.items()})
        elif isinstance(values, (list, tuple)):
            self._positional.extend(str(v) for v in values)
        else:
            raise TypeError(f"prompt values must be a mapping or a list, got {type(values).__name__}")

    def clear_values(self) -> None:
        """Forget every accumulated value."""
        self._named = {}
        self._positional = []

    def resolve_values(self) -> dict[str, str]:
        """Resolve every placeholder to a value.

        Raises:
            PromptError: If some placeholders have no value.
        """
        variables = self.input_variables
        resolved = {name: self._named[name] for name in variables if name in self._named}

        unresolved = [name for name in variables if name not in resolved]
        if unresolved and self._positional:
            recent = self._positional[-len(unresolved):]
            resolved.update(zip(unresolved, recent))

        missing = [name for name in variables if name not in resolved]
        if missing:
            raise PromptError(
                f"missing values for template variables: {', '.join(missing)}",
                missing=missing,
            )
        return resolved

    def to_chat_messages(self) -> list[Message]:
        """Render every template with the accumulated values."""
        resolved = self.resolve_values()
        return [
            Message(role=role, content=_PLACEHOLDER.sub(lambda m: resolved[m.group(1)], template))
            for role, template in self._templates
        ]


class PromptTemplate(ChatPromptTemplate):
    """A single-message template (a user message by default)."""

    def __init__(self, template: str, role: Role = "user") -> None:
        super().__init__([(role, template)])
