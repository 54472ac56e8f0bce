"""Token counting helpers built on tiktoken."""

import tiktoken

from llmchain.backends.base import Message, MessageGroup


_FALLBACK_ENCODING = "cl100k_base"

# Per-message framing overhead (<|start|>role<|sep|>content<|end|>)
_TOKENS_PER_MESSAGE = 3
# Every reply is primed with <|start|>assistant<|message|>
_REPLY_PRIMING = 3

_ENCODINGS: dict[str, tiktoken.Encoding] = {}


def get_encoding(model: str) -> tiktoken.Encoding:
    """Return the (cached) encoding for a model name.

    Unknown models fall back to cl100k_base.
    """
    encoding = _ENCODINGS.get(model)
    if encoding is None:
        try:
            encoding = tiktoken.encoding_for_model(model)
        except KeyError:
            encoding = tiktoken.get_encoding(_FALLBACK_ENCODING)
        _ENCODINGS[model] = encoding
    return encoding


def count_message_tokens(messages: list[Message], model: str = "gpt-4") -> int:
    """Count tokens for a flat list of chat messages.

    Args:
        messages: Messages as they would be sent to the API.
        model: Model name for encoding selection.

    Returns:
        Estimated prompt token count, including reply priming.
    """
    encoding = get_encoding(model)
    total = _REPLY_PRIMING
    for message in messages:
        total += _TOKENS_PER_MESSAGE
        total += len(encoding.encode(message["role"]))
        total += len(encoding.encode(message["content"]))
    return total


def count_group_tokens(groups: list[MessageGroup], model: str = "gpt-4") -> int:
    """Count tokens for grouped messages as a chain would send them."""
    return count_message_tokens([m for group in groups for m in group], model)


def count_text_tokens(text: str, model: str = "gpt-4") -> int:
    """Count tokens in a single string."""
    return len(get_encoding(model).encode(text))
