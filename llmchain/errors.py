"""Exceptions raised at the chain boundary.

Every failure a caller of ``LLMChain.run`` can see derives from
ChainError, so a single ``except ChainError`` covers the whole pipeline.
"""


class ChainError(Exception):
    """Base class for chain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PromptError(ChainError):
    """Rendering the prompt into messages failed.

    Attributes:
        missing: Template variables that had no value, if known.
    """

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        self.missing = list(missing or [])
        super().__init__(message)


class ApiError(ChainError):
    """The backend call failed (network, auth, quota, ...)."""
