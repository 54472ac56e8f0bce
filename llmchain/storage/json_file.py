"""JSON file-backed conversation history.

The whole log lives in one JSON document so a session can be resumed
or inspected after the process exits::

    {
      "created_at": "2026-01-01T12:00:00",
      "updated_at": "2026-01-01T12:05:00",
      "message_count": 2,
      "messages": [{"role": "user", "content": "Hi"}, ...]
    }
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from llmchain.backends.base import Message, copy_group


logger = logging.getLogger(__name__)


class JsonFileHistory:
    """History store persisted to a JSON file.

    Existing messages are loaded when the store is created and the file is
    rewritten on every append. Write failures are logged and the message is
    still kept in memory, so the chain never sees a storage error.

    Example:
        >>> history = JsonFileHistory("chat.json")
        >>> history.add_message({"role": "user", "content": "Hello"})
    """

    def __init__(self, path: str | Path) -> None:
        """Open (or create) a history file.

        Args:
            path: Location of the JSON document.

        Raises:
            ValueError: If the file exists but is not a valid history log.
        """
        self._path = Path(path)
        self._created_at = datetime.now().isoformat()
        self._messages: list[Message] = []

        if self._path.exists():
            self._load()

    @property
    def path(self) -> Path:
        """Get the backing file path."""
        return self._path

    def __len__(self) -> int:
        return len(self._messages)

    def messages(self) -> list[Message]:
        """Get a copy of every stored message."""
        return copy_group(self._messages)

    def add_message(self, message: Message) -> None:
        """Append a single message and rewrite the file."""
        self._messages.append(Message(role=message["role"], content=message["content"]))
        self._save()

    def clear(self) -> None:
        """Remove all stored messages and rewrite the file."""
        self._messages = []
        self._save()

    def to_dict(self) -> dict[str, Any]:
        """Export the history as a JSON-serializable dictionary."""
        return {
            "created_at": self._created_at,
            "updated_at": datetime.now().isoformat(),
            "message_count": len(self._messages),
            "messages": self._messages,
        }

    def _load(self) -> None:
        with open(self._path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{self._path} is not valid JSON: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get("messages"), list):
            raise ValueError(f"{self._path} does not contain a 'messages' list")

        for entry in data["messages"]:
            if not isinstance(entry, dict) or "role" not in entry or "content" not in entry:
                raise ValueError(f"{self._path} contains a malformed message: {entry!r}")
            self._messages.append(Message(role=entry["role"], content=entry["content"]))

        self._created_at = data.get("created_at", self._created_at)

    def _save(self) -> None:
        # Write beside the target then swap, so a crash never leaves half a file
        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            logger.warning("Could not write history to %s: %s", self._path, exc)
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
