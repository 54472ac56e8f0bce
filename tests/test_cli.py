"""Tests for the chat CLI."""

import asyncio
import io
import json

import pytest
from rich.console import Console

from llmchain import InMemoryChatHistory, JsonFileHistory, MockChatBackend
from llmchain.cli import build_chain, build_parser, chat_loop, create_backend, main
from llmchain.config import ChainConfig


def feed_input(monkeypatch, lines: list[str]) -> None:
    """Replace input() with a scripted sequence ending in EOF."""
    remaining = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)


def make_console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=120), buffer


class TestBuildChain:
    """Tests for assembling a chain from arguments."""

    def test_mock_chain_with_prompts(self):
        args = build_parser().parse_args(["--mock", "--system", "Be kind", "--sandwich", "Be brief"])

        chain = build_chain(args)

        assert isinstance(chain.backend, MockChatBackend)
        assert isinstance(chain.memory, InMemoryChatHistory)
        assert chain.header_prompts == [{"role": "system", "content": "Be kind"}]
        assert chain.sandwich_prompts == [{"role": "system", "content": "Be brief"}]

    def test_history_file(self, tmp_path):
        path = tmp_path / "chat.json"
        args = build_parser().parse_args(["--mock", "--history-file", str(path)])

        chain = build_chain(args)

        assert isinstance(chain.memory, JsonFileHistory)
        assert chain.memory.path == path

    def test_invalid_temperature(self):
        args = build_parser().parse_args(["--mock", "--temperature", "5"])

        with pytest.raises(ValueError):
            build_chain(args)

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(RuntimeError):
            create_backend(ChainConfig())


class TestChatLoop:
    """Tests for the interactive loop."""

    def test_messages_recorded(self, monkeypatch):
        feed_input(monkeypatch, ["hello", "", "again", "/exit"])
        chain = build_chain(build_parser().parse_args(["--mock", "--system", "Be kind"]))
        console, buffer = make_console()

        asyncio.run(chat_loop(chain, console))

        assert [m["content"] for m in chain.memory.messages()] == [
            "hello",
            "echo: hello",
            "again",
            "echo: again",
        ]
        assert "echo: again" in buffer.getvalue()

    def test_clear_and_history_commands(self, monkeypatch):
        feed_input(monkeypatch, ["hello", "/history", "/clear", "/history"])
        chain = build_chain(build_parser().parse_args(["--mock"]))
        console, buffer = make_console()

        asyncio.run(chat_loop(chain, console))

        output = buffer.getvalue()
        assert "History (2 messages)" in output
        assert "No messages stored yet." in output
        assert chain.memory.messages() == []

    def test_history_file_persists_session(self, monkeypatch, tmp_path):
        path = tmp_path / "chat.json"
        feed_input(monkeypatch, ["hi"])
        chain = build_chain(build_parser().parse_args(["--mock", "--history-file", str(path)]))
        console, _ = make_console()

        asyncio.run(chat_loop(chain, console))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert [m["role"] for m in data["messages"]] == ["user", "assistant"]

    def test_unknown_command(self, monkeypatch):
        feed_input(monkeypatch, ["/bogus"])
        chain = build_chain(build_parser().parse_args(["--mock"]))
        console, buffer = make_console()

        asyncio.run(chat_loop(chain, console))

        assert "Unknown command: /bogus" in buffer.getvalue()
        assert chain.backend.calls == []


class TestMain:
    """Tests for the entry point."""

    def test_interrupt_exits_cleanly(self, monkeypatch, capsys):
        async def interrupted(chain, console):
            raise KeyboardInterrupt

        monkeypatch.setattr("llmchain.cli.chat_loop", interrupted)

        main(["--mock"])

        assert "Goodbye!" in capsys.readouterr().out

    def test_invalid_arguments_exit_with_error(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--mock", "--max-tokens", "0"])

        assert excinfo.value.code == 1
        assert "max_tokens must be positive" in capsys.readouterr().out
