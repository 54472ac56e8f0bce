"""Interactive chat CLI for llmchain.

Runs an LLMChain in a read-eval loop:
- every line typed is sent as the current turn
- history is kept in memory or in a JSON file (--history-file)
- --system and --sandwich set the fixed header and sandwich blocks
"""

import argparse
import asyncio
import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from llmchain.backends.base import ChatBackend
from llmchain.backends.mock import MockChatBackend
from llmchain.chain import LLMChain
from llmchain.config import ChainConfig
from llmchain.errors import ChainError
from llmchain.prompt import PromptTemplate
from llmchain.storage.base import ChatHistory
from llmchain.storage.json_file import JsonFileHistory
from llmchain.storage.memory import InMemoryChatHistory
from llmchain.token_counter import count_message_tokens


USER_TEMPLATE = "{{input}}"

COMMANDS = {
    "/history": "Show the stored conversation",
    "/tokens": "Show the token count of the stored conversation",
    "/clear": "Clear the stored conversation",
    "/exit": "Exit",
}


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="llmchain",
        description="Chat with an LLM through a header/history/sandwich chain",
    )
    parser.add_argument(
        "--model",
        type=str,
        default="gpt-4.1",
        help="Model name (default: gpt-4.1)",
    )
    parser.add_argument(
        "--temperature",
        type=float,
        default=0.7,
        help="Sampling temperature (default: 0.7)",
    )
    parser.add_argument(
        "--max-tokens",
        type=int,
        default=None,
        help="Maximum tokens per response (default: model default)",
    )
    parser.add_argument(
        "--system",
        type=str,
        default=None,
        help="System prompt sent first on every call (never stored in history)",
    )
    parser.add_argument(
        "--sandwich",
        type=str,
        default=None,
        help="System prompt sent between history and each new message",
    )
    parser.add_argument(
        "--history-file",
        type=str,
        default=None,
        help="Persist the conversation to this JSON file (resumes it if it exists)",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the offline echo backend instead of OpenAI",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )
    return parser


def setup_logging(verbose: bool) -> None:
    """Route library logs through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def create_backend(config: ChainConfig, mock: bool = False) -> ChatBackend:
    """Create the chat backend.

    Returns:
        A ChatBackend instance.

    Raises:
        RuntimeError: If OpenAI is requested and no API key is set.
    """
    if mock:
        return MockChatBackend()

    if not os.environ.get("OPENAI_API_KEY"):
        raise RuntimeError(
            "No API key found. Please set OPENAI_API_KEY or pass --mock."
        )

    from openai import AsyncOpenAI
    from llmchain.backends.openai import OpenAIChatBackend

    return OpenAIChatBackend(
        AsyncOpenAI(),
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )


def create_history(path: str | None) -> ChatHistory:
    """Create a JSON file history when a path is given, else in-memory."""
    if path:
        return JsonFileHistory(path)
    return InMemoryChatHistory()


def build_chain(args: argparse.Namespace) -> LLMChain:
    """Assemble a chain from parsed command line arguments.

    Raises:
        ValueError: If the arguments produce an invalid configuration.
        RuntimeError: If no backend can be created.
    """
    config = ChainConfig(
        model=args.model,
        temperature=args.temperature,
        max_tokens=args.max_tokens,
        system_prompt=args.system,
        sandwich_prompt=args.sandwich,
    )
    backend = create_backend(config, mock=args.mock)
    history = create_history(args.history_file)
    return LLMChain.from_config(PromptTemplate(USER_TEMPLATE), backend, config, history=history)


def print_history(console: Console, history: ChatHistory) -> None:
    """Print the stored conversation as a table."""
    messages = history.messages()
    if not messages:
        console.print("No messages stored yet.")
        return

    table = Table(title=f"History ({len(messages)} messages)")
    table.add_column("#", justify="right")
    table.add_column("Role")
    table.add_column("Content")
    for i, message in enumerate(messages, start=1):
        content = message["content"]
        table.add_row(str(i), message["role"], content[:200] + ("..." if len(content) > 200 else ""))
    console.print(table)


async def chat_loop(chain: LLMChain, console: Console) -> None:
    """Read lines from stdin and run each through the chain."""
    history = chain.memory

    while True:
        try:
            user_input = (await asyncio.to_thread(input, "you> ")).strip()
        except (EOFError, KeyboardInterrupt):
            console.print("\nGoodbye!")
            break

        if not user_input:
            continue

        command = user_input.lower()
        if command in {"/exit", "/quit"}:
            console.print("Goodbye!")
            break
        elif command == "/history":
            if history is not None:
                print_history(console, history)
            continue
        elif command == "/tokens":
            if history is not None:
                tokens = count_message_tokens(history.messages(), chain.backend.model_name)
                console.print(f"History tokens: {tokens:,}")
            continue
        elif command == "/clear":
            if history is not None:
                history.clear()
                console.print("History cleared.")
            continue
        elif command.startswith("/"):
            console.print(f"Unknown command: {user_input}")
            continue

        try:
            response = await chain.run(user_input)
        except ChainError as e:
            console.print(f"[red]Error:[/red] {e}")
            continue

        console.print(Panel(Text(response), title=f"[bold]{chain.backend.model_name}[/bold]", border_style="blue"))


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    console = Console()

    try:
        chain = build_chain(args)
    except (RuntimeError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print("[bold]llmchain[/bold]")
    console.print(f"Using model: {chain.backend.model_name}")
    for name, description in COMMANDS.items():
        console.print(f"  {name:<10} - {description}")
    console.print()

    # Ctrl-C cancels the running loop; asyncio.run re-raises it here
    try:
        asyncio.run(chat_loop(chain, console))
    except KeyboardInterrupt:
        console.print("\nGoodbye!")


if __name__ == "__main__":
    main()
