"""Curio entry point."""

import asyncio
import sys

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli

USAGE = """Usage: curio [--no-persist]

Starts the interactive fact deck. Type /help inside for commands.

  --no-persist  Keep progress, XP and bookmarks in memory only
"""


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    if len(sys.argv) > 1:
        command = sys.argv[1]

        if command in ("-h", "--help", "help"):
            print(USAGE)
            return

        if command != "--no-persist":
            print(f"Unknown argument: {command}\n")
            print(USAGE)
            sys.exit(2)

        asyncio.run(run_cli(persist=False))
        return

    asyncio.run(run_cli())


if __name__ == "__main__":
    main()
