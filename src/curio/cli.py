"""Interactive command-line interface for Curio."""

import asyncio
import logging

from .app import CurioApp, build_generator
from .config import CurioConfig, config_from_env
from .facts import Fact
from .logging import configure_logger
from .storage import MemoryKeyValueStore

logger = logging.getLogger(__name__)

BANNER = """
╔══════════════════════════════════════════╗
║             🧠 Curio v0.1.0              ║
║        A few surprising facts a day      ║
╚══════════════════════════════════════════╝

Commands:
  /today            - Show a fresh deck of facts
  /read N           - Read fact N from the deck
  /quiz N           - Answer the quiz for fact N
  /bookmark N       - Bookmark fact N (again to remove)
  /bookmarks        - List bookmarks
  /share N          - Print share text for fact N
  /topics [a,b,...] - Show or set preferred topics
  /stats            - Show progress and level
  /exit, /quit      - Exit the CLI
  /help             - Show this help
"""


class CLI:
    """Interactive front-end over CurioApp."""

    def __init__(self, app: CurioApp) -> None:
        self.app = app

    def _deck_fact(self, arg: str) -> Fact | None:
        """Resolve a 1-based deck index."""
        try:
            index = int(arg) - 1
        except ValueError:
            print("❌ Expected a fact number, e.g. /read 1")
            return None
        if not 0 <= index < len(self.app.deck):
            print("❌ No such fact in the current deck. Try /today")
            return None
        return self.app.deck[index]

    def _format_deck(self, facts: list[Fact]) -> str:
        output = ["\n" + "─" * 40]
        for number, fact in enumerate(facts, start=1):
            marker = "🔖 " if self.app.is_bookmarked(fact.id) else ""
            output.append(f"{number}. {marker}[{fact.topic}] {fact.title}")
            output.append(f"   {fact.blurb}")
        output.append("─" * 40)
        return "\n".join(output)

    async def _show_today(self) -> None:
        print("\n🔄 Picking today's facts...")
        result = await self.app.get_facts_to_show()
        if result.facts:
            print(self._format_deck(result.facts))
        if result.notice:
            print(f"\n⚠ {result.notice}")

    def _read(self, arg: str) -> None:
        fact = self._deck_fact(arg)
        if fact is None:
            return
        self.app.mark_viewed(fact.id)
        print(f"\n{fact.title}\n\n{fact.body}")
        for source in fact.sources:
            year = f" ({source.year})" if source.year else ""
            print(f"  • {source.title}, {source.publication}{year}")

    def _quiz(self, arg: str) -> None:
        fact = self._deck_fact(arg)
        if fact is None:
            return
        if fact.quiz is None:
            print("This fact has no quiz.")
            return

        print(f"\n❓ {fact.quiz.question}")
        for number, option in enumerate(fact.quiz.options, start=1):
            print(f"  {number}) {option}")
        answer = input("answer> ").strip()
        try:
            choice = int(answer) - 1
        except ValueError:
            print("❌ Expected an option number")
            return

        outcome = self.app.answer_quiz(fact, choice)
        if outcome.is_correct:
            print(f"\n✓ Correct! +{outcome.xp_gained} XP")
        else:
            print(f"\n✗ Not quite. +{outcome.xp_gained} XP")
        if outcome.explanation:
            print(f"   {outcome.explanation}")

    def _toggle_bookmark(self, arg: str) -> None:
        fact = self._deck_fact(arg)
        if fact is None:
            return
        if self.app.is_bookmarked(fact.id):
            self.app.remove_bookmark(fact.id)
            print(f"Removed bookmark: {fact.title}")
        else:
            self.app.add_bookmark(fact)
            print(f"🔖 Bookmarked: {fact.title}")

    def _list_bookmarks(self) -> None:
        bookmarks = self.app.bookmarks()
        if not bookmarks:
            print("No bookmarks yet.")
            return
        for fact in bookmarks:
            print(f"🔖 [{fact.topic}] {fact.title}")

    def _topics(self, arg: str) -> None:
        if arg:
            topics = self.app.set_preferred_topics(arg.split(","))
            print(f"Preferred topics: {', '.join(topics) or '(none)'}")
            return
        print(f"Preferred topics: {', '.join(self.app.preferred_topics) or '(none)'}")
        print(f"Available: {', '.join(self.app.content.available_topics())}")

    def _stats(self) -> None:
        stats = self.app.statistics()
        xp = self.app.xp_progress()
        print(f"\nLevel {xp.current_level} ({xp.xp_in_current_level}/{xp.xp_for_next_level} XP)")
        print(f"Viewed: {stats.total_viewed}  Quizzed: {stats.total_quizzed}  "
              f"Mastered: {stats.total_mastered}  Accuracy: {stats.accuracy:.0f}%")

    async def _handle_command(self, command: str) -> bool:
        """Handle a command. Returns True if should continue, False to exit."""
        name, _, arg = command.strip().partition(" ")
        name = name.lower()
        arg = arg.strip()

        if name in ("/exit", "/quit", "exit", "quit"):
            print("\n👋 Goodbye!")
            self.app.event_log.log("session_end")
            return False

        if name == "/today":
            await self._show_today()
        elif name == "/read":
            self._read(arg)
        elif name == "/quiz":
            self._quiz(arg)
        elif name == "/bookmark":
            self._toggle_bookmark(arg)
        elif name == "/bookmarks":
            self._list_bookmarks()
        elif name == "/share":
            fact = self._deck_fact(arg)
            if fact is not None:
                print("\n" + self.app.share_text(fact))
        elif name == "/topics":
            self._topics(arg)
        elif name == "/stats":
            self._stats()
        elif name == "/help":
            print(BANNER)

        return True  # Unknown command, continue

    async def run(self) -> None:
        """Run the interactive CLI."""
        print(BANNER)
        self.app.event_log.log("session_start")

        try:
            await self._show_today()
            while True:
                try:
                    user_input = input("curio> ").strip()

                    if not user_input:
                        continue

                    if not await self._handle_command(user_input):
                        break

                except KeyboardInterrupt:
                    print("\n👋 Goodbye!")
                    self.app.event_log.log("session_interrupt")
                    break

                except EOFError:
                    print("\n👋 Goodbye!")
                    break
        finally:
            await self.app.aclose()


async def run_cli(config: CurioConfig | None = None, persist: bool = True) -> None:
    """Run the CLI with configuration from file and environment.

    With persist=False, progress, XP and bookmarks live only in memory.
    """
    config = config or config_from_env()
    configure_logger(config.log_dir)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    generator = build_generator(config)
    if generator is None and config.provider != "none":
        print("⚠ No API key for fact generation, using the built-in facts only")

    kv = None if persist else MemoryKeyValueStore()
    app = CurioApp(config=config, kv=kv, generator=generator)
    cli = CLI(app)
    await cli.run()


if __name__ == "__main__":
    asyncio.run(run_cli())
