"""Command-line interface for playing career-path rounds in a terminal."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional

from careerpath.config import iter_rules
from careerpath.config_loader import GameSettings
from careerpath.errors import PoolLoadError, RoundStartError
from careerpath.game import GamePhase, GameSession
from careerpath.ingest import EspnDataSource
from careerpath.models import GamePlayer
from careerpath.persistence import SqliteStore


QUIT_COMMANDS = {":q", ":quit", "quit", "exit"}


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Guess the NFL player from their career path")
    parser.add_argument(
        "--difficulty",
        choices=[rules.tier for rules in iter_rules()],
        default=None,
        help="Difficulty tier (defaults to the last one played)",
    )
    parser.add_argument("--db-path", type=Path, default=None, help="SQLite file for cache and streaks")
    parser.add_argument("--refresh-pool", action="store_true", help="Ignore the cached player pool")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


async def _prompt(message: str) -> Optional[str]:
    try:
        return (await asyncio.to_thread(input, message)).strip()
    except EOFError:
        return None


def _print_career_path(player: GamePlayer) -> None:
    print()
    print("Whose career is this?")
    for index, stop in enumerate(player.career_path, start=1):
        label = "College" if stop.kind == "college" else stop.seasons or "-"
        print(f"  {index}. {stop.name} ({label})")


def _print_reveal(session: GameSession, player: GamePlayer) -> None:
    verdict = "Correct!" if session.state.phase is GamePhase.CORRECT else "Not quite."
    streak = session.streak
    print(f"{verdict} It was {player.full_name} ({player.position or '?'}).")
    print(f"Streak: {streak.current} (best {streak.best})")


async def _guess_loop(session: GameSession) -> Optional[bool]:
    """Return the guess outcome, or ``None`` when the user quits."""

    pipeline = session.autocomplete
    while True:
        text = await _prompt("Guess a name (blank to skip, :q to quit): ")
        if text is None or text.lower() in QUIT_COMMANDS:
            return None
        if not text:
            session.skip()
            return False

        pipeline.search(text)
        await pipeline.wait_idle()
        if not pipeline.results:
            print("No matching players.")
            continue

        for index, result in enumerate(pipeline.results, start=1):
            team = f", {result.team_name}" if result.team_name else ""
            print(f"  {index}. {result.full_name} ({result.position or '?'}{team})")
        choice = await _prompt("Pick a number (enter to search again): ")
        if choice is None:
            return None
        if choice.isdigit() and 1 <= int(choice) <= len(pipeline.results):
            return session.guess(pipeline.results[int(choice) - 1].id)


async def _play(args: argparse.Namespace) -> int:
    settings = GameSettings.from_env(db_path=args.db_path)
    async with EspnDataSource(
        timeout=settings.http_timeout,
        retries=settings.retries,
        retry_delay=settings.retry_delay,
    ) as source:
        session = GameSession(source, SqliteStore(settings.db_path), settings=settings)
        try:
            print(f"Building {args.difficulty or session.difficulty} player pool...")
            if args.difficulty and args.difficulty != session.difficulty:
                await session.set_difficulty(args.difficulty, force=args.refresh_pool)
            else:
                await session.load_pool(force=args.refresh_pool)
        except PoolLoadError as exc:
            print(f"Failed to load players: {exc}")
            return 1

        try:
            while True:
                try:
                    player = await session.next_round()
                except RoundStartError as exc:
                    print(f"{exc}.")
                    answer = await _prompt("Try another player? [Y/n] ")
                    if answer is None or answer.lower().startswith("n"):
                        return 0
                    continue
                if player is None:
                    continue

                _print_career_path(player)
                outcome = await _guess_loop(session)
                if outcome is None:
                    return 0
                _print_reveal(session, player)

                answer = await _prompt("Next player? [Y/n] ")
                if answer is None or answer.lower().startswith("n"):
                    return 0
        finally:
            session.close()


def main() -> None:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    try:
        code = asyncio.run(_play(args))
    except KeyboardInterrupt:
        code = 130
    raise SystemExit(code)


if __name__ == "__main__":
    main()
