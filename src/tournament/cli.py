"""Command-line interface for running and seeding the tournament service."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from tournament.config import load_settings
from tournament.exceptions import TournamentError
from tournament.persistence import TournamentStore
from tournament.seed import SeedFile
from tournament.services import build_services


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cricket tournament data service")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API under uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve.add_argument("--db", type=Path, default=None, help="SQLite database path")

    seed = subparsers.add_parser("seed", help="Load teams, players and matches from a JSON file")
    seed.add_argument("seed_file", type=Path, help="Path to seed JSON")
    seed.add_argument("--db", type=Path, default=None, help="SQLite database path")

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = load_settings(args.db)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "serve":
        import uvicorn

        from tournament.api import create_app

        uvicorn.run(create_app(settings), host=args.host, port=args.port)
        return 0

    store = TournamentStore(settings.db_path)
    try:
        counts = SeedFile.load(args.seed_file).apply(build_services(store))
    except TournamentError as exc:
        print(f"Seeding stopped: {exc}")
        return 1
    print(
        f"Seeded {counts['teams']} teams, {counts['players']} players and "
        f"{counts['matches']} matches into {settings.db_path}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
