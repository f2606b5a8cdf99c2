"""트레인라인 CLI 진입점

사용 예시:
    trainline --login me@example.com
    trainline --search
    trainline --trips
    trainline --basket
    trainline --logout
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import os
import sys
from pathlib import Path
from typing import Optional

from trainline_cli.agents.account_agent import AccountAgent
from trainline_cli.agents.orchestrator import TripResolutionOrchestrator
from trainline_cli.models.config import ClientConfig
from trainline_cli.models.errors import AuthenticationError, TrainlineError
from trainline_cli.models.query import Outcome, Resolution
from trainline_cli.models.session import Session
from trainline_cli.skills.booking_client import BookingClient
from trainline_cli.skills.credential_store import CredentialStore
from trainline_cli.utils.logging_config import setup_logging
from trainline_cli.utils.render import style, trips_to_table
from trainline_cli.utils.terminal import TerminalPrompter

__version__ = "1.0.0"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="trainline",
        description="Search Trainline journeys from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  trainline --login me@example.com\n"
            "  trainline --search"
        ),
    )
    p.add_argument("-V", "--version", action="version", version=__version__)
    p.add_argument("-l", "--login", metavar="EMAIL", help="Log in to your Trainline account")
    p.add_argument("-L", "--logout", action="store_true", help="Logout of your Trainline account")
    p.add_argument("-s", "--search", action="store_true", help="Search for a trip")
    p.add_argument("-t", "--trips", action="store_true", help="List of your trips")
    p.add_argument("-b", "--basket", action="store_true", help="List of your options")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    p.add_argument("--log-file", default=None, help="Log file path")
    return p


def build_config() -> ClientConfig:
    """환경 변수로 기본 설정 덮어쓰기"""
    config = ClientConfig()
    base_url = os.environ.get("TRAINLINE_BASE_URL")
    if base_url:
        config.base_url = base_url
    storage = os.environ.get("TRAINLINE_STORAGE")
    if storage:
        config.storage_path = Path(storage).expanduser()
    return config


def describe(resolution: Resolution) -> str:
    """최종 결과 → 출력 문자열"""
    if resolution.outcome is Outcome.RESOLVED:
        return f"trip_id: {resolution.trip_id}"
    if resolution.outcome is Outcome.FAILED:
        return style(resolution.message, "red")
    return resolution.message


async def login(agent: AccountAgent, email: str) -> int:
    try:
        password = getpass.getpass("Trainline password: ")
    except (EOFError, KeyboardInterrupt):
        password = ""
    if not password:
        print("Please enter your password")
        return 1
    try:
        session = await agent.login(email, password)
    except AuthenticationError:
        print(style("Wrong password or wrong email address", "red"))
        return 1
    print(style(f"You are now connected as {session.display_name}!", "blue"))
    return 0


async def run(args: argparse.Namespace, config: ClientConfig) -> int:
    """선택된 동작 실행 → 종료 코드"""
    store = CredentialStore(config.storage_path)
    session: Optional[Session] = store.load()
    client = BookingClient(config, token=session.token if session else None)
    account = AccountAgent(client, store)

    try:
        if args.login:
            return await login(account, args.login)

        # 이후 동작은 로그인 필요
        if session is None:
            print("You are not connected. Use --login [email]")
            return 1

        print(style(f"Welcome {session.display_name}!", "yellow"))

        if args.logout:
            account.logout()
            print("You are now disconnected")
            return 0

        if args.trips:
            print("List of your trips")
            print(trips_to_table(await account.list_trips(config.trips_listing_limit)))

        if args.basket:
            print("Content of your basket")
            print(trips_to_table(await account.list_basket()))

        if args.search:
            orchestrator = TripResolutionOrchestrator(
                client, session, TerminalPrompter(), config,
            )
            resolution = await orchestrator.resolve()
            print(describe(resolution))
            return 0 if resolution.outcome in (Outcome.RESOLVED, Outcome.NO_TRIPS) else 1

        return 0
    except TrainlineError as e:
        print(style(str(e), "red"))
        return 1
    finally:
        await account.close()


def cli_entry() -> None:
    """CLI 진입점 (pyproject.toml scripts에서 호출)"""
    main()


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if not any((args.login, args.logout, args.search, args.trips, args.basket)):
        parser.print_help()
        sys.exit(0)

    try:
        code = asyncio.run(run(args, build_config()))
    except KeyboardInterrupt:
        print("\n  Bye")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
