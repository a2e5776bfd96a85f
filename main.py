#!/usr/bin/env python3
"""
LocalAuth -- Offline account signup, login and session restore for one device.
No network access. Users and the current session live in a local SQLite file.

Usage:
  python main.py signup --name "John Cena" --email john@example.com
  python main.py login --email john@example.com
  python main.py whoami
  python main.py logout
  python main.py --db sqlite:////tmp/auth.db whoami

Passwords are prompted for when --password is omitted.

Environment variables:
  LOCALAUTH_DB_URL     SQLAlchemy URL of the store (default: storage/localauth.db)
  LOCALAUTH_LOG_LEVEL  Logging level (default: INFO)
  LOCALAUTH_DEBUG      true to enable debug logging
"""

import argparse
import asyncio
import getpass
import logging
from typing import Optional

from auth.errors import AuthError, get_error_message
from auth.models import User
from auth.repository import AuthRepository
from auth.service import AuthService
from core.config import get_settings
from storage.store import KeyValueStore, StorageError

logger = logging.getLogger("localauth.cli")


def _configure_logging() -> None:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _read_password(given: Optional[str]) -> str:
    if given is not None:
        return given
    return getpass.getpass("Password: ")


def _print_user(user: User) -> None:
    print(f"  {user.name} <{user.email}>")
    print(f"  id:      {user.id}")
    print(f"  created: {user.created_at}")


async def _run(args: argparse.Namespace, service: AuthService) -> int:
    """Dispatch one subcommand. AuthError is handled by the caller."""
    if args.command == "signup":
        user = await service.signup(args.name, args.email, _read_password(args.password))
        print("Account created. You are now logged in.")
        _print_user(user)
    elif args.command == "login":
        user = await service.login(args.email, _read_password(args.password))
        print("Logged in.")
        _print_user(user)
    elif args.command == "logout":
        await service.logout()
        print("Logged out.")
    else:
        user = await service.bootstrap()
        if user is None:
            print("Not logged in.")
            return 1
        _print_user(user)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="localauth",
        description="Offline account signup, login and session restore.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py signup --name "John Cena" --email john@example.com
  python main.py login --email john@example.com --password password123
  python main.py whoami
  python main.py logout
        """,
    )
    parser.add_argument(
        "--db",
        metavar="URL",
        default=None,
        help="SQLAlchemy URL of the store (overrides LOCALAUTH_DB_URL)",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    signup = sub.add_parser("signup", help="Create an account and log in")
    signup.add_argument("--name", required=True, help="Display name (letters, digits, spaces, - and ')")
    signup.add_argument("--email", required=True, help="Email address, used to log in")
    signup.add_argument("--password", default=None, help="Password (prompted if omitted)")

    login = sub.add_parser("login", help="Log in to an existing account")
    login.add_argument("--email", required=True, help="Email address")
    login.add_argument("--password", default=None, help="Password (prompted if omitted)")

    sub.add_parser("logout", help="End the current session")
    sub.add_parser("whoami", help="Restore and show the logged-in user")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    _configure_logging()

    try:
        store = KeyValueStore(args.db)
    except StorageError as e:
        print(f"  [!] Could not open the account store: {e}")
        return 1

    service = AuthService(AuthRepository(store))
    try:
        return asyncio.run(_run(args, service))
    except AuthError as e:
        logger.debug("%s failed: %r", args.command, e)
        print(f"  [!] {get_error_message(e.code)}")
        return 1
    except StorageError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"  [!] {get_error_message('STORAGE_ERROR')}")
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    raise SystemExit(main())
