#!/usr/bin/env python
"""Create a user account that can sign in to the API.

Usage:
    python scripts/create_user.py admin@example.com --role admin
    python scripts/create_user.py editor@example.com --role editor --name "Ana"

The password is read from ``--password`` or prompted for interactively.
"""

import argparse
import asyncio
import getpass
import sys

from dotenv import load_dotenv

load_dotenv()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an hsc-api user.")
    parser.add_argument("email", help="Login email (stored casefolded)")
    parser.add_argument(
        "--role",
        choices=["member", "editor", "admin"],
        default="member",
        help="Account role (default: member)",
    )
    parser.add_argument("--name", dest="display_name", default=None, help="Display name")
    parser.add_argument(
        "--password",
        default=None,
        help="Password (prompted when omitted; avoid on shared machines)",
    )
    return parser.parse_args(argv)


async def create(args: argparse.Namespace, password: str) -> int:
    """Insert the user and return its id."""
    from sqlalchemy.exc import IntegrityError

    from hsc_api.schemas.auth import Role
    from hsc_api.services.auth_service import create_user
    from hsc_api.utils.db_async import SessionLocal, dispose_engine

    try:
        async with SessionLocal() as session:
            user = await create_user(
                session,
                email=args.email,
                password=password,
                role=Role(args.role),
                display_name=args.display_name,
            )
    except IntegrityError:
        print(f"ERROR: a user with email {args.email!r} already exists")
        sys.exit(1)
    finally:
        await dispose_engine()

    assert user.id is not None
    return user.id


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("ERROR: password must not be empty")
        sys.exit(1)

    user_id = asyncio.run(create(args, password))
    print(f"Created {args.role} user {args.email} (id={user_id})")


if __name__ == "__main__":
    main()
