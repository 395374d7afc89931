#!/usr/bin/env python3
"""
Create User
===========

Provisions agent and admin accounts. Self-service registration only ever
creates USER accounts, so staff are added from the command line:

    python scripts/create_user.py --name "Abe Agent" --email abe@example.com \
        --password s3cret --role AGENT
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from helpdesk.accounts.application import AuthService
from helpdesk.accounts.infrastructure import SQLAlchemyUserRepository
from helpdesk.config import VALID_ROLES, Role, settings
from helpdesk.core import ApplicationException
from helpdesk.infrastructure.database import (
    close_database,
    create_tables,
    get_session_context,
    init_database,
)
from helpdesk.shared.infrastructure.logging import setup_logging


async def create_user(name: str, email: str, password: str, role: Role, database_url: str | None) -> int:
    init_database(database_url)
    try:
        await create_tables()
        async with get_session_context() as session:
            user = await AuthService(SQLAlchemyUserRepository(session)).register(
                name, email, password, role
            )
        return user.id
    finally:
        await close_database()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a helpdesk user")
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--role", default=Role.AGENT.value, choices=[r.value for r in VALID_ROLES])
    parser.add_argument("--database-url", default=None, help="Defaults to DATABASE_URL")
    args = parser.parse_args()

    setup_logging(settings.log_level, settings.environment)

    try:
        user_id = asyncio.run(
            create_user(args.name, args.email, args.password, Role(args.role), args.database_url)
        )
    except ApplicationException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(f"Created {args.role} user {args.email} with id {user_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
