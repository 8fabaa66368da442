"""Seed script to create or update a CRM user.

Usage:
    python -m app.scripts.seed_user --email=manager@example.com --password=SecurePass123!
    python -m app.scripts.seed_user --email=finance@example.com --password=... --role=finance

NEVER hardcode credentials in this file. Always pass via CLI arguments.
"""

import argparse
import asyncio
import sys
from typing import Optional

from sqlalchemy import select

from app.core.database import async_session, engine
from app.models import category_limit, customer, lead  # noqa: F401
from app.models.enums import UserRole
from app.models.user import User
from app.services.auth import hash_password


async def create_or_update_user(
    email: str,
    password: str,
    role: UserRole = UserRole.MANAGER,
    name: Optional[str] = None,
    session_factory=None,
) -> User:
    """Create a user, or reset role/password of an existing one.

    Args:
        email: Login email
        password: Plain password (will be hashed)
        role: Role to assign
        name: Display name for new users
    """
    async with (session_factory or async_session)() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user:
            print(f"User {email} already exists. Updating to {role.value} role...")
            user.role = role
            user.is_active = True
            user.hashed_password = hash_password(password)
            if name:
                user.name = name
        else:
            print(f"Creating new {role.value} user: {email}...")
            user = User(
                name=name or role.value.title(),
                email=email,
                hashed_password=hash_password(password),
                role=role,
                is_active=True,
            )
            db.add(user)

        await db.commit()
        await db.refresh(user)

    print("\nUser setup complete!")
    print(f"   Email: {email}")
    print(f"   Role: {role.value}")
    return user


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create or update a Dealership CRM user")
    parser.add_argument("--email", required=True, help="Login email (e.g., manager@dealer.example)")
    parser.add_argument("--password", required=True, help="Password (will be hashed before storing)")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument(
        "--role",
        choices=[r.value for r in UserRole],
        default=UserRole.MANAGER.value,
        help="Role to assign (default: manager)",
    )
    return parser


def main(argv=None) -> int:
    """Parse CLI arguments and run the seed script."""
    args = build_parser().parse_args(argv)

    if "@" not in args.email or "." not in args.email:
        print("Error: Invalid email format.", file=sys.stderr)
        return 1

    if len(args.password) < 8:
        print("Error: Password must be at least 8 characters.", file=sys.stderr)
        return 1

    async def _run():
        try:
            await create_or_update_user(args.email, args.password, UserRole(args.role), args.name)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    return 0


if __name__ == "__main__":
    sys.exit(main())
