"""
Database seeding script for the initial administrator.

No route grants the admin flag, so the first admin account is created here.
Run this script after the database is set up but before first use:

    python -m carrental.seed_admin --email admin@carrental.com --password admin123
"""

import argparse
import asyncio

from carrental.app.core.exceptions import ConflictError
from carrental.app.db.migrations import run_migrations
from carrental.app.db.session import AsyncSessionLocal, engine
from carrental.app.services import accounts


async def seed_admin(email: str, password: str, first_name: str = "Admin", last_name: str = "User",
                     phone: str = "0000000000") -> bool:
    """
    Create an admin account unless the email is already registered.

    Returns:
        True if the account was created, False if it already existed
    """
    await run_migrations(engine)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting admin seeding...")
        try:
            user, _ = await accounts.register(
                db,
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone=phone,
                password=password,
                is_admin=True
            )
        except ConflictError:
            print(f"ℹ️  {email} is already registered, skipping seeding")
            return False

    print(f"✅ Created admin user {user.email}")
    return True


def main():
    parser = argparse.ArgumentParser(description="Create the initial admin account")
    parser.add_argument("--email", default="admin@carrental.com")
    parser.add_argument("--password", default="admin123")
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    parser.add_argument("--phone", default="0000000000")
    args = parser.parse_args()

    asyncio.run(seed_admin(args.email, args.password, args.first_name, args.last_name, args.phone))


if __name__ == "__main__":
    main()
