#!/usr/bin/env python3
"""
Create (or promote) an admin account.

Run with:
    python scripts/create_admin.py admin@askline.org --name "Site Admin"

The password is read from ADMIN_PASSWORD or prompted for.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
from sqlalchemy import select

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.domain.services.accounts import AccountService, hash_password
from src.infrastructure.db import dispose_engine, get_session_factory
from src.infrastructure.db.models import UserModel, UserRole, UserStatus

load_dotenv()


async def create_admin(email: str, full_name: str | None, password: str) -> None:
    session_factory = get_session_factory()
    async with session_factory() as session:
        existing = await session.scalar(select(UserModel).where(UserModel.email == email.lower()))
        if existing is not None:
            existing.role = UserRole.ADMIN
            existing.status = UserStatus.ACTIVE
            existing.hashed_password = hash_password(password)
            await session.commit()
            print(f"✅ Promoted {email} to admin")
            return

        account, _ = await AccountService(session).register(
            email=email, password=password, full_name=full_name, role=UserRole.ADMIN
        )
        print(f"✅ Created admin {email} (id={account.id})")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--name", default=None)
    args = parser.parse_args()

    setup_logging(get_settings().log_level, json_logs=False)
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
    if len(password) < 8:
        print("❌ Password must be at least 8 characters")
        sys.exit(1)

    async def run() -> None:
        try:
            await create_admin(args.email, args.name, password)
        finally:
            await dispose_engine()

    asyncio.run(run())


if __name__ == "__main__":
    main()
