#!/usr/bin/env python3
"""
Seed starter responders for a local environment.

Run with:
    python scripts/seed_responders.py

Every seeded responder gets SEED_RESPONDER_PASSWORD (default "changeme123").
Existing emails are skipped, so the script can be re-run safely.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.domain.errors import DuplicateEmailError
from src.domain.reference_data import RESPONDER_SEEDS
from src.domain.services.responders import ResponderService
from src.infrastructure.db import dispose_engine, get_session_factory

load_dotenv()


async def seed_responders() -> None:
    password = os.getenv("SEED_RESPONDER_PASSWORD", "changeme123")
    session_factory = get_session_factory()

    created = 0
    async with session_factory() as session:
        service = ResponderService(session)
        for seed in RESPONDER_SEEDS:
            try:
                await service.create_responder(
                    full_name=seed["full_name"],
                    email=seed["email"],
                    password=password,
                    expertise=seed["expertise"],
                )
            except DuplicateEmailError:
                print(f"⏭️  {seed['email']} already exists")
                continue
            created += 1
            print(f"✅ {seed['full_name']} <{seed['email']}>: {', '.join(seed['expertise'])}")

    print(f"\n📊 Seeded {created} of {len(RESPONDER_SEEDS)} responders")


async def main() -> None:
    setup_logging(get_settings().log_level, json_logs=False)
    try:
        await seed_responders()
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
