#!/usr/bin/env python3
"""
Scan stored questions for lifecycle invariant violations.

Run with:
    python scripts/audit_questions.py

Exits non-zero when any question is inconsistent (e.g. a pending question
with a responder, or an answered question without answer text).
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.domain.lifecycle import check_invariants
from src.domain.services.lifecycle import to_record
from src.infrastructure.db import dispose_engine, get_session_factory
from src.infrastructure.repositories.questions import QuestionRepository

load_dotenv()


async def audit() -> int:
    session_factory = get_session_factory()
    async with session_factory() as session:
        questions = await QuestionRepository(session).find()

    problems = 0
    for question in questions:
        violations = check_invariants(to_record(question))
        if not violations:
            continue
        problems += 1
        print(f"❌ {question.id} [{question.status.value}] {question.title}")
        for violation in violations:
            print(f"   - {violation}")

    print(f"\n📊 Checked {len(questions)} questions, {problems} with violations")
    return problems


async def main() -> None:
    setup_logging(get_settings().log_level, json_logs=False)
    try:
        problems = await audit()
    finally:
        await dispose_engine()
    sys.exit(1 if problems else 0)


if __name__ == "__main__":
    asyncio.run(main())
