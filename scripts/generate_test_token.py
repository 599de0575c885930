#!/usr/bin/env python3
"""Generate JWT tokens for manual API testing."""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.api.deps import issue_smoke_token
from src.core.auth import Role

for role in Role:
    token = issue_smoke_token(f"{role.value}-test", role=role, name=f"Test {role.value.title()}")
    print(f"{role.value.title()} Token:\n{token}\n")
