#!/usr/bin/env python3
"""Generate bearer tokens for manual API testing.

Run with:
    python scripts/generate_test_token.py student@example.com
"""

from __future__ import annotations

import sys

from compass.api.deps import issue_smoke_token
from compass.core.auth import Role


def main(email: str) -> None:
    user_token = issue_smoke_token(f"user-{email}", email=email, role=Role.USER)
    print(f"User Token:\n{user_token}\n")

    admin_token = issue_smoke_token(f"admin-{email}", email=email, role=Role.ADMIN)
    print(f"Admin Token:\n{admin_token}")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "student@example.com")
