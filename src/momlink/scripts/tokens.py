# src/momlink/scripts/tokens.py
"""
Mint bearer tokens for local development.

Tokens are normally issued by the identity provider; this signs one with the
configured secret so the API can be exercised by hand:

  python -m momlink.scripts.tokens user-123 --email mom@example.com --ensure-profile
"""

from __future__ import annotations

import argparse

from momlink.api.v1.dependencies import create_access_token
from momlink.db.session import SessionLocal
from momlink.services.profiles import ensure_profile


def mint_token(user_id: str, email: str | None = None) -> str:
    """Return a signed access token whose subject is ``user_id``.

    Args:
        user_id: Account identifier placed in the ``sub`` claim
        email: Optional email claim, used when the profile is first created
    """
    claims = {"email": email} if email else None
    return create_access_token(user_id, extra_claims=claims)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Mint a development bearer token")
    parser.add_argument("user_id", help="Account id to place in the token subject")
    parser.add_argument("--email", help="Email claim to embed in the token")
    parser.add_argument(
        "--ensure-profile",
        action="store_true",
        help="Create the bare profile row for the account if it is missing",
    )
    args = parser.parse_args(argv)

    if args.ensure_profile:
        if not args.email:
            parser.error("--ensure-profile requires --email")
        db = SessionLocal()
        try:
            ensure_profile(db, args.user_id, args.email)
        finally:
            db.close()
        print(f"Profile ready for {args.user_id}")

    print(mint_token(args.user_id, args.email))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
