"""Print a bearer token for an existing user.

Usage:
    SECRET_KEY=... python create_token.py --email aina@example.com [--days 365]
"""
import argparse
import sys

from bazaar_api.app.core.config import settings
from bazaar_api.app.core.db import get_connection
from bazaar_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Mint a bearer token for a user.")
    ap.add_argument("--email", required=True, help="Email of the user the token is issued for")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    args = ap.parse_args()
    settings.validate()

    conn = get_connection()
    try:
        row = conn.execute("SELECT id, username FROM users WHERE email = ?", (args.email,)).fetchone()
    finally:
        conn.close()
    if not row:
        print(f"[!] No user found with email: {args.email}", file=sys.stderr)
        sys.exit(2)

    token = create_access_token({"id": row["id"], "username": row["username"]}, expires_delta=args.days * 24 * 60 * 60)
    print(token)


if __name__ == "__main__":
    main()
