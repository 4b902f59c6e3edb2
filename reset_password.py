#!/usr/bin/env python3
"""
Reset a user's password in the Bazaar Ramadhan SQLite database.

This script DOES NOT read or reveal any existing passwords. It simply sets a new bcrypt
hash for the specified user email.

Usage:
    python reset_password.py --db ./bazaar_api/reviews.db --email aina@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import os
import sys
import sqlite3
import argparse
import getpass

from bazaar_api.app.core.security import hash_password


def main():
    ap = argparse.ArgumentParser(description="Reset a user's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./bazaar_api/reviews.db)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    hashed = hash_password(new_password)

    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE email = ?", (args.email,))
        if not cur.fetchone():
            print(f"[!] No user found with email: {args.email}", file=sys.stderr)
            sys.exit(2)

        cur.execute("UPDATE users SET password_hash = ? WHERE email = ?", (hashed, args.email))
        conn.commit()
        print(f"[+] Password updated for user: {args.email}")
    finally:
        conn.close()

if __name__ == "__main__":
    main()
