"""
Helper script to create a login account for the admin app.

Accounts are stored in the `users` table of the configured store
(STORE_URL / STORE_KEY, read the same way the app reads them).
There is no sign-up form in the app - use this script instead.

Usage:
    python utils/create_user.py
"""
import getpass
import sys
from pathlib import Path

# Allow running as a plain script from the project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.auth import create_user  # noqa: E402
from core.config import ConfigError, load_settings  # noqa: E402
from core.db_init import init_db  # noqa: E402
from core.services import StoreError  # noqa: E402


def main() -> int:
    print("=" * 60)
    print("Create admin login")
    print("=" * 60)
    try:
        settings = load_settings()
        conn = init_db(settings)
    except (ConfigError, StoreError) as e:
        print(f"\n❌ {e}")
        return 1

    email = input("Email: ").strip()
    name = input("Display name: ").strip()
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Confirm password: "):
        print("\n❌ Passwords don't match")
        return 1

    try:
        create_user(conn, email, password, name)
    except (ValueError, StoreError) as e:
        print(f"\n❌ {e}")
        return 1
    print(f"\n✅ Account created for {email.lower()}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
