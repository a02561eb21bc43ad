"""Marketplace management CLI.

Creates and drops the database schema and bootstraps the first administrator.

Usage:
    python src/manage.py setup-db                            # Create all tables
    python src/manage.py drop-db                             # Drop all tables
    python src/manage.py create-admin --email a@b.c --password ...
"""

import argparse
import sys


def setup_database():
    """Create the marketplace database schema."""
    from marketplace.domain import marketplace
    from marketplace.utils.db import setup_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Creating database schema...")
    setup_db(marketplace)
    print("Done.")


def drop_database():
    """Drop the marketplace database schema."""
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Dropping database schema...")
    drop_db(marketplace)
    print("Done.")


def create_admin(email, password, first_name=None, last_name=None):
    """Register (or promote) a user and grant the admin and vendor roles."""
    from marketplace.accounts.passwords import MIN_PASSWORD_LENGTH, hash_password
    from marketplace.accounts.profile import ChangeUserRoles
    from marketplace.accounts.registration import RegisterUser, find_user_by_email
    from marketplace.domain import marketplace

    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        sys.exit(1)

    marketplace.init()
    with marketplace.domain_context():
        user = find_user_by_email(email)
        if user is None:
            user_id = marketplace.process(
                RegisterUser(
                    email=email,
                    password_hash=hash_password(password),
                    first_name=first_name,
                    last_name=last_name,
                ),
                asynchronous=False,
            )
            print(f"Registered {email}.")
        else:
            user_id = str(user.id)
            print(f"{email} already exists; promoting.")

        marketplace.process(
            ChangeUserRoles(user_id=user_id, is_admin=True, is_vendor=True, email_verified=True),
            asynchronous=False,
        )
    print(f"  {email} is now an administrator.")


def main():
    parser = argparse.ArgumentParser(description="Marketplace management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create or promote an administrator")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--first-name")
    admin_parser.add_argument("--last-name")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.email, args.password, args.first_name, args.last_name)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
