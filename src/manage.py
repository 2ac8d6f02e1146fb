"""ReviewHub management CLI.

Usage:
    python src/manage.py setup-db     # Create all tables
    python src/manage.py drop-db      # Drop all tables
    python src/manage.py seed-roles   # Create the built-in roles
"""

import argparse
import sys


def _domain():
    from reviewhub.domain import reviewhub

    print("Initializing reviewhub domain...")
    reviewhub.init()
    return reviewhub


def setup_database():
    """Create the database schema."""
    from reviewhub.utils.db import setup_db

    domain = _domain()
    print("Creating reviewhub database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop the database schema."""
    from reviewhub.utils.db import drop_db

    domain = _domain()
    print("Dropping reviewhub database schema...")
    drop_db(domain)
    print("Done.")


def seed_roles():
    """Create the built-in roles that do not exist yet."""
    from reviewhub.role.seeding import seed_builtin_roles

    domain = _domain()
    with domain.domain_context():
        seeded = seed_builtin_roles()
    for kind, role_id in seeded.items():
        print(f"  {kind}: {role_id}")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="ReviewHub management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-roles", help="Create the built-in roles")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-roles":
        seed_roles()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
