"""Hekayaty database management CLI.

Provides commands to create and drop the order engine's schema on the
database configured in ``domain.toml`` (``DATABASE_URL`` overrides it).

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys

from shared.domain import hekayaty, init_domain


def setup_database():
    print("Initializing hekayaty domain...")
    init_domain()
    with hekayaty.domain_context():
        print("Creating database schema...")
        hekayaty.setup_database()
    print("Done.")


def drop_database():
    print("Initializing hekayaty domain...")
    init_domain()
    with hekayaty.domain_context():
        print("Dropping database schema...")
        hekayaty.drop_database()
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Hekayaty database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
