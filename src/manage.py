"""Storefront management CLI.

Usage:
    python src/manage.py setup-db                            # Create all tables
    python src/manage.py drop-db                             # Drop all tables
    python src/manage.py process-deliveries                  # Fire overdue auto-deliveries
    python src/manage.py process-deliveries --include-failed # ...and retry failed ones
"""

import argparse
import sys


def setup_database():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront database schema...")
    drop_db(storefront)
    print("Done.")


def process_deliveries(include_failed=False):
    """Sweep scheduled deliveries that are due and still waiting to fire."""
    from storefront.delivery.firing import process_due_deliveries
    from storefront.domain import storefront

    storefront.init()
    with storefront.domain_context():
        outcomes = process_due_deliveries(include_failed=include_failed)

    for outcome, count in outcomes.items():
        print(f"  {outcome}: {count}")
    print("Done.")
    return outcomes


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    deliveries_parser = subparsers.add_parser(
        "process-deliveries",
        help="Auto-deliver dispatched orders whose delivery is overdue",
    )
    deliveries_parser.add_argument(
        "--include-failed",
        action="store_true",
        help="Also retry deliveries whose previous firing failed",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "process-deliveries":
        process_deliveries(include_failed=args.include_failed)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
