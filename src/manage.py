"""SmartCommerce management CLI.

Creates and drops the schema for SQL-backed providers and prints a
low-stock report from the ledger.

Usage:
    python src/manage.py setup-db                    # Create all tables
    python src/manage.py drop-db                     # Drop all tables
    python src/manage.py stock-report --threshold 5  # Products below 5 units
"""

import argparse
import sys


def setup_databases():
    """Create database schemas for every SQL provider."""
    from commerce.domain import commerce
    from commerce.utils.db import setup_db

    print("Initializing commerce domain...")
    commerce.init()
    print("Creating database schema...")
    touched = setup_db(commerce)
    if touched:
        print(f"  Schema ready for: {', '.join(touched)}.")
    else:
        print("  No SQL providers configured, nothing to create.")

    print("Done.")


def drop_databases():
    """Drop database schemas for every SQL provider."""
    from commerce.domain import commerce
    from commerce.utils.db import drop_db

    print("Initializing commerce domain...")
    commerce.init()
    print("Dropping database schema...")
    touched = drop_db(commerce)
    if touched:
        print(f"  Schema dropped for: {', '.join(touched)}.")
    else:
        print("  No SQL providers configured, nothing to drop.")

    print("Done.")


def print_stock_report(threshold=None):
    """Print every ledger row below ``threshold``, lowest stock first.

    Needs an active domain context.
    """
    from protean.utils.globals import current_domain

    from commerce.inventory.ledger import list_below_threshold, list_out_of_stock

    if threshold is None:
        threshold = current_domain.config["custom"]["default_low_stock_threshold"]

    records = list_below_threshold(threshold)
    print(f"Products below {threshold} units: {len(records)}")
    for record in records:
        print(f"  {record.product_id}  {record.quantity}")

    empty = list_out_of_stock()
    print(f"Out of stock: {len(empty)}")
    for record in empty:
        print(f"  {record.product_id}")


def stock_report(threshold=None):
    from commerce.domain import commerce

    commerce.init()
    with commerce.domain_context():
        print_stock_report(threshold)


def main():
    parser = argparse.ArgumentParser(description="SmartCommerce management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    report_parser = subparsers.add_parser("stock-report", help="List low-stock products")
    report_parser.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="Report products with fewer units than this (default: from config)",
    )

    args = parser.parse_args()

    from commerce.utils.logging import configure_logging

    configure_logging()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "stock-report":
        stock_report(args.threshold)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
