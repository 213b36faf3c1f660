#!/usr/bin/env python3

import time

from cli.common import format_timestamp, parse_date
from logger import get_logger
from models.money import format_cents, parse_amount

logger = get_logger(__name__)


def cmd_add(args, services):
    """Record a spending entry for a category alias."""
    category = services.categories.find(args.conversation_id, args.alias)
    amount_cents = parse_amount(args.amount)
    occurred_at = args.date if args.date is not None else int(time.time())

    entry = services.ledger.record(
        args.conversation_id, category.id, occurred_at, amount_cents
    )
    logger.info(f"Added {format_cents(entry.amount_cents)} to {category} (entry #{entry.id})")


def cmd_rm(args, services):
    """Soft delete an entry by ID."""
    if services.ledger.soft_delete(args.entry_id, args.conversation_id):
        logger.info(f"Removed entry #{args.entry_id}")
    else:
        logger.info(f"Entry #{args.entry_id} was already removed")


def cmd_undo(args, services):
    """Soft delete the most recently recorded entry."""
    entry = services.ledger.remove_last(args.conversation_id)
    if entry is None:
        logger.info("Nothing to remove")
    else:
        logger.info(f"Removed {entry}")


def cmd_list(args, services):
    """List entries, optionally filtered by category and date range."""
    categories = {c.id: c for c in services.categories.list(args.conversation_id)}

    category_id = None
    if args.alias:
        category_id = services.categories.find(args.conversation_id, args.alias).id

    count = 0
    for entry in services.ledger.list(
        args.conversation_id, category_id, args.date_from, args.date_to
    ):
        logger.info(
            f"#{entry.id}  {format_timestamp(entry.occurred_at)}  "
            f"{categories[entry.category_id]}  {format_cents(entry.amount_cents)}"
        )
        count += 1

    if count == 0:
        logger.info("No entries found.")


def setup_parser(subparsers):
    """Setup spend subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "spend",
        help="Record and manage spending entries",
        description="Record, remove, and list spending entries",
    )

    spend_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available spending commands",
        dest="subcommand",
        required=True,
    )

    # spend add
    add_parser = spend_subparsers.add_parser("add", help="Record a spending entry")
    add_parser.add_argument("alias", help="Category alias")
    add_parser.add_argument("amount", help="Amount, e.g. 12.50")
    add_parser.add_argument(
        "--date",
        type=parse_date,
        help="Date the expense happened (YYYY-MM-DD, default: now)",
    )
    add_parser.set_defaults(func=cmd_add)

    # spend rm
    rm_parser = spend_subparsers.add_parser("rm", help="Remove an entry by ID")
    rm_parser.add_argument("entry_id", type=int, help="ID of the entry to remove")
    rm_parser.set_defaults(func=cmd_rm)

    # spend undo
    undo_parser = spend_subparsers.add_parser(
        "undo", help="Remove the last recorded entry"
    )
    undo_parser.set_defaults(func=cmd_undo)

    # spend list
    list_parser = spend_subparsers.add_parser("list", help="List entries")
    list_parser.add_argument("--alias", help="Only entries of this category")
    list_parser.add_argument(
        "--from", dest="date_from", type=parse_date, help="Start date (inclusive)"
    )
    list_parser.add_argument(
        "--to", dest="date_to", type=parse_date, help="End date (exclusive)"
    )
    list_parser.set_defaults(func=cmd_list)
