#!/usr/bin/env python3
"""
Spendlog CLI - Command-line interface for the expense ledger.

Usage:
    python -m cli [--chat ID] <command> <subcommand> [options]

Commands:
    categories   Manage categories
    spend        Record and manage spending entries
    stats        Spending statistics
    migrate      Database migrations

Examples:
    python -m cli categories add food Food
    python -m cli spend add food 12.50 --date 2025-02-01
    python -m cli spend undo
    python -m cli --chat 100 stats month
    python -m cli stats period 2025-01-01 2025-02-01
    python -m cli migrate status
"""

import sys
import argparse
from cli import categories, spending, stats, migrate
from config import load_config
from errors import SpendlogError
from services.base import Services
from logger import setup_logging, get_logger


def build_parser():
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Spendlog - Expense ledger for chats and groups",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--chat",
        type=int,
        help="Conversation ID to work in (default: from config)",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    categories.setup_parser(subparsers)
    spending.setup_parser(subparsers)
    stats.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    return parser


def main(argv=None, services=None):
    """Main CLI entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if services is None:
            config = load_config()
            setup_logging(config)
            services = Services(config)

        args.conversation_id = (
            args.chat if args.chat is not None else services.config.default_conversation_id
        )

        # Every command except migrate needs a current schema
        if args.command != "migrate":
            services.schema.apply()

        args.func(args, services)
    except SpendlogError as e:
        get_logger("cli").error(str(e))
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
