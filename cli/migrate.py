#!/usr/bin/env python3

from logger import get_logger

logger = get_logger(__name__)


def cmd_status(args, services):
    """Show migration status."""
    db_path = services.db_manager.get_db_path()

    if not db_path.exists():
        logger.info(
            "Database does not exist. Run 'python -m cli migrate apply' to create it."
        )
        return

    status = services.schema.status()

    logger.info("Migration Status:")
    logger.info("================")

    if not status:
        logger.info("No migrations found.")
        return

    for migration, applied in status:
        status_text = "APPLIED" if applied else "PENDING"
        logger.info(f"{migration}: {status_text}")

    applied_count = len([m for m, applied in status if applied])
    logger.info(f"\nTotal migrations: {len(status)}")
    logger.info(f"Applied: {applied_count}")
    logger.info(f"Pending: {len(status) - applied_count}")


def cmd_apply(args, services):
    """Apply pending migrations."""
    applied = services.schema.apply()

    if not applied:
        logger.info("No pending migrations.")
        return

    logger.info(f"Successfully applied {len(applied)} migration(s).")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Manage database schema migrations",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    # migrate status
    status_parser = migrate_subparsers.add_parser(
        "status", help="Show migration status"
    )
    status_parser.set_defaults(func=cmd_status)

    # migrate apply
    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    )
    apply_parser.set_defaults(func=cmd_apply)
