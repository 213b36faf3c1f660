#!/usr/bin/env python3

from errors import NotFound
from logger import get_logger

logger = get_logger(__name__)


def cmd_list(args, services):
    """List all categories of the conversation."""
    categories = services.categories.list(args.conversation_id)

    if not categories:
        logger.info("No categories created")
        return

    logger.info("Categories")
    for category in categories:
        logger.info(f"  {category}")


def cmd_add(args, services):
    """Create a category, or report the one already using the alias."""
    try:
        category = services.categories.find(args.conversation_id, args.alias)
        logger.info(f"This alias is reserved for {category.name}")
        return
    except NotFound:
        pass

    category = services.categories.resolve_or_create(
        args.conversation_id, args.alias, args.name
    )
    logger.info("Category saved")
    logger.info(f"  Alias={category.alias}")
    logger.info(f"  Name={category.name}")


def cmd_rename(args, services):
    """Change the display name of a category."""
    category = services.categories.rename(args.conversation_id, args.alias, args.name)
    logger.info(f"Category updated: {category}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, and rename spending categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    # categories list
    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    # categories add
    add_parser = categories_subparsers.add_parser("add", help="Create a new category")
    add_parser.add_argument("alias", help="Short handle, e.g. food")
    add_parser.add_argument("name", help="Display name, e.g. Food")
    add_parser.set_defaults(func=cmd_add)

    # categories rename
    rename_parser = categories_subparsers.add_parser(
        "rename", help="Change the display name of a category"
    )
    rename_parser.add_argument("alias", help="Alias of the category to rename")
    rename_parser.add_argument("name", help="New display name")
    rename_parser.set_defaults(func=cmd_rename)
