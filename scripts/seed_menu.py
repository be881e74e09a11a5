"""
Menu Seeding Script

Loads menu items from a JSON file into the menu items DynamoDB table.
Run from project root: python scripts/seed_menu.py [scripts/menu.json] [--overwrite]

Items already present are left untouched unless --overwrite is given.
"""

import argparse
import json
import logging
import os
from decimal import Decimal
from pathlib import Path

from food_ordering_service.models.order_models import MenuItem
from food_ordering_service.observability import configure_logging
from food_ordering_service.repositories.dynamodb import get_dynamodb_resource
from food_ordering_service.repositories.ordering_repositories import MenuItemRepository

logger = logging.getLogger(__name__)

DEFAULT_MENU_FILE = Path(__file__).with_name("menu.json")


def load_menu(path: Path) -> list[MenuItem]:
    """Read menu items from a JSON array of {id, name, price} objects."""
    with path.open(encoding="utf-8") as f:
        # Decimal prices, not float
        entries = json.load(f, parse_float=Decimal)

    return [MenuItem(**entry) for entry in entries]


def seed_menu(
    repository: MenuItemRepository, items: list[MenuItem], overwrite: bool = False
) -> tuple[int, int]:
    """Write menu items to the repository.

    Args:
        repository: Target menu repository
        items: Items to write
        overwrite: Replace items whose id already exists

    Returns:
        Tuple of (written, skipped) counts
    """
    written = skipped = 0
    for item in items:
        if not overwrite and repository.get_item(item.id) is not None:
            logger.info(f"Menu item {item.id} already exists, skipping")
            skipped += 1
            continue

        repository.save_item(item)
        written += 1

    return written, skipped


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the food ordering menu")
    parser.add_argument("menu_file", nargs="?", type=Path, default=DEFAULT_MENU_FILE)
    parser.add_argument(
        "--table",
        default=os.getenv("DYNAMODB_MENU_ITEMS_TABLE", "food-ordering-menu-items"),
        help="Menu items table name",
    )
    parser.add_argument("--overwrite", action="store_true", help="Replace existing items")
    args = parser.parse_args(argv)

    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    items = load_menu(args.menu_file)
    repository = MenuItemRepository(dynamodb_resource=get_dynamodb_resource(), table_name=args.table)
    written, skipped = seed_menu(repository, items, overwrite=args.overwrite)

    logger.info(f"Menu seeded into {args.table}: {written} written, {skipped} skipped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
