"""Order pricing against authoritative menu prices."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from food_ordering_service.models.order_models import OrderItem, OrderItemRequest
from food_ordering_service.repositories.ordering_repositories import MenuItemRepository
from food_ordering_service.services.errors import InvalidRequestError

logger = logging.getLogger(__name__)


def compute_total(items: Iterable[OrderItem]) -> Decimal:
    """Sum price * quantity over resolved items using exact decimal arithmetic.

    Args:
        items: Resolved order items

    Returns:
        Decimal: Total price, Decimal("0") for no items

    Raises:
        InvalidRequestError: If any quantity is not a positive integer
    """
    total = Decimal("0")
    for item in items:
        if item.quantity < 1:
            raise InvalidRequestError("Quantity must be a positive integer")
        total += item.menu_item.price * item.quantity
    return total


@dataclass
class PricedItems:
    """Resolved order items and their total.

    Attributes:
        items: Items whose menu reference resolved, in request order
        total: Sum of price * quantity over items
    """

    items: list[OrderItem]
    total: Decimal


class PricingService:
    """Resolves requested line items against the menu and prices them."""

    def __init__(self, menu_repository: MenuItemRepository) -> None:
        """Initialize the PricingService.

        Args:
            menu_repository: Repository holding authoritative menu prices
        """
        self.menu_repository = menu_repository

    def resolve_items(self, requested: Sequence[OrderItemRequest]) -> list[OrderItem]:
        """Resolve requested menu references.

        Unknown menu item ids are dropped; every other item is kept regardless
        of its position in the request.

        Args:
            requested: Line items from the client

        Returns:
            Resolved items in request order

        Raises:
            InvalidRequestError: If a quantity is not positive
        """
        for line in requested:
            if line.quantity < 1:
                raise InvalidRequestError("Quantity must be a positive integer")

        menu = self.menu_repository.get_items([line.menu_item_id for line in requested])

        resolved: list[OrderItem] = []
        dropped: list[int] = []
        for line in requested:
            menu_item = menu.get(line.menu_item_id)
            if menu_item is None:
                dropped.append(line.menu_item_id)
                continue
            resolved.append(OrderItem(menu_item=menu_item, quantity=line.quantity))

        if dropped:
            logger.warning(f"Dropped unknown menu items from order: {dropped}")

        return resolved

    def price_items(self, requested: Sequence[OrderItemRequest]) -> PricedItems:
        """Resolve and price requested line items.

        Args:
            requested: Line items from the client

        Returns:
            PricedItems with the resolved items and total
        """
        items = self.resolve_items(requested)
        return PricedItems(items=items, total=compute_total(items))
