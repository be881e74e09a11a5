"""Order service for placing, listing and fulfilling orders."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from food_ordering_service.models.order_models import MenuItem, Order, OrderRequest, OrderSummary
from food_ordering_service.observability import traced
from food_ordering_service.observability.metrics import record_order_completed, record_order_placed
from food_ordering_service.repositories.ordering_repositories import (
    CounterRepository,
    MenuItemRepository,
    OrderRepository,
    UserRepository,
)
from food_ordering_service.services.errors import InvalidRequestError, NotFoundError
from food_ordering_service.services.pricing_service import PricingService

logger = logging.getLogger(__name__)

ORDER_SEQUENCE = "orders"
UNKNOWN_CUSTOMER = "Unknown customer"


class OrderService:
    """Service for the order lifecycle.

    Orders are created undelivered by an authenticated user and flipped to
    delivered exactly once by staff. Totals always come from the pricing
    service, never from the client.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        user_repository: UserRepository,
        counter_repository: CounterRepository,
        menu_repository: MenuItemRepository,
        pricing_service: PricingService,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the OrderService.

        Args:
            order_repository: Repository for orders
            user_repository: Repository used to resolve customer names
            counter_repository: Allocates order ids
            menu_repository: Repository for the menu
            pricing_service: Resolves and prices requested items
            clock: Returns the current UTC time (defaults to the system clock)
        """
        self.order_repository = order_repository
        self.user_repository = user_repository
        self.counter_repository = counter_repository
        self.menu_repository = menu_repository
        self.pricing_service = pricing_service
        self._clock = clock or (lambda: datetime.now(UTC))

    @traced("list_open_orders")
    async def list_open_orders(self) -> list[OrderSummary]:
        """List undelivered orders with their owner's display name.

        Returns:
            List of OrderSummary ordered by order id
        """
        orders = self.order_repository.list_open_orders()

        names: dict[int, str] = {}
        for user_id in {order.user_id for order in orders}:
            user = self.user_repository.get_user(user_id)
            names[user_id] = user.display_name if user else UNKNOWN_CUSTOMER

        return [
            OrderSummary(**order.model_dump(), customer_name=names[order.user_id])
            for order in orders
        ]

    @traced("get_order")
    async def get_order(self, order_id: int) -> Order:
        """Get a single order.

        Raises:
            NotFoundError: If the order does not exist
        """
        order = self.order_repository.get_order(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    @traced("list_menu")
    async def list_menu(self) -> list[MenuItem]:
        return self.menu_repository.list_items()

    @traced("list_orders_for_user")
    async def list_orders_for_user(self, user_id: int) -> list[Order]:
        return self.order_repository.list_orders_for_user(user_id)

    @traced("place_order")
    async def place_order(self, user_id: int, request: OrderRequest | None) -> Order:
        """Place an order for an authenticated user.

        Menu references that do not resolve are dropped from the order; an
        order in which nothing resolves is rejected.

        Args:
            user_id: Authenticated user id from the bearer token
            request: Order payload

        Returns:
            The persisted order, undelivered, with its server-computed total

        Raises:
            InvalidRequestError: If the request is missing, has no items, or
                none of its items are on the menu
        """
        if request is None:
            raise InvalidRequestError("Order data is missing")
        if not request.items:
            raise InvalidRequestError("Order must contain at least one item")

        priced = self.pricing_service.price_items(request.items)
        if not priced.items:
            raise InvalidRequestError("None of the ordered items are on the menu")

        order = Order(
            id=self.counter_repository.next_id(ORDER_SEQUENCE),
            user_id=user_id,
            customer_phone=request.customer_phone,
            customer_address=request.customer_address,
            items=priced.items,
            total_price=priced.total,
            is_delivered=False,
            order_date=self._clock(),
        )
        self.order_repository.save_order(order)

        logger.info(
            f"Order {order.id} placed by user {user_id}: "
            f"{len(order.items)} items, total {order.total_price}"
        )
        record_order_placed(len(order.items), order.total_price)
        return order

    @traced("complete_order")
    async def complete_order(self, order_id: int) -> None:
        """Mark an order delivered.

        Completing an already delivered order succeeds without change.

        Args:
            order_id: Order to complete

        Raises:
            NotFoundError: If the order does not exist, including when it
                disappears before the update is written
        """
        if not self.order_repository.mark_delivered(order_id):
            raise NotFoundError(f"Order {order_id} not found")

        logger.info(f"Order {order_id} marked delivered")
        record_order_completed()
