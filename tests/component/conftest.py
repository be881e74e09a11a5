"""In-memory repositories and a fully wired application for component tests."""

from collections import defaultdict
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from food_ordering_service.auth.password_hasher import PasswordHasher
from food_ordering_service.auth.token_service import TokenService
from food_ordering_service.handlers.api_handler import create_app
from food_ordering_service.models.order_models import MenuItem, Order
from food_ordering_service.models.user_models import User
from food_ordering_service.services.account_service import AccountService
from food_ordering_service.services.order_service import OrderService
from food_ordering_service.services.pricing_service import PricingService


class InMemoryCounterRepository:
    def __init__(self) -> None:
        self.counters: dict[str, int] = defaultdict(int)

    def next_id(self, counter_name: str) -> int:
        self.counters[counter_name] += 1
        return self.counters[counter_name]


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.emails: dict[str, int] = {}

    def get_user(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        user_id = self.emails.get(email)
        return None if user_id is None else self.users.get(user_id)

    def email_exists(self, email: str) -> bool:
        return email in self.emails

    def create_user(self, user: User) -> bool:
        if user.email in self.emails or user.id in self.users:
            return False
        self.emails[user.email] = user.id
        self.users[user.id] = user
        return True


class InMemoryMenuItemRepository:
    def __init__(self, items: list[MenuItem]) -> None:
        self.items = {item.id: item for item in items}

    def get_items(self, menu_item_ids: list[int]) -> dict[int, MenuItem]:
        return {i: self.items[i] for i in menu_item_ids if i in self.items}

    def list_items(self) -> list[MenuItem]:
        return sorted(self.items.values(), key=lambda m: m.id)


class InMemoryOrderRepository:
    def __init__(self) -> None:
        self.orders: dict[int, Order] = {}

    def save_order(self, order: Order) -> None:
        self.orders[order.id] = order

    def get_order(self, order_id: int) -> Order | None:
        return self.orders.get(order_id)

    def list_open_orders(self) -> list[Order]:
        return [o for _, o in sorted(self.orders.items()) if not o.is_delivered]

    def list_orders_for_user(self, user_id: int) -> list[Order]:
        return [o for _, o in sorted(self.orders.items()) if o.user_id == user_id]

    def mark_delivered(self, order_id: int) -> bool:
        if order_id not in self.orders:
            return False
        self.orders[order_id] = self.orders[order_id].model_copy(update={"is_delivered": True})
        return True


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def order_repository() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def client(
    token_service: TokenService,
    user_repository: InMemoryUserRepository,
    order_repository: InMemoryOrderRepository,
    clock,
) -> TestClient:
    """Create a test client backed by in-memory storage."""
    counter_repository = InMemoryCounterRepository()
    menu_repository = InMemoryMenuItemRepository(
        [
            MenuItem(id=1, name="Gulyas", price=Decimal("1000")),
            MenuItem(id=2, name="Langos", price=Decimal("500")),
        ]
    )
    order_service = OrderService(
        order_repository=order_repository,
        user_repository=user_repository,
        counter_repository=counter_repository,
        menu_repository=menu_repository,
        pricing_service=PricingService(menu_repository=menu_repository),
        clock=clock,
    )
    account_service = AccountService(
        user_repository=user_repository,
        counter_repository=counter_repository,
        password_hasher=PasswordHasher(),
        token_service=token_service,
        clock=clock,
    )
    app = create_app(
        order_service=order_service,
        account_service=account_service,
        token_service=token_service,
    )
    return TestClient(app)
