"""Shared pytest fixtures and configuration for all tests."""

import os
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

# Entry-point modules skip building the real application in test mode
os.environ["ENVIRONMENT"] = "test"

from food_ordering_service.auth.password_hasher import PasswordHasher  # noqa: E402
from food_ordering_service.auth.token_service import TokenService, TokenSettings  # noqa: E402
from food_ordering_service.models.order_models import MenuItem  # noqa: E402
from food_ordering_service.models.user_models import User  # noqa: E402


class FixedClock:
    """Controllable clock for expiry and timestamp tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock() -> FixedClock:
    """Fixture providing a clock frozen at a whole second."""
    return FixedClock(datetime(2024, 1, 15, 10, 30, tzinfo=UTC))


@pytest.fixture
def token_settings() -> TokenSettings:
    """Fixture providing token settings for tests."""
    return TokenSettings(secret="test-secret-key-for-signing", issuer="myapp", audience="myclient")


@pytest.fixture
def token_service(token_settings: TokenSettings, clock: FixedClock) -> TokenService:
    """Fixture providing a token service on the test clock."""
    return TokenService(settings=token_settings, clock=clock)


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return PasswordHasher()


@pytest.fixture
def sample_user(password_hasher: PasswordHasher) -> User:
    """Fixture providing a registered user whose password is 'pw1'."""
    salt = bytes(range(16))
    return User(
        id=7,
        first_name="Anna",
        last_name="Kovacs",
        email="a@x.com",
        password_hash=password_hasher.hash_password("pw1", salt),
        salt=salt,
        is_active=True,
        created_at=datetime(2024, 1, 1, 12, 0, tzinfo=UTC),
    )


@pytest.fixture
def menu_items() -> list[MenuItem]:
    """Fixture providing sample menu items."""
    return [
        MenuItem(id=1, name="Gulyas", price=Decimal("1000")),
        MenuItem(id=2, name="Langos", price=Decimal("500")),
        MenuItem(id=3, name="Palacsinta", price=Decimal("650.50")),
    ]
