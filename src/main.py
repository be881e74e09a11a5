"""Main application entry point for the food ordering service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from food_ordering_service.auth.password_hasher import PasswordHasher
from food_ordering_service.auth.token_service import TokenService, TokenSettings
from food_ordering_service.handlers.api_handler import create_app
from food_ordering_service.observability import configure_logging, setup_observability
from food_ordering_service.repositories.dynamodb import get_dynamodb_resource
from food_ordering_service.repositories.ordering_repositories import (
    CounterRepository,
    MenuItemRepository,
    OrderRepository,
    UserRepository,
)
from food_ordering_service.services.account_service import AccountService
from food_ordering_service.services.order_service import OrderService
from food_ordering_service.services.pricing_service import PricingService

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Loads token settings
    3. Creates the DynamoDB resource and repositories
    4. Creates services
    5. Creates the FastAPI app
    6. Sets up observability

    Returns:
        Configured FastAPI application instance

    Raises:
        ValueError: If JWT_SECRET is not configured
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing food ordering service...")

    token_settings = TokenSettings.from_env()

    dynamodb_resource = get_dynamodb_resource()

    users_table = os.getenv("DYNAMODB_USERS_TABLE", "food-ordering-users")
    emails_table = os.getenv("DYNAMODB_USER_EMAILS_TABLE", "food-ordering-user-emails")
    menu_table = os.getenv("DYNAMODB_MENU_ITEMS_TABLE", "food-ordering-menu-items")
    orders_table = os.getenv("DYNAMODB_ORDERS_TABLE", "food-ordering-orders")
    counters_table = os.getenv("DYNAMODB_COUNTERS_TABLE", "food-ordering-counters")

    user_repository = UserRepository(
        dynamodb_resource=dynamodb_resource,
        table_name=users_table,
        email_table_name=emails_table,
    )
    menu_repository = MenuItemRepository(dynamodb_resource=dynamodb_resource, table_name=menu_table)
    order_repository = OrderRepository(dynamodb_resource=dynamodb_resource, table_name=orders_table)
    counter_repository = CounterRepository(
        dynamodb_resource=dynamodb_resource, table_name=counters_table
    )

    logger.info(
        f"Repositories configured - users: {users_table}, menu: {menu_table}, "
        f"orders: {orders_table}"
    )

    token_service = TokenService(settings=token_settings)
    pricing_service = PricingService(menu_repository=menu_repository)

    order_service = OrderService(
        order_repository=order_repository,
        user_repository=user_repository,
        counter_repository=counter_repository,
        menu_repository=menu_repository,
        pricing_service=pricing_service,
    )
    account_service = AccountService(
        user_repository=user_repository,
        counter_repository=counter_repository,
        password_hasher=PasswordHasher(),
        token_service=token_service,
    )

    logger.info("Services initialized")

    app = create_app(
        order_service=order_service,
        account_service=account_service,
        token_service=token_service,
    )

    setup_observability(app, enable_exporters=os.getenv("ENABLE_OTEL", "false").lower() == "true")

    logger.info("Food ordering service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
