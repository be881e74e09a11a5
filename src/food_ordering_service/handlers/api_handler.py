"""FastAPI application for the ordering API."""

import logging

from fastapi import Depends, FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from food_ordering_service.auth.api_dependencies import BEARER_CHALLENGE, get_claims_from_header
from food_ordering_service.auth.token_service import TokenClaims, TokenService
from food_ordering_service.models.order_models import (
    MenuItem,
    Order,
    OrderConfirmation,
    OrderRequest,
    OrderSummary,
)
from food_ordering_service.models.user_models import (
    LoginRequest,
    ProfileView,
    RegisterRequest,
    TokenResponse,
)
from food_ordering_service.services.account_service import AccountService
from food_ordering_service.services.errors import OrderingError
from food_ordering_service.services.order_service import OrderService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


def create_app(
    order_service: OrderService,
    account_service: AccountService,
    token_service: TokenService,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        order_service: Service for orders and the menu
        account_service: Service for registration, login and profiles
        token_service: Validates bearer tokens on protected routes

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Food Ordering API",
        description="Menu browsing, order placement and fulfillment",
        version="1.0.0",
    )

    # Store services in app state for access in route handlers
    app.state.order_service = order_service
    app.state.account_service = account_service
    app.state.token_service = token_service

    @app.exception_handler(OrderingError)
    async def ordering_error_handler(_request: Request, exc: OrderingError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"Request failed: {exc.message}")
            return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error"})

        headers = BEARER_CHALLENGE if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code, content={"detail": exc.message}, headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Invalid bodies are client errors (400), not 422
        errors = [{"loc": list(e.get("loc", [])), "msg": e.get("msg", "")} for e in exc.errors()]
        return JSONResponse(status_code=400, content={"detail": errors})

    def authenticate(authorization: str | None = Header(None)) -> TokenClaims:
        """Dependency to validate the bearer token."""
        return get_claims_from_header(
            authorization=authorization, token_service=app.state.token_service
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        return HealthResponse(status="healthy")

    @app.get("/orders", response_model=list[OrderSummary], tags=["Orders"])
    async def list_open_orders() -> list[OrderSummary]:
        """List orders that have not been delivered yet."""
        orders: list[OrderSummary] = await app.state.order_service.list_open_orders()
        return orders

    @app.get("/orders/{order_id}", response_model=Order, tags=["Orders"])
    async def get_order(order_id: int) -> Order:
        """Get a single order by id."""
        order: Order = await app.state.order_service.get_order(order_id)
        return order

    @app.put("/orders/{order_id}/complete", status_code=204, tags=["Orders"])
    async def complete_order(order_id: int) -> Response:
        """Mark an order delivered."""
        await app.state.order_service.complete_order(order_id)
        return Response(status_code=204)

    @app.get("/menuitems", response_model=list[MenuItem], tags=["Menu"])
    async def list_menu() -> list[MenuItem]:
        menu: list[MenuItem] = await app.state.order_service.list_menu()
        return menu

    @app.post("/order", response_model=OrderConfirmation, tags=["Orders"])
    async def place_order(
        order_request: OrderRequest,
        claims: TokenClaims = Depends(authenticate),
    ) -> OrderConfirmation:
        """Place an order as the authenticated user.

        Args:
            order_request: Contact details and requested items

        Returns:
            Confirmation with the persisted order and its computed total
        """
        order = await app.state.order_service.place_order(claims.user_id, order_request)
        return OrderConfirmation(message="Order has been placed successfully", order=order)

    @app.post("/login", response_model=TokenResponse, tags=["Auth"])
    async def login(login_request: LoginRequest) -> TokenResponse:
        token = await app.state.account_service.login(login_request)
        return TokenResponse(token=token)

    @app.post("/register", response_model=MessageResponse, tags=["Auth"])
    async def register(register_request: RegisterRequest) -> MessageResponse:
        await app.state.account_service.register(register_request)
        return MessageResponse(message="Registration successful")

    @app.get("/users/profile", response_model=ProfileView, tags=["Users"])
    async def get_profile(claims: TokenClaims = Depends(authenticate)) -> ProfileView:
        """Get the authenticated user's profile."""
        profile: ProfileView = await app.state.account_service.get_profile(claims.user_id)
        return profile

    @app.get("/users/orders", response_model=list[Order], tags=["Users"])
    async def list_my_orders(claims: TokenClaims = Depends(authenticate)) -> list[Order]:
        """List every order placed by the authenticated user."""
        orders: list[Order] = await app.state.order_service.list_orders_for_user(claims.user_id)
        return orders

    return app
