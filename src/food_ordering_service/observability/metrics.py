"""Custom metrics for the food ordering service."""

from decimal import Decimal

from opentelemetry import metrics

# Get meter for ordering service
meter = metrics.get_meter("food-ordering-svc")

orders_placed_counter = meter.create_counter(
    name="orders_placed_total",
    description="Total number of orders placed",
    unit="1",
)

orders_completed_counter = meter.create_counter(
    name="orders_completed_total",
    description="Total number of orders marked delivered",
    unit="1",
)

# Order value histogram
order_total_histogram = meter.create_histogram(
    name="order_total_amount",
    description="Total price of placed orders",
    unit="1",
)

registrations_counter = meter.create_counter(
    name="user_registrations_total",
    description="Total number of successful registrations",
    unit="1",
)

login_failure_counter = meter.create_counter(
    name="login_failures_total",
    description="Total number of rejected login attempts",
    unit="1",
)


def record_order_placed(item_count: int, total: Decimal) -> None:
    """Record a placed order.

    Args:
        item_count: Number of resolved line items
        total: Order total
    """
    orders_placed_counter.add(1, {"item_count": item_count})
    order_total_histogram.record(float(total))


def record_order_completed() -> None:
    """Record an order marked delivered."""
    orders_completed_counter.add(1)


def record_registration() -> None:
    """Record a successful registration."""
    registrations_counter.add(1)


def record_login_failure() -> None:
    """Record a rejected login attempt."""
    login_failure_counter.add(1)
