"""Menu and order models.

Menu items are read-only reference data for the order flow. Orders embed a
snapshot of each resolved menu item so that later menu edits do not rewrite
order history.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MenuItem(BaseModel):
    """Menu item model."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    id: int = Field(..., description="Unique identifier for the menu item")
    name: str = Field(..., description="Item name")
    price: Decimal = Field(..., description="Item price", ge=0)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {"menu_item_id": self.id, "name": self.name, "price": self.price}

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        return cls(
            id=int(item["menu_item_id"]),
            name=item["name"],
            price=Decimal(str(item["price"])),
        )


class OrderItem(BaseModel):
    """A resolved menu item and its quantity within an order."""

    menu_item: MenuItem
    quantity: int = Field(..., description="Number of units ordered", gt=0)

    def to_dynamodb_item(self) -> dict[str, Any]:
        return {"menu_item": self.menu_item.to_dynamodb_item(), "quantity": self.quantity}

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "OrderItem":
        return cls(
            menu_item=MenuItem.from_dynamodb_item(item["menu_item"]),
            quantity=int(item["quantity"]),
        )


class Order(BaseModel):
    """Customer order.

    Stored in DynamoDB with order_id as partition key and a Global Secondary
    Index on user_id. The total is always computed from server-side menu
    prices.
    """

    model_config = ConfigDict(json_encoders={Decimal: str})

    id: int = Field(..., description="Server-assigned order identifier", gt=0)
    user_id: int = Field(..., description="Owning user")
    customer_phone: str = Field(..., description="Contact phone for delivery")
    customer_address: str = Field(..., description="Delivery address")
    items: list[OrderItem] = Field(default_factory=list, description="Ordered items")
    total_price: Decimal = Field(..., description="Total computed from menu prices", ge=0)
    is_delivered: bool = Field(default=False, description="Whether the order was delivered")
    order_date: datetime = Field(..., description="Server time the order was placed")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "order_id": self.id,
            "user_id": self.user_id,
            "customer_phone": self.customer_phone,
            "customer_address": self.customer_address,
            "items": [item.to_dynamodb_item() for item in self.items],
            "total_price": self.total_price,
            "is_delivered": self.is_delivered,
            "order_date": self.order_date.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Order":
        """Create Order from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Order: Parsed model instance
        """
        return cls(
            id=int(item["order_id"]),
            user_id=int(item["user_id"]),
            customer_phone=item["customer_phone"],
            customer_address=item["customer_address"],
            items=[OrderItem.from_dynamodb_item(i) for i in item.get("items", [])],
            total_price=Decimal(str(item["total_price"])),
            is_delivered=item.get("is_delivered", False),
            order_date=datetime.fromisoformat(item["order_date"]),
        )


class OrderSummary(Order):
    """Open order enriched with the owner's display name."""

    customer_name: str = Field(..., description="Owner's first and last name")


class OrderItemRequest(BaseModel):
    """Requested line item; the price is never taken from the client."""

    menu_item_id: int
    quantity: int = Field(..., gt=0)


class OrderRequest(BaseModel):
    """Order placement payload."""

    customer_phone: str = Field(..., min_length=1)
    customer_address: str = Field(..., min_length=1)
    items: list[OrderItemRequest] = Field(default_factory=list)


class OrderConfirmation(BaseModel):
    """Response for a successfully placed order."""

    message: str
    order: Order
