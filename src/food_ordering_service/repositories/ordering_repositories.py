"""DynamoDB repository classes for users, menu items and orders.

Expected absences are reported with simple return values (None/False).
Unexpected DynamoDB errors are logged and raised as PersistenceError so that
they are never mistaken for "not found".
"""

import logging
from typing import Any

from boto3.dynamodb.conditions import Attr, Key
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from food_ordering_service.models.order_models import MenuItem, Order
from food_ordering_service.models.user_models import User
from food_ordering_service.services.errors import PersistenceError

logger = logging.getLogger(__name__)

# BatchGetItem accepts at most 100 keys per request
BATCH_GET_LIMIT = 100


def _scan_all(table: Table, **kwargs: Any) -> list[dict[str, Any]]:
    """Scan a table following LastEvaluatedKey until exhausted."""
    items: list[dict[str, Any]] = []
    while True:
        response = table.scan(**kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return items
        kwargs["ExclusiveStartKey"] = last_key


class CounterRepository:
    """Atomic id sequences.

    Each counter is a single item keyed by counter_name whose next_id attribute
    is incremented with an ADD update.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def next_id(self, counter_name: str) -> int:
        """Allocate the next id of a sequence.

        Args:
            counter_name: Sequence name (e.g. 'users', 'orders')

        Returns:
            int: Newly allocated id, starting at 1

        Raises:
            PersistenceError: If the counter could not be incremented
        """
        try:
            response = self.table.update_item(
                Key={"counter_name": counter_name},
                UpdateExpression="ADD next_id :one",
                ExpressionAttributeValues={":one": 1},
                ReturnValues="UPDATED_NEW",
            )
            return int(response["Attributes"]["next_id"])

        except ClientError as e:
            logger.error(f"Failed to allocate id for {counter_name}: {e}")
            raise PersistenceError(f"Failed to allocate id for {counter_name}") from e


class UserRepository:
    """Repository for user records.

    Users are keyed by user_id. A second table keyed by email holds one marker
    item per registered address, which makes email uniqueness enforceable in
    the same transaction as the user insert.
    """

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        email_table_name: str,
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the users table
            email_table_name: Name of the email uniqueness table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.email_table_name = email_table_name
        self.table: Table = dynamodb_resource.Table(table_name)
        self.email_table: Table = dynamodb_resource.Table(email_table_name)
        self._serializer = TypeSerializer()

    def get_user(self, user_id: int) -> User | None:
        """Retrieve a user by id.

        Args:
            user_id: User identifier

        Returns:
            User if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"user_id": user_id})
        except ClientError as e:
            logger.error(f"Failed to get user {user_id}: {e}")
            raise PersistenceError("Failed to get user") from e

        if "Item" not in response:
            return None

        return User.from_dynamodb_item(response["Item"])

    def get_user_by_email(self, email: str) -> User | None:
        """Retrieve a user by exact email address.

        Args:
            email: Email address as registered

        Returns:
            User if found, None otherwise
        """
        try:
            response = self.email_table.get_item(Key={"email": email})
        except ClientError as e:
            logger.error(f"Failed to look up user by email: {e}")
            raise PersistenceError("Failed to look up user") from e

        if "Item" not in response:
            return None

        return self.get_user(int(response["Item"]["user_id"]))

    def email_exists(self, email: str) -> bool:
        """Check whether an email address is already registered."""
        try:
            response = self.email_table.get_item(Key={"email": email})
        except ClientError as e:
            logger.error(f"Failed to check email: {e}")
            raise PersistenceError("Failed to check email") from e

        return "Item" in response

    def create_user(self, user: User) -> bool:
        """Insert a user and claim its email address atomically.

        Args:
            user: User to insert

        Returns:
            bool: True if created, False if the email is already taken

        Raises:
            PersistenceError: On any other DynamoDB failure
        """
        email_marker = {"email": user.email, "user_id": user.id}

        try:
            self.dynamodb.meta.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.email_table_name,
                            "Item": self._serialize(email_marker),
                            "ConditionExpression": "attribute_not_exists(email)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table_name,
                            "Item": self._serialize(user.to_dynamodb_item()),
                            "ConditionExpression": "attribute_not_exists(user_id)",
                        }
                    },
                ]
            )
            return True

        except ClientError as e:
            if self._is_email_taken(e):
                logger.info(f"Registration rejected, email already in use for user {user.id}")
                return False
            logger.error(f"Failed to create user {user.id}: {e}")
            raise PersistenceError("Failed to create user") from e

    def _serialize(self, item: dict[str, Any]) -> dict[str, Any]:
        return {key: self._serializer.serialize(value) for key, value in item.items()}

    @staticmethod
    def _is_email_taken(error: ClientError) -> bool:
        if error.response.get("Error", {}).get("Code") != "TransactionCanceledException":
            return False
        # Reasons are positional; index 0 is the email marker Put
        reasons = error.response.get("CancellationReasons", [])
        return bool(reasons) and reasons[0].get("Code") == "ConditionalCheckFailed"


class MenuItemRepository:
    """Repository for menu items, keyed by menu_item_id."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def get_item(self, menu_item_id: int) -> MenuItem | None:
        """Retrieve a menu item by id.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            MenuItem if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"menu_item_id": menu_item_id})
        except ClientError as e:
            logger.error(f"Failed to get menu item {menu_item_id}: {e}")
            raise PersistenceError("Failed to get menu item") from e

        if "Item" not in response:
            return None

        return MenuItem.from_dynamodb_item(response["Item"])

    def get_items(self, menu_item_ids: list[int]) -> dict[int, MenuItem]:
        """Retrieve several menu items in batches.

        Args:
            menu_item_ids: Ids to resolve; duplicates are fetched once

        Returns:
            dict: Resolved items by id; unknown ids are absent
        """
        unique_ids = list(dict.fromkeys(menu_item_ids))
        resolved: dict[int, MenuItem] = {}

        for start in range(0, len(unique_ids), BATCH_GET_LIMIT):
            chunk = unique_ids[start : start + BATCH_GET_LIMIT]
            request: dict[str, Any] = {
                self.table_name: {"Keys": [{"menu_item_id": item_id} for item_id in chunk]}
            }

            while request:
                try:
                    response = self.dynamodb.batch_get_item(RequestItems=request)
                except ClientError as e:
                    logger.error(f"Failed to batch get menu items: {e}")
                    raise PersistenceError("Failed to get menu items") from e

                for item in response.get("Responses", {}).get(self.table_name, []):
                    menu_item = MenuItem.from_dynamodb_item(item)
                    resolved[menu_item.id] = menu_item

                request = response.get("UnprocessedKeys") or {}

        return resolved

    def list_items(self) -> list[MenuItem]:
        """List the whole menu ordered by id.

        Returns:
            list: Menu items (empty list if the menu is empty)
        """
        try:
            items = _scan_all(self.table)
        except ClientError as e:
            logger.error(f"Failed to list menu items: {e}")
            raise PersistenceError("Failed to list menu items") from e

        return sorted((MenuItem.from_dynamodb_item(item) for item in items), key=lambda m: m.id)

    def save_item(self, menu_item: MenuItem) -> None:
        """Create or replace a menu item.

        Args:
            menu_item: MenuItem to save
        """
        try:
            self.table.put_item(Item=menu_item.to_dynamodb_item())
        except ClientError as e:
            logger.error(f"Failed to save menu item {menu_item.id}: {e}")
            raise PersistenceError("Failed to save menu item") from e


class OrderRepository:
    """Repository for orders.

    Orders are keyed by order_id, with a Global Secondary Index on user_id.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def save_order(self, order: Order) -> None:
        """Persist a new order.

        Args:
            order: Order to save

        Raises:
            PersistenceError: If the write fails
        """
        try:
            self.table.put_item(
                Item=order.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(order_id)",
            )
        except ClientError as e:
            logger.error(f"Failed to save order {order.id}: {e}")
            raise PersistenceError("Failed to save order") from e

    def get_order(self, order_id: int) -> Order | None:
        """Retrieve an order by id.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"order_id": order_id})
        except ClientError as e:
            logger.error(f"Failed to get order {order_id}: {e}")
            raise PersistenceError("Failed to get order") from e

        if "Item" not in response:
            return None

        return Order.from_dynamodb_item(response["Item"])

    def list_open_orders(self) -> list[Order]:
        """List undelivered orders ordered by id.

        Returns:
            list: Open orders (empty list if none)
        """
        try:
            items = _scan_all(self.table, FilterExpression=Attr("is_delivered").eq(False))
        except ClientError as e:
            logger.error(f"Failed to list open orders: {e}")
            raise PersistenceError("Failed to list open orders") from e

        return sorted((Order.from_dynamodb_item(item) for item in items), key=lambda o: o.id)

    def list_orders_for_user(self, user_id: int) -> list[Order]:
        """List all orders placed by a user.

        Uses a Global Secondary Index on user_id.

        Args:
            user_id: Owning user identifier

        Returns:
            list: The user's orders ordered by id
        """
        kwargs: dict[str, Any] = {
            "IndexName": "user_id-index",
            "KeyConditionExpression": Key("user_id").eq(user_id),
        }
        items: list[dict[str, Any]] = []

        try:
            while True:
                response = self.table.query(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error(f"Failed to list orders for user {user_id}: {e}")
            raise PersistenceError("Failed to list orders") from e

        return sorted((Order.from_dynamodb_item(item) for item in items), key=lambda o: o.id)

    def mark_delivered(self, order_id: int) -> bool:
        """Set the delivered flag of an existing order.

        The update is conditional on the order still existing, so an order
        removed concurrently is reported as missing rather than recreated.

        Args:
            order_id: Order identifier

        Returns:
            bool: True if updated, False if the order does not exist
        """
        try:
            self.table.update_item(
                Key={"order_id": order_id},
                UpdateExpression="SET is_delivered = :delivered",
                ConditionExpression="attribute_exists(order_id)",
                ExpressionAttributeValues={":delivered": True},
            )
            return True

        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                return False
            logger.error(f"Failed to complete order {order_id}: {e}")
            raise PersistenceError("Failed to complete order") from e
