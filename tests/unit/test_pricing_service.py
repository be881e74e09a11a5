"""Unit tests for order pricing."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from food_ordering_service.models.order_models import MenuItem, OrderItem, OrderItemRequest
from food_ordering_service.repositories.ordering_repositories import MenuItemRepository
from food_ordering_service.services.errors import InvalidRequestError
from food_ordering_service.services.pricing_service import PricingService, compute_total


@pytest.mark.unit
class TestComputeTotal:
    """Test suite for compute_total."""

    def test_empty_items_total_zero(self) -> None:
        assert compute_total([]) == Decimal("0")

    def test_sums_price_times_quantity(self, menu_items: list[MenuItem]) -> None:
        items = [
            OrderItem(menu_item=menu_items[0], quantity=2),
            OrderItem(menu_item=menu_items[1], quantity=1),
        ]
        assert compute_total(items) == Decimal("2500")

    def test_uses_exact_decimal_arithmetic(self) -> None:
        """Test that 0.1 * 3 totals exactly 0.3."""
        item = MenuItem(id=9, name="Mint", price=Decimal("0.1"))
        assert compute_total([OrderItem(menu_item=item, quantity=3)]) == Decimal("0.3")

    @pytest.mark.parametrize("factor", [2, 3, 10])
    def test_total_is_linear_in_quantities(self, menu_items: list[MenuItem], factor: int) -> None:
        """Test that scaling every quantity scales the total."""
        base = [OrderItem(menu_item=m, quantity=q) for m, q in zip(menu_items, [1, 4, 3])]
        scaled = [OrderItem(menu_item=i.menu_item, quantity=i.quantity * factor) for i in base]

        assert compute_total(scaled) == compute_total(base) * factor

    def test_rejects_non_positive_quantity(self, menu_items: list[MenuItem]) -> None:
        item = OrderItem.model_construct(menu_item=menu_items[0], quantity=0)
        with pytest.raises(InvalidRequestError, match="positive integer"):
            compute_total([item])


@pytest.mark.unit
class TestPricingService:
    """Test suite for PricingService."""

    @pytest.fixture
    def mock_menu_repo(self, menu_items: list[MenuItem]) -> MagicMock:
        repo = MagicMock(spec=MenuItemRepository)
        by_id = {m.id: m for m in menu_items}
        repo.get_items.side_effect = lambda ids: {i: by_id[i] for i in ids if i in by_id}
        return repo

    @pytest.fixture
    def pricing_service(self, mock_menu_repo: MagicMock) -> PricingService:
        return PricingService(menu_repository=mock_menu_repo)

    def test_price_items_resolves_server_prices(self, pricing_service: PricingService) -> None:
        priced = pricing_service.price_items(
            [
                OrderItemRequest(menu_item_id=1, quantity=2),
                OrderItemRequest(menu_item_id=2, quantity=1),
            ]
        )

        assert priced.total == Decimal("2500")
        assert [i.menu_item.name for i in priced.items] == ["Gulyas", "Langos"]

    def test_unknown_items_are_dropped_wherever_they_appear(
        self, pricing_service: PricingService, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that an unknown item does not stop later items from resolving."""
        priced = pricing_service.price_items(
            [
                OrderItemRequest(menu_item_id=99, quantity=1),
                OrderItemRequest(menu_item_id=2, quantity=2),
                OrderItemRequest(menu_item_id=98, quantity=5),
                OrderItemRequest(menu_item_id=1, quantity=1),
            ]
        )

        assert [i.menu_item.id for i in priced.items] == [2, 1]
        assert "[99, 98]" in caplog.text
        assert priced.total == Decimal("2000")

    def test_all_unknown_items_total_zero(self, pricing_service: PricingService) -> None:
        priced = pricing_service.price_items([OrderItemRequest(menu_item_id=42, quantity=1)])

        assert priced.items == []
        assert priced.total == Decimal("0")

    def test_preserves_request_order_and_duplicates(self, pricing_service: PricingService) -> None:
        items = pricing_service.resolve_items(
            [
                OrderItemRequest(menu_item_id=3, quantity=1),
                OrderItemRequest(menu_item_id=1, quantity=1),
                OrderItemRequest(menu_item_id=3, quantity=2),
            ]
        )

        assert [(i.menu_item.id, i.quantity) for i in items] == [(3, 1), (1, 1), (3, 2)]

    def test_fetches_menu_in_one_batch(
        self, pricing_service: PricingService, mock_menu_repo: MagicMock
    ) -> None:
        pricing_service.resolve_items(
            [OrderItemRequest(menu_item_id=1, quantity=1), OrderItemRequest(menu_item_id=2, quantity=1)]
        )

        mock_menu_repo.get_items.assert_called_once_with([1, 2])

    def test_rejects_non_positive_quantity_before_lookup(
        self, pricing_service: PricingService, mock_menu_repo: MagicMock
    ) -> None:
        line = OrderItemRequest.model_construct(menu_item_id=1, quantity=-1)

        with pytest.raises(InvalidRequestError):
            pricing_service.resolve_items([line])

        mock_menu_repo.get_items.assert_not_called()
