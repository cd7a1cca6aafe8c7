"""Tests for choosing the active discount window."""

from datetime import datetime

from catalogue.promotion.applicable_product import ApplicableProduct
from catalogue.promotion.pricing import NO_DISCOUNT, DiscountResolution, final_price, pick_active


def _row(discount, start, end, created_at=datetime(2024, 12, 1), event_id="e1"):
    return ApplicableProduct(
        event_id=event_id,
        product_id="p1",
        discount=discount,
        start_date=start,
        end_date=end,
        created_at=created_at,
    )


class TestPickActive:
    def test_no_rows_means_no_discount(self):
        assert pick_active([], datetime(2025, 1, 3)) == NO_DISCOUNT

    def test_active_window_applies(self):
        row = _row(20, datetime(2025, 1, 1), datetime(2025, 1, 5))
        resolution = pick_active([row], datetime(2025, 1, 3))
        assert resolution.is_in_event is True
        assert resolution.event_discount == 20
        assert resolution.applicable_product_id == str(row.id)
        assert resolution.event_id == "e1"

    def test_expired_window_does_not_apply(self):
        row = _row(20, datetime(2025, 1, 1), datetime(2025, 1, 5))
        resolution = pick_active([row], datetime(2025, 1, 6))
        assert resolution.is_in_event is False
        assert resolution.event_discount == 0

    def test_highest_discount_wins_among_overlapping_windows(self):
        rows = [
            _row(10, datetime(2025, 1, 1), datetime(2025, 1, 10), event_id="small"),
            _row(35, datetime(2025, 1, 2), datetime(2025, 1, 4), event_id="big"),
            _row(50, datetime(2025, 2, 1), datetime(2025, 2, 4), event_id="later"),
        ]
        resolution = pick_active(rows, datetime(2025, 1, 3))
        assert resolution.event_discount == 35
        assert resolution.event_id == "big"

    def test_equal_discounts_prefer_most_recently_created(self):
        rows = [
            _row(15, datetime(2025, 1, 1), datetime(2025, 1, 10), created_at=datetime(2024, 12, 1), event_id="old"),
            _row(15, datetime(2025, 1, 1), datetime(2025, 1, 10), created_at=datetime(2024, 12, 20), event_id="new"),
        ]
        assert pick_active(rows, datetime(2025, 1, 3)).event_id == "new"
        assert pick_active(list(reversed(rows)), datetime(2025, 1, 3)).event_id == "new"


class TestFinalPrice:
    def test_active_window_supersedes_legacy_discount(self):
        resolution = DiscountResolution(event_discount=20, is_in_event=True)
        assert final_price(100.0, 5, resolution) == 80.0

    def test_legacy_discount_applies_outside_events(self):
        assert final_price(100.0, 5, NO_DISCOUNT) == 95.0

    def test_no_discount_at_all(self):
        assert final_price(19.99, 0, NO_DISCOUNT) == 19.99
