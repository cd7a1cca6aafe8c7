"""Discount Resolution: the discount a product carries at a given instant.

Computed on every product read from the ApplicableProduct rows; nothing is
cached or precomputed. When several windows are active at once the highest
discount wins, and among equal discounts the most recently created row.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from catalogue.promotion.applicable_product import ApplicableProduct
from shared.dates import to_naive_utc, utc_now


@dataclass(frozen=True)
class DiscountResolution:
    event_discount: float = 0.0
    is_in_event: bool = False
    applicable_product_id: str | None = None
    event_id: str | None = None


NO_DISCOUNT = DiscountResolution()


def _rank(row: ApplicableProduct):
    return (row.discount or 0.0, row.created_at or row.start_date)


def pick_active(rows, instant) -> DiscountResolution:
    """Choose the winning window among ``rows`` at ``instant``."""
    active = [row for row in rows if row.is_active_at(instant)]
    if not active:
        return NO_DISCOUNT

    winner = max(active, key=_rank)
    return DiscountResolution(
        event_discount=float(winner.discount or 0.0),
        is_in_event=True,
        applicable_product_id=str(winner.id),
        event_id=str(winner.event_id),
    )


def resolve_discount(product_id, at=None) -> DiscountResolution:
    instant = to_naive_utc(at) if at is not None else utc_now()
    rows = current_domain.repository_for(ApplicableProduct).for_product(product_id)
    return pick_active(rows, instant)


def final_price(price: float, legacy_discount: float, resolution: DiscountResolution) -> float:
    """Price after the effective discount. An active window supersedes the legacy discount."""
    effective = resolution.event_discount if resolution.is_in_event else (legacy_discount or 0.0)
    return round(price * (1 - effective / 100), 2)
