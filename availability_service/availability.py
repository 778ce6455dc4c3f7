"""
Availability rules.

1. 10% of total stock is always held back as a reserve buffer.
2. Weekend orders require 2x the requested quantity to be in stock.

evaluate() is a pure function of its inputs; the caller resolves the stock
level and the weekend flag before calling it.
"""

from datetime import datetime
from typing import Optional

from availability_service.models import AvailabilityRequest, AvailabilityResponse

RESERVE_RATIO = 0.10
WEEKEND_MULTIPLIER = 2

NOT_FOUND_REASON = "Product not found in specified warehouse"
OUT_OF_STOCK_REASON = "Product is out of stock"
SUFFICIENT_REASON = "Sufficient stock available"


def is_weekend(now: Optional[datetime] = None) -> bool:
    """True on Saturday or Sunday."""
    now = now or datetime.now()
    return now.weekday() >= 5


def reserve_buffer(stock_level: int) -> int:
    # Float multiply then truncate toward zero: 25 -> 2, 5 -> 0
    try:
        return int(stock_level * RESERVE_RATIO)
    except OverflowError:
        # Beyond float range; truncate with integer division instead.
        return -(-stock_level // 10) if stock_level < 0 else stock_level // 10


def available_after_reserve(stock_level: int) -> int:
    return stock_level - reserve_buffer(stock_level)


def evaluate(request: AvailabilityRequest, stock_level: Optional[int], weekend: bool) -> AvailabilityResponse:
    """
    Decide whether request.quantity can be shipped from the given stock.

    stock_level is None when the product is not stocked at the warehouse.
    """
    warehouse = request.warehouse_location

    if stock_level is None:
        return AvailabilityResponse(
            available=False,
            available_quantity=0,
            reason=NOT_FOUND_REASON,
            warehouse=warehouse,
        )

    available_quantity = available_after_reserve(stock_level)

    if stock_level == 0:
        return AvailabilityResponse(
            available=False,
            available_quantity=0,
            reason=OUT_OF_STOCK_REASON,
            warehouse=warehouse,
        )

    required_quantity = request.quantity * (WEEKEND_MULTIPLIER if weekend else 1)

    if available_quantity >= required_quantity:
        if weekend:
            reason = (
                f"{SUFFICIENT_REASON} (weekend: requires {required_quantity} units "
                f"in stock for {request.quantity} order)"
            )
        else:
            reason = SUFFICIENT_REASON
        return AvailabilityResponse(
            available=True,
            available_quantity=available_quantity,
            reason=reason,
            warehouse=warehouse,
        )

    prefix = "weekend: " if weekend else ""
    return AvailabilityResponse(
        available=False,
        available_quantity=available_quantity,
        reason=(
            f"Insufficient stock ({prefix}requires {required_quantity} units, "
            f"only {available_quantity} available after reserve)"
        ),
        warehouse=warehouse,
    )
