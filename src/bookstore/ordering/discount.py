"""Order-level discount tiers and the loyalty indicator.

Tiers are driven by the number of distinct lines on an order, not by the
summed quantity. The higher tier wins and the two never stack. Loyalty is
informational only and never feeds into pricing.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from bookstore.ordering.order import Order, OrderStatus
from bookstore.utils.settings import setting


@dataclass(frozen=True)
class DiscountResult:
    original_total: float
    discounted_total: float
    applied_five_percent: bool
    applied_ten_percent: bool


@dataclass(frozen=True)
class LoyaltyEligibility:
    is_eligible: bool
    fulfilled_order_count: int
    required_count: int


@dataclass(frozen=True)
class DiscountPolicy:
    five_percent_threshold: int = 5
    ten_percent_threshold: int = 10
    five_percent_rate: float = 0.05
    ten_percent_rate: float = 0.10

    @classmethod
    def from_config(cls) -> "DiscountPolicy":
        """Build the policy from the ``[custom]`` section of the active domain."""
        return cls(
            five_percent_threshold=int(setting("FIVE_PERCENT_THRESHOLD")),
            ten_percent_threshold=int(setting("TEN_PERCENT_THRESHOLD")),
            five_percent_rate=float(setting("FIVE_PERCENT_RATE")),
            ten_percent_rate=float(setting("TEN_PERCENT_RATE")),
        )

    def calculate_order_discount(self, original_total: float, item_count: int) -> DiscountResult:
        original_total = round(original_total, 2)

        if item_count >= self.ten_percent_threshold:
            return DiscountResult(
                original_total=original_total,
                discounted_total=round(original_total * (1 - self.ten_percent_rate), 2),
                applied_five_percent=False,
                applied_ten_percent=True,
            )

        if item_count >= self.five_percent_threshold:
            return DiscountResult(
                original_total=original_total,
                discounted_total=round(original_total * (1 - self.five_percent_rate), 2),
                applied_five_percent=True,
                applied_ten_percent=False,
            )

        return DiscountResult(
            original_total=original_total,
            discounted_total=original_total,
            applied_five_percent=False,
            applied_ten_percent=False,
        )


def calculate_order_discount(original_total: float, item_count: int) -> DiscountResult:
    """Apply the configured tiers to an order total."""
    return DiscountPolicy.from_config().calculate_order_discount(original_total, item_count)


def check_loyalty_eligibility(member_id, threshold: int | None = None) -> LoyaltyEligibility:
    """Count the member's fulfilled, non-cancelled orders against the loyalty threshold."""
    required = int(threshold if threshold is not None else setting("LOYALTY_ORDER_THRESHOLD"))
    fulfilled = (
        current_domain.repository_for(Order)
        ._dao.query.filter(
            member_id=str(member_id),
            status=OrderStatus.FULFILLED.value,
            is_cancelled=False,
        )
        .all()
        .total
    )
    return LoyaltyEligibility(
        is_eligible=fulfilled >= required,
        fulfilled_order_count=fulfilled,
        required_count=required,
    )
