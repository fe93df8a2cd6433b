from django.conf import settings

from economy.exceptions import InvalidAmount


def get_commission_percent() -> int:
    # Below 100 so every recipient receives at least one coin.
    rate = int(getattr(settings, "GIFT_COMMISSION_PERCENT", 30))
    if not 0 <= rate < 100:
        raise ValueError(f"GIFT_COMMISSION_PERCENT must be within 0..99, got {rate}.")
    return rate


def calculate_commission(price: int, rate_percent: int) -> tuple[int, int]:
    """
    Split a gift price into (recipient_amount, commission).

    The commission is rounded down, so the platform never keeps more than
    the configured rate and the two parts always add up to the price.
    """
    if not isinstance(price, int) or price <= 0:
        raise InvalidAmount(price)
    if not 0 <= rate_percent <= 100:
        raise ValueError(f"Commission rate must be within 0..100, got {rate_percent}.")
    commission = price * rate_percent // 100
    return price - commission, commission
