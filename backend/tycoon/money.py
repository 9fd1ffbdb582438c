"""Minor-unit money helpers shared by every engine step."""

# Largest integer amount that survives a round trip through a double.
MAX_SAFE_MONEY = 2**53 - 1


def is_safe_amount(amount: int) -> bool:
    """True when an amount of minor units stays within the safe-integer range."""
    return -MAX_SAFE_MONEY <= amount <= MAX_SAFE_MONEY


def clamp_price(price: float, floor: int = 1) -> int:
    """Round a computed price to whole minor units, floored and capped."""
    return int(min(max(round(price), floor), MAX_SAFE_MONEY))
