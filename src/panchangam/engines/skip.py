from __future__ import annotations

SKIP_MODULI = {"tithi": 30, "nakshatra": 27, "yoga": 27}


def resolve_skipped_element(index_today: int, index_tomorrow: int, modulus: int) -> int:
    """
    Day element at a reference instant, corrected for a skipped element.

    Indices are taken at the same time of day (normally sunrise) on two
    consecutive days. If they are more than one step apart the element
    in between never held a sunrise, and it is the one reported for
    today. At most one step is corrected.
    """
    if modulus <= 0:
        raise ValueError("modulus must be positive")
    if (index_tomorrow - index_today) % modulus > 1:
        return (index_today + 1) % modulus
    return index_today % modulus
