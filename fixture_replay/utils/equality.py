"""Structural equality helpers"""

from typing import Any


def deep_equal(left: Any, right: Any) -> bool:
    """Compare two data values structurally.

    Stricter than ``==``: ``1``, ``1.0`` and ``True`` are different values,
    and a list never equals a tuple. Mappings compare by key set and value,
    ignoring insertion order.

    Args:
        left: First value
        right: Second value

    Returns:
        True if both values have the same type and structure
    """
    if left is right:
        return True

    if type(left) is not type(right):
        return False

    if isinstance(left, dict):
        if left.keys() != right.keys():
            return False
        return all(deep_equal(value, right[key]) for key, value in left.items())

    if isinstance(left, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, float) and left != left and right != right:
        # NaN is equal to itself here, as in a strict deep comparison
        return True

    return left == right


def parse_bool(raw: Any, default: bool = False) -> bool:
    """Interpret a config flag.

    ``True`` passes through; strings count as true when their first
    character is one of ``1tTyY+``.
    """
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw)[:1] in "1tTyY+"
