from collections.abc import Callable, Iterable
from functools import cmp_to_key

from envios.core.modules.counter.models import SHIPMENT_NUMBER_PREFIX


def shipment_number_value(shipment_number: str) -> int:
    """Numeric part of a shipment number: "ENV-000042" -> 42."""
    return int(shipment_number.removeprefix(SHIPMENT_NUMBER_PREFIX))


def compare_by_shipment_number(a: str, b: str) -> int:
    """Comparator for newest-first listing, by numeric value rather than string order."""
    value_a = shipment_number_value(a)
    value_b = shipment_number_value(b)
    return (value_b > value_a) - (value_b < value_a)


def sort_by_shipment_number[T](items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Sort items newest first by the shipment number returned from key."""
    return sorted(items, key=cmp_to_key(lambda a, b: compare_by_shipment_number(key(a), key(b))))


def format_pallets_and_packages(pallets: int | None, packages: int | None) -> str:
    if not pallets:
        return f"{packages or 0} Bultos"
    return f"{pallets} Pallets y {packages or 0} Bultos"
