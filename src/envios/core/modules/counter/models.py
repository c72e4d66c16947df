"""Shipment number counter and its display format."""

from collections.abc import Callable
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

SHIPMENT_NUMBER_PREFIX = "ENV-"
SHIPMENT_NUMBER_WIDTH = 6

type UpdateFn = Callable[[int | None], int]


class Counter(BaseModel):
    """Persisted counter document.

    Stored as {_id: key, seq: value}; the next shipment number is seq + 1.
    """

    key: str = Field(alias="_id")
    seq: int = Field(0, ge=0)

    model_config = ConfigDict(populate_by_name=True)


class CounterStore(Protocol):
    """Persistent keyed counter with a transactional read-modify-write."""

    async def read(self, key: str) -> int | None:
        """Return the current value, or None when the counter does not exist."""
        ...

    async def atomic_update(self, key: str, fn: UpdateFn) -> int:
        """Apply fn to the current value atomically and return the new value.

        Raises StoreUnavailableError without mutating anything if the update
        cannot be committed.
        """
        ...


def format_shipment_number(value: int) -> str:
    """Format a counter value as ENV-NNNNNN (at least six digits, never truncated)."""
    return f"{SHIPMENT_NUMBER_PREFIX}{value:0{SHIPMENT_NUMBER_WIDTH}d}"
