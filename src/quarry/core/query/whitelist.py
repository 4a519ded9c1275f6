# src/quarry/core/query/whitelist.py
from typing import Any, Collection, List, Optional, Tuple

Pair = Tuple[str, Any]


def whitelist_filter(pairs: List[Pair], allowed: Optional[Collection[str]]) -> List[Pair]:
    """
    Keep only the pairs whose field is in `allowed`, in their original order.

    `None` means no whitelist was configured and every pair is kept. An empty
    collection is a whitelist that allows nothing. A bare string is rejected
    rather than read as a set of characters.
    """
    if allowed is None:
        return pairs
    if isinstance(allowed, str):
        raise TypeError(f"allowed must be a collection of field names, not the string {allowed!r}")
    allowed = set(allowed)
    return [(field, value) for field, value in pairs if field in allowed]
