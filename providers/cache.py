from collections import OrderedDict
from collections.abc import ValuesView
from typing import Any, Optional


class LRUCache:
    """Bounded in-memory store that evicts the least recently used entry."""

    def __init__(self, *, max_size: int):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.entries: OrderedDict[str, Any] = OrderedDict()

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        if key not in self.entries:
            return default
        self.entries.move_to_end(key)
        return self.entries[key]

    def put(self, key: str, value: Any) -> None:
        """Insert or replace; either way the key becomes most recently used."""
        self.entries[key] = value
        self.entries.move_to_end(key)
        while len(self.entries) > self.max_size:
            self.entries.popitem(last=False)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def values(self) -> ValuesView[Any]:
        return self.entries.values()
