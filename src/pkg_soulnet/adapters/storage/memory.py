from __future__ import annotations

from typing import Dict, Optional

from ...domain.ports import KeyValueStore


class MemoryStore(KeyValueStore):
    """Process-local store; forgets everything on exit."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: Optional[str]) -> None:
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value
