"""Named filter hooks.

A filter is a chain of callables registered under a name. Each callable
receives the current value (plus any extra arguments) and returns the
value handed to the next one. Lower priorities run first; callables with
equal priority run in registration order.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


class HookRegistry:
    def __init__(self) -> None:
        self._filters: Dict[str, List[Tuple[int, int, Callable[..., Any]]]] = {}
        self._seq = 0

    def add_filter(self, name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        self._seq += 1
        chain = self._filters.setdefault(name, [])
        chain.append((int(priority), self._seq, callback))
        chain.sort(key=lambda entry: (entry[0], entry[1]))

    def remove_filter(self, name: str, callback: Callable[..., Any]) -> bool:
        """Remove every registration of ``callback`` under ``name``."""
        chain = self._filters.get(name)
        if not chain:
            return False
        kept = [entry for entry in chain if entry[2] is not callback]
        removed = len(kept) != len(chain)
        if kept:
            self._filters[name] = kept
        else:
            del self._filters[name]
        return removed

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        for _priority, _seq, callback in list(self._filters.get(name, ())):
            value = callback(value, *args)
        logger.debug(f"Applied {len(self._filters.get(name, ()))} filter(s) for '{name}'")
        return value
