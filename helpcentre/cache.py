from __future__ import annotations

import copy
import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)


class ReadCache:
    """Memo table for aggregate reads, owned by a single ContentStore.

    Entries live until `invalidate()` is called (the document store does so on
    every write) or until they are evicted to make room for newer ones.
    Callers receive deep copies so a response can be mutated freely.
    Safe to share between request threads.
    """

    def __init__(self, max_entries: int = 256) -> None:
        self.max_entries = max(0, int(max_entries))
        self._entries: OrderedDict[Hashable, Any] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        if not self.max_entries:
            return loader()
        with self._lock:
            if key in self._entries:
                return copy.deepcopy(self._entries[key])
        # The loader may read through other cached keys, so it runs unlocked.
        value = loader()
        with self._lock:
            self._entries[key] = copy.deepcopy(value)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return value

    def invalidate(self) -> None:
        with self._lock:
            if self._entries:
                logger.debug("Dropping %d cached reads", len(self._entries))
            self._entries.clear()
