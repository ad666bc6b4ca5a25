"""
Hit counting on top of a key-value store.

Each parameter set has one counter stored under
``<namespace>:<ParameterSet.to_key()>``. Recording is best-effort:
failures are logged and never reach the caller. Reading the most
frequent request walks every page of the key listing, so it is
not a snapshot when hits are recorded concurrently.
"""

import logging
from typing import List, Optional, Set, Tuple

from app.errors import NotFound, StoreUnavailable
from app.schemas import ParameterSet
from app.state import KeyValueStore

logger = logging.getLogger(__name__)


class FrequencyTracker:
    def __init__(self, store: KeyValueStore, namespace: str = "stats", page_size: int = 1000) -> None:
        self.store = store
        self.prefix = f"{namespace}:"
        self.page_size = page_size

    def key_for(self, params: ParameterSet) -> str:
        return self.prefix + params.to_key()

    def record_hit(self, params: ParameterSet) -> Optional[int]:
        """Increment the counter for ``params``.

        Returns the new count, or ``None`` when the store failed.
        """
        key = self.key_for(params)
        try:
            return self.store.incr(key)
        except StoreUnavailable as exc:
            logger.warning("Failed to record hit for %s: %s", key, exc)
            return None

    def _counts(self) -> List[Tuple[str, int]]:
        counts: List[Tuple[str, int]] = []
        seen: Set[str] = set()
        cursor = 0
        while True:
            page = self.store.list_keys(self.prefix, cursor=cursor, limit=self.page_size)
            for key in page.keys:
                # Redis SCAN may return a key more than once.
                if key in seen:
                    continue
                seen.add(key)
                counts.append((key, self._read_count(key)))
            if page.list_complete:
                break
            cursor = page.cursor
        return counts

    def _read_count(self, key: str) -> int:
        raw = self.store.get(key)
        if raw is None:
            return 0
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer count %r stored under %s", raw, key)
            return 0

    def most_frequent(self) -> Tuple[ParameterSet, int]:
        """Return the parameter set with the highest hit count.

        Ties go to the lexicographically smallest key. Raises
        ``NotFound`` if nothing has been recorded.
        """
        best_key: Optional[str] = None
        best_count = 0
        for key, count in self._counts():
            if count <= 0:
                continue
            if count > best_count or (count == best_count and best_key is not None and key < best_key):
                best_key, best_count = key, count

        if best_key is None:
            raise NotFound("No requests made yet.")
        return ParameterSet.from_key(best_key[len(self.prefix):]), best_count

    def all_counts(self) -> List[Tuple[ParameterSet, int]]:
        """Every recorded parameter set with its count, highest first."""
        ordered = sorted(self._counts(), key=lambda item: (-item[1], item[0]))
        return [(ParameterSet.from_key(key[len(self.prefix):]), count) for key, count in ordered if count > 0]
