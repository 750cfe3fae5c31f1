"""
In-memory registry of recommendation sets.

RULES:
1. At most one RecommendationSet exists per work at any time
2. Entries are keyed by the work's opaque work_id handle, never by content
3. Entries are replaced wholesale, never merged
4. Every read and write happens under one lock, so a reader never observes
   a half-written entry and concurrent writers serialize (last write wins)

The registry is an explicitly constructed component. Tests and callers that
need isolation simply build their own instance.
"""

import logging
import threading
from typing import Dict, Iterable, Optional

from tagassist.exceptions import AlreadySubmittedError, NotFoundError
from tagassist.schemas.tags import RecommendationSet, Work

logger = logging.getLogger(__name__)


class WorkRegistry:
    """Holds the current recommendation set for each submitted work."""

    def __init__(self) -> None:
        self._entries: Dict[str, RecommendationSet] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, work: object) -> bool:
        if not isinstance(work, Work):
            return False
        with self._lock:
            return work.work_id in self._entries

    def lookup(self, work: Work) -> Optional[RecommendationSet]:
        """Return the set for this work, or None if it has none."""
        return self.find(work.work_id)

    def find(self, work_id: str) -> Optional[RecommendationSet]:
        """Return the set stored under a work handle, or None."""
        with self._lock:
            return self._entries.get(work_id)

    def store(self, work: Work, rec_set: RecommendationSet, replace: bool = True) -> None:
        """
        Insert or overwrite the entry for a work.

        Args:
            work: The work the set belongs to
            rec_set: The validated recommendation set
            replace: When False, an existing entry is an error instead of
                being overwritten. The check and the insert happen in the
                same critical section.

        Raises:
            AlreadySubmittedError: If replace is False and the work already
                has an entry.
        """
        if rec_set.work != work:
            raise ValueError("RecommendationSet belongs to a different work")

        with self._lock:
            if not replace and work.work_id in self._entries:
                raise AlreadySubmittedError(
                    f"Work '{work.title}' ({work.work_id}) already has recommendations"
                )
            replaced = work.work_id in self._entries
            self._entries[work.work_id] = rec_set

        logger.debug(f"Stored recommendations for work_id={work.work_id} (replaced={replaced})")

    def remove(self, work: Work) -> RecommendationSet:
        """
        Remove and return the entry for a work.

        Raises:
            NotFoundError: If the work has no entry.
        """
        with self._lock:
            rec_set = self._entries.pop(work.work_id, None)

        if rec_set is None:
            raise NotFoundError(
                f"Work '{work.title}' ({work.work_id}) has no recommendations"
            )

        logger.debug(f"Removed recommendations for work_id={work.work_id}")
        return rec_set

    def remove_many(self, rec_sets: Iterable[RecommendationSet]) -> None:
        """
        Remove each set by its work, in order.

        Each removal is independent: the first missing work raises
        NotFoundError and the removals before it stay applied.
        """
        for rec_set in rec_sets:
            self.remove(rec_set.work)
