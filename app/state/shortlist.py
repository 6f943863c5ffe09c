"""
Shortlist ("cotización") of product identifiers.

One instance lives for the whole process; it is never persisted.
"""

from __future__ import annotations

import logging
from typing import Dict, List


logger = logging.getLogger(__name__)


class ShortlistStore:
    """
    Set of product ids the visitor wants a quote for.

    Every operation is total and idempotent where it makes sense.

    Example:
        >>> shortlist = ShortlistStore()
        >>> shortlist.toggle("p-1")
        True
        >>> shortlist.count
        1
    """

    def __init__(self) -> None:
        # dict keys keep insertion order for as_list()
        self._ids: Dict[str, None] = {}

    def add(self, product_id: str) -> None:
        self._ids.setdefault(product_id, None)

    def remove(self, product_id: str) -> None:
        self._ids.pop(product_id, None)

    def contains(self, product_id: str) -> bool:
        return product_id in self._ids

    def toggle(self, product_id: str) -> bool:
        """
        Add the id if absent, remove it otherwise.

        Returns:
            True if the id is in the shortlist afterwards
        """
        if self.contains(product_id):
            self.remove(product_id)
            return False
        self.add(product_id)
        return True

    def clear(self) -> None:
        self._ids.clear()
        logger.debug("Shortlist cleared")

    @property
    def count(self) -> int:
        return len(self._ids)

    def as_list(self) -> List[str]:
        """Copy of the ids, oldest first."""
        return list(self._ids)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
