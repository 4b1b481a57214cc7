"""Authoritative in-memory sheet store.

Single writer, single copy. Each service call runs to completion on the
event loop before the next one starts, so no locking is needed.
"""

import logging

from topicsheet.core.model import Sheet

logger = logging.getLogger(__name__)


class SheetStore:
    """Owns the one authoritative sheet.

    Constructed empty or with a seed; ``init`` resets it, ``replace`` swaps
    in a new tree. Tests construct isolated instances.
    """

    __slots__ = ("_sheet",)

    def __init__(self, sheet: Sheet | None = None) -> None:
        self._sheet = sheet

    @property
    def is_initialized(self) -> bool:
        return self._sheet is not None

    def init(self, seed: Sheet) -> None:
        """Reset the store to a seed tree."""
        logger.info(f'Initializing store with sheet "{seed.title}" ({len(seed.topics)} topics)')
        self._sheet = seed

    def get(self) -> Sheet:
        """Return the current sheet.

        Raises:
            RuntimeError: If the store was never initialized
        """
        if self._sheet is None:
            raise RuntimeError("Sheet store is not initialized")
        return self._sheet

    def replace(self, sheet: Sheet) -> None:
        """Swap in a new tree as-is."""
        logger.debug(f"Replacing sheet {sheet.slug!r}")
        self._sheet = sheet
