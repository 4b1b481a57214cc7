"""Error taxonomy for sheet operations."""


class SheetError(Exception):
    """Base class for sheet errors."""


class NotFoundError(SheetError):
    """An id, or a segment of an id path, does not resolve in the tree."""

    def __init__(self, kind: str, node_id: str) -> None:
        """Initialize error.

        Args:
            kind: Human-readable node kind (e.g., "Topic", "Sub-topic")
            node_id: The id that failed to resolve
        """
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.node_id = node_id


class OutOfRangeError(SheetError):
    """Destination index is invalid for a move."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(
            f"Destination index {index} out of range for {size} siblings",
        )
        self.index = index
        self.size = size


class InvalidInputError(SheetError):
    """Required input is missing or malformed."""
