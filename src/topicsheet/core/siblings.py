"""Ordered sibling operations.

Every function takes one sibling set (the ordered children of one parent)
and returns a new list whose ``order`` fields are exactly ``0..n-1`` in list
order. The input list is never modified; its elements are renumbered in
place. All checks run before any element is touched, so a call that raises
leaves the siblings exactly as they were.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

from topicsheet.core.errors import NotFoundError, OutOfRangeError


class Ordered(Protocol):
    """Anything with a stable id and a position among its siblings."""

    id: str
    order: int


T = TypeVar("T", bound=Ordered)


def append(siblings: Sequence[T], node: T) -> list[T]:
    """Place a node after the last sibling.

    Args:
        siblings: Current sibling set
        node: Node to add

    Returns:
        New sibling list with node last and ``node.order == len(siblings)``
    """
    node.order = len(siblings)
    return [*siblings, node]


def remove_by_id(siblings: Sequence[T], node_id: str, kind: str = "Node") -> list[T]:
    """Remove a sibling and close the gap it leaves.

    Args:
        siblings: Current sibling set
        node_id: Id of the sibling to remove
        kind: Node kind used in the NotFoundError message

    Returns:
        Remaining siblings renumbered ``0..n-2`` in their relative order

    Raises:
        NotFoundError: If no sibling has this id
    """
    index = index_of(siblings, node_id, kind)
    remaining = [*siblings[:index], *siblings[index + 1 :]]
    return _renumber(remaining)


def move_to(
    siblings: Sequence[T],
    node_id: str,
    destination_index: int,
    kind: str = "Node",
) -> list[T]:
    """Move one sibling to a new position.

    The node is removed from its current position and reinserted at
    ``destination_index`` of the shortened list, so moving element 0 to
    position 2 moves elements 1 and 2 one position earlier. It is never a
    swap.

    Args:
        siblings: Current sibling set
        node_id: Id of the sibling to move
        destination_index: Target position, in ``[0, len(siblings) - 1]``
        kind: Node kind used in the NotFoundError message

    Returns:
        Reordered siblings renumbered ``0..n-1``

    Raises:
        NotFoundError: If no sibling has this id
        OutOfRangeError: If destination_index is outside the valid range
    """
    index = index_of(siblings, node_id, kind)
    if isinstance(destination_index, bool) or not 0 <= destination_index < len(siblings):
        raise OutOfRangeError(destination_index, len(siblings))

    reordered = [*siblings[:index], *siblings[index + 1 :]]
    reordered.insert(destination_index, siblings[index])
    return _renumber(reordered)


def replace_all(new_siblings: Iterable[T]) -> list[T]:
    """Adopt a caller-supplied ordering wholesale.

    Renumbers every element ``0..n-1`` in the order given. The id set is not
    compared against any previous sibling set; callers own its integrity.
    """
    return _renumber(list(new_siblings))


def index_of(siblings: Sequence[T], node_id: str, kind: str = "Node") -> int:
    """Return the position of the sibling with this id.

    Raises:
        NotFoundError: If no sibling has this id
    """
    for i, sibling in enumerate(siblings):
        if sibling.id == node_id:
            return i
    raise NotFoundError(kind, node_id)


def find(siblings: Sequence[T], node_id: str, kind: str = "Node") -> T:
    """Return the sibling with this id.

    Raises:
        NotFoundError: If no sibling has this id
    """
    return siblings[index_of(siblings, node_id, kind)]


def is_dense(siblings: Sequence[Ordered]) -> bool:
    """Check that order values are exactly ``0..n-1`` with no duplicates."""
    return sorted(sibling.order for sibling in siblings) == list(range(len(siblings)))


def _renumber(siblings: list[T]) -> list[T]:
    for position, sibling in enumerate(siblings):
        sibling.order = position
    return siblings
