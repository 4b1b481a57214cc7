"""Client-side projection of the sheet.

Keeps a local copy of the tree consistent with the server without
refetching after every mutation. Each mutation is registered as pending,
then either confirmed with the server's result (which is folded into the
local tree) or marked failed (which leaves the tree untouched). Nothing is
applied optimistically.

The local copy may lag behind the server. When a confirmed result cannot be
placed because its id path no longer resolves locally, or because the server
placed it at a position the local siblings do not account for, the
projection does not guess: it keeps its tree, flags itself stale, and the
next whole-sheet result (fetch, reorder or replace) brings it back in line.
"""

import copy
import logging
import uuid
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from topicsheet.core import siblings
from topicsheet.core.errors import NotFoundError
from topicsheet.core.model import Question, Sheet, SubTopic, Topic

logger = logging.getLogger(__name__)

Node = Topic | SubTopic | Question

HISTORY_LIMIT = 100


class MutationKind(StrEnum):
    FETCH = "fetch"
    REPLACE_SHEET = "replace_sheet"
    REORDER = "reorder"
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    MOVE = "move"


class MutationState(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


WHOLE_SHEET_KINDS = frozenset(
    {MutationKind.FETCH, MutationKind.REPLACE_SHEET, MutationKind.REORDER},
)


class DriftError(Exception):
    """A confirmed result does not fit the local tree."""


@dataclass
class PendingMutation:
    """One mutation as seen by the client.

    ``path`` is the id path the mutation addresses. For ``ADD`` it is the
    path of the parent (empty for a new topic); for ``UPDATE``, ``DELETE``
    and ``MOVE`` it is the path of the node itself; whole-sheet kinds use
    an empty path.
    """

    kind: MutationKind
    path: tuple[str, ...] = ()
    state: MutationState = MutationState.PENDING
    error: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


class SheetProjection:
    """Local copy of a sheet reconciled against confirmed mutation results.

    Pending mutations are tracked until settled. Settled ones are kept in
    ``history``, newest last, up to ``history_limit`` entries.
    """

    def __init__(self, sheet: Sheet | None = None, history_limit: int = HISTORY_LIMIT) -> None:
        self.sheet = sheet
        self.stale = sheet is None
        self.history: deque[PendingMutation] = deque(maxlen=history_limit)
        self._pending: dict[str, PendingMutation] = {}

    @property
    def pending(self) -> list[PendingMutation]:
        return list(self._pending.values())

    def begin(self, kind: MutationKind, *path: str) -> PendingMutation:
        """Register a mutation that has been sent but not yet answered."""
        mutation = PendingMutation(kind=kind, path=tuple(path))
        self._pending[mutation.id] = mutation
        logger.debug(f"Mutation {mutation.id} pending: {kind} {'/'.join(path)}")
        return mutation

    def confirm(self, mutation: PendingMutation, result: Any = None) -> Sheet | None:
        """Fold a server-confirmed result into the local tree.

        The result is copied before it is stored, so the caller's objects
        never alias the local tree. A mutation whose result is rejected
        stays pending.

        Args:
            mutation: The pending mutation being answered
            result: Sheet for whole-sheet kinds, the new or updated node for
                ``ADD``/``UPDATE``, the renumbered sibling list for ``MOVE``,
                ignored for ``DELETE``

        Returns:
            The local sheet after folding

        Raises:
            ValueError: If the mutation is not pending or the result has the
                wrong type for its kind
        """
        self._check_pending(mutation)
        _check_result(mutation, result)
        result = copy.deepcopy(result)

        if mutation.kind in WHOLE_SHEET_KINDS:
            self._settle(mutation, MutationState.CONFIRMED)
            self.sheet = result
            self.stale = False
            return self.sheet

        if self.sheet is None:
            self._settle(mutation, MutationState.CONFIRMED)
            self._mark_stale(mutation, "no local sheet")
            return None

        working = copy.deepcopy(self.sheet)
        try:
            self._fold(working, mutation, result)
        except (NotFoundError, DriftError) as e:
            self._settle(mutation, MutationState.CONFIRMED)
            self._mark_stale(mutation, str(e))
            return self.sheet

        self._settle(mutation, MutationState.CONFIRMED)
        self.sheet = working
        return self.sheet

    def fail(self, mutation: PendingMutation, error: BaseException | str) -> None:
        """Record a failed mutation. The local tree is not touched."""
        self._check_pending(mutation)
        mutation.error = str(error)
        self._settle(mutation, MutationState.FAILED)
        logger.warning(f"Mutation {mutation.id} failed: {mutation.error}")

    def _fold(self, sheet: Sheet, mutation: PendingMutation, result: Any) -> None:
        if mutation.kind is MutationKind.ADD:
            owner, attr = _children_of(sheet, mutation.path)
            _add(owner, attr, result)
        elif mutation.kind is MutationKind.UPDATE:
            owner, attr = _children_of(sheet, mutation.path[:-1])
            current: list[Node] = list(getattr(owner, attr))
            index = siblings.index_of(current, mutation.path[-1], _kind_at(len(mutation.path)))
            current[index] = result
            setattr(owner, attr, current)
        elif mutation.kind is MutationKind.DELETE:
            self._delete(sheet, mutation)
        elif mutation.kind is MutationKind.MOVE:
            owner, attr = _children_of(sheet, mutation.path[:-1])
            moved: Sequence[Node] = result
            setattr(owner, attr, list(moved))

    def _delete(self, sheet: Sheet, mutation: PendingMutation) -> None:
        try:
            owner, attr = _children_of(sheet, mutation.path[:-1])
            current = getattr(owner, attr)
            setattr(
                owner,
                attr,
                siblings.remove_by_id(current, mutation.path[-1], _kind_at(len(mutation.path))),
            )
        except NotFoundError:
            # Already gone locally: nothing left to reconcile.
            logger.debug(f"Mutation {mutation.id}: {'/'.join(mutation.path)} already absent")

    def _check_pending(self, mutation: PendingMutation) -> None:
        if mutation.state is not MutationState.PENDING or mutation.id not in self._pending:
            raise ValueError(f"Mutation {mutation.id} is already {mutation.state}")

    def _settle(self, mutation: PendingMutation, state: MutationState) -> None:
        mutation.state = state
        del self._pending[mutation.id]
        self.history.append(mutation)

    def _mark_stale(self, mutation: PendingMutation, reason: str) -> None:
        self.stale = True
        logger.warning(f"Local sheet is stale after mutation {mutation.id}: {reason}")


def _add(owner: object, attr: str, node: Node) -> None:
    current: list[Node] = list(getattr(owner, attr))
    for i, sibling in enumerate(current):
        if sibling.id == node.id:
            current[i] = node
            setattr(owner, attr, current)
            return
    if node.order != len(current):
        raise DriftError(
            f"server placed {node.id} at {node.order}, local copy has {len(current)} siblings",
        )
    setattr(owner, attr, [*current, node])


def _check_result(mutation: PendingMutation, result: Any) -> None:
    """Reject a result whose type does not match the mutation kind."""
    kind = mutation.kind
    if kind in WHOLE_SHEET_KINDS:
        if not isinstance(result, Sheet):
            raise ValueError(f"{kind} must be confirmed with a Sheet")
        return
    if kind is MutationKind.DELETE:
        return

    depth = len(mutation.path) + 1 if kind is MutationKind.ADD else len(mutation.path)
    if not 1 <= depth <= 3:
        raise ValueError(f"{kind} path {mutation.path} does not address a node")
    expected = (Topic, SubTopic, Question)[depth - 1]
    if kind is MutationKind.MOVE:
        if not isinstance(result, list) or not all(isinstance(n, expected) for n in result):
            raise ValueError(f"{kind} must be confirmed with a list of {expected.__name__}")
    elif not isinstance(result, expected):
        raise ValueError(f"{kind} must be confirmed with a {expected.__name__}")


def _kind_at(depth: int) -> str:
    return ("Topic", "Sub-topic", "Question")[depth - 1]


def _children_of(sheet: Sheet, parent_path: tuple[str, ...]) -> tuple[object, str]:
    """Resolve a parent id path to the object owning the child list.

    Returns:
        The owner and the attribute name of its child list

    Raises:
        NotFoundError: If a segment of the path does not resolve
    """
    if not parent_path:
        return sheet, "topics"
    topic = siblings.find(sheet.topics, parent_path[0], "Topic")
    if len(parent_path) == 1:
        return topic, "sub_topics"
    sub_topic = siblings.find(topic.sub_topics, parent_path[1], "Sub-topic")
    return sub_topic, "questions"
