"""Invariant checks for whole sheets.

Used by strict sheet replacement and by the ``validate`` CLI command. The
permissive replacement path never calls into this module.
"""

from collections import Counter
from collections.abc import Iterable, Sequence

from topicsheet.core.model import Sheet
from topicsheet.core.siblings import Ordered


def validate_sheet(sheet: Sheet) -> list[str]:
    """Collect every invariant violation in a sheet.

    Checks that topic, sub-topic and question ids are each unique
    sheet-wide, and that every sibling set is numbered ``0..n-1`` in list
    order.

    Args:
        sheet: Sheet to check

    Returns:
        Human-readable violations, empty if the sheet is consistent
    """
    return duplicate_id_errors(sheet) + order_errors(sheet)


def duplicate_id_errors(sheet: Sheet) -> list[str]:
    """Report ids used more than once within their scope."""
    topic_ids = [topic.id for topic in sheet.topics]
    sub_topic_ids = [st.id for topic in sheet.topics for st in topic.sub_topics]
    question_ids = [
        q.id for topic in sheet.topics for st in topic.sub_topics for q in st.questions
    ]
    return (
        _duplicates("topic", topic_ids)
        + _duplicates("sub-topic", sub_topic_ids)
        + _duplicates("question", question_ids)
    )


def order_errors(sheet: Sheet) -> list[str]:
    """Report sibling sets whose order fields do not follow list position."""
    errors = _order_errors("sheet", sheet.topics)
    for topic in sheet.topics:
        errors.extend(_order_errors(f"topic {topic.id}", topic.sub_topics))
        for sub_topic in topic.sub_topics:
            errors.extend(_order_errors(f"sub-topic {sub_topic.id}", sub_topic.questions))
    return errors


def _duplicates(kind: str, ids: Iterable[str]) -> list[str]:
    counts = Counter(ids)
    return [
        f"duplicate {kind} id {node_id!r} ({count} times)"
        for node_id, count in counts.items()
        if count > 1
    ]


def _order_errors(parent: str, siblings: Sequence[Ordered]) -> list[str]:
    orders = [sibling.order for sibling in siblings]
    if orders == list(range(len(siblings))):
        return []
    return [f"children of {parent} have order {orders}, expected 0..{len(siblings) - 1}"]
