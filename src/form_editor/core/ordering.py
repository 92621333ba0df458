"""Maintains the `sortOrder` invariant of ordered sibling sequences.

Elements inside a question group (and element items inside an element) carry
a 1-based `sortOrder` that must equal their position. Every structural edit
ends with `renumber` on the sequence it changed.
"""

from typing import List, Sequence, TypeVar

from form_editor.models.document import FormNode

N = TypeVar("N", bound=FormNode)


def _at_position(node: FormNode, position: int) -> bool:
    # true == 1 in Python but not in the export
    return type(node.sort_order) is int and node.sort_order == position


def renumber(nodes: Sequence[N]) -> List[N]:
    """Return a new list whose members have `sort_order` 1..n by position.

    Members already carrying the right value are reused as-is.
    """
    renumbered = []
    for position, node in enumerate(nodes, start=1):
        if not _at_position(node, position) or "sort_order" not in node.model_fields_set:
            node = node.model_copy(update={"sort_order": position})
        renumbered.append(node)
    return renumbered


def is_contiguous(nodes: Sequence[FormNode]) -> bool:
    """Check that `sort_order` values are exactly 1..n in sequence order"""
    return all(_at_position(node, position) for position, node in enumerate(nodes, start=1))
