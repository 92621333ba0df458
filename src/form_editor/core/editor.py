"""
Copy-on-write edit operations on form-definition snapshots.

Every operation takes a snapshot plus the address of its target and returns
an `EditResult`: the new snapshot and the path the caller should select next.
The input snapshot is never modified; only the nodes on the path from the root
to the edited node (and the edited sibling sequence) are rebuilt.

Error policy:
- An address that does not resolve raises InvalidPathError before anything
  is built, so the caller keeps a consistent snapshot.
- An operation whose precondition does not hold (moving the first element
  up, editing a field to the value it already has, ...) is a no-op: the
  original snapshot object is returned with ``changed=False``.

Structural operations end with `renumber` on the element sequence they
changed, so `sortOrder` always equals position.
"""

from dataclasses import dataclass
import logging
from typing import Any, Optional, Sequence

from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_json

from form_editor.business_rules.element_templates import ElementTemplates
from form_editor.core.identifiers import IdentifierGenerator
from form_editor.core.ordering import renumber
from form_editor.core.paths import (
    NodePath,
    PathSegment,
    ResolvedNode,
    element_path,
    group_path,
    resolve,
)
from form_editor.models.document import Document, Element

__all__ = [
    "EditResult",
    "set_field",
    "move_element",
    "add_element",
    "duplicate_element",
    "delete_element",
]

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"


@dataclass(frozen=True)
class EditResult:
    """Result of an edit operation.

    Attributes
    ----------
    document
        The snapshot to use from now on (the input snapshot on a no-op).
    selection
        Path the caller should select, or None to clear the selection.
    changed
        False when the operation was a no-op.
    message
        Human-readable summary suitable for logs or UI display.
    """
    document: Document
    selection: Optional[NodePath]
    changed: bool = True
    message: str = ""


def _noop(document: Document, selection: Optional[NodePath], op: str, message: str) -> EditResult:
    logger.info("Edit noop: %s %s", op, message)
    return EditResult(document, selection, False, message)


def _same_json(old: Any, new: Any) -> bool:
    # 1 == True in Python, but not in the export
    return to_json(old) == to_json(new)


def set_field(
    document: Document,
    path: Sequence[PathSegment],
    field_name: str,
    value: Any,
) -> EditResult:
    """Replace a scalar field of the node at `path`.

    `field_name` is the JSON key (``isEnabled``); the attribute name
    (``is_enabled``) is accepted too unless the node carries a pass-through
    key of that name. Declared fields are coerced to their edit type
    (``"false"`` becomes ``False`` for a flag); other names are stored in the
    node's pass-through fields as given.
    """
    logger.info("Edit: set_field field=%s path=%s", field_name, list(path))
    resolved = resolve(document, path)
    node = resolved.node
    selection = resolved.path
    extra = node.model_extra or {}
    attr = None if field_name in extra else node.field_for_key(field_name)

    if attr is not None and attr == node.children_field:
        return _noop(document, selection, "set_field", f"'{field_name}' is a child sequence, not a field.")
    if attr == "sort_order":
        return _noop(
            document, selection, "set_field", "sortOrder follows the position; move the element instead."
        )

    if attr is not None:
        try:
            value = TypeAdapter(type(node).edit_type(attr)).validate_python(value)
        except ValidationError as e:
            return _noop(document, selection, "set_field", f"Invalid value for '{field_name}': {e.errors()[0]['msg']}.")

    if isinstance(node, Element) and attr == "identifier" and value != node.identifier:
        if any(other.identifier == value for _, _, _, other in document.iter_elements()):
            return _noop(document, selection, "set_field", f"Identifier '{value}' is already in use.")

    if node.has_key(field_name) and _same_json(node.get_value(field_name), value):
        return _noop(document, selection, "set_field", f"'{field_name}' already has this value.")

    if field_name in extra:
        # the key may share its name with an attribute, which `update` would pick
        updated = node.model_copy()
        updated.model_extra[field_name] = value
    else:
        updated = node.model_copy(update={attr or field_name: value})
    logger.info("Edit OK: set_field field=%s path=%s", field_name, list(selection))
    return EditResult(resolved.replace(updated), selection, True, f"Updated '{field_name}'.")


def _resolve_element(document, step_idx, group_idx, element_idx) -> ResolvedNode:
    return resolve(document, element_path(step_idx, group_idx, element_idx))


def move_element(
    document: Document,
    step_idx: int,
    group_idx: int,
    element_idx: int,
    direction: int,
) -> EditResult:
    """Swap an element with its previous (-1) or next (+1) sibling.

    Moving past either end of the group is a no-op.
    """
    if direction not in (-1, 1):
        raise ValueError(f"Unsupported move direction {direction!r}, expected -1 or +1")

    logger.info(
        "Edit: move_element direction=%+d step=%s group=%s element=%s",
        direction, step_idx, group_idx, element_idx,
    )
    resolved = _resolve_element(document, step_idx, group_idx, element_idx)
    group = resolved.owner()
    elements = list(group.node.elements)

    target_idx = element_idx + direction
    if not 0 <= target_idx < len(elements):
        word = "up" if direction < 0 else "down"
        return _noop(document, resolved.path, "move_element", f"Cannot move {word} (at boundary).")

    elements[element_idx], elements[target_idx] = elements[target_idx], elements[element_idx]
    new_document = group.replace_children(renumber(elements))

    logger.info("Edit OK: move_element %s -> %s", element_idx, target_idx)
    return EditResult(
        new_document,
        element_path(step_idx, group_idx, target_idx),
        True,
        "Moved element up." if direction < 0 else "Moved element down.",
    )


def add_element(
    document: Document,
    step_idx: int,
    group_idx: int,
    type_tag: str,
    identifiers: IdentifierGenerator,
    templates: ElementTemplates,
) -> EditResult:
    """Append a new element of type `type_tag` to a question group.

    The element is built by the template registry: composite types get their
    canned choices, everything else a generic empty element.
    """
    logger.info("Edit: add_element type=%s step=%s group=%s", type_tag, step_idx, group_idx)
    group = resolve(document, group_path(step_idx, group_idx))

    elements = list(group.node.elements)
    element = templates.build(type_tag, identifiers.new_element(), len(elements) + 1)
    elements.append(element)
    new_document = group.replace_children(renumber(elements))

    logger.info("Edit OK: add_element identifier=%s", element.identifier)
    return EditResult(
        new_document,
        element_path(step_idx, group_idx, len(elements) - 1),
        True,
        f"Added {type_tag} element.",
    )


def duplicate_element(
    document: Document,
    step_idx: int,
    group_idx: int,
    element_idx: int,
    identifiers: IdentifierGenerator,
    copy_suffix: str = COPY_SUFFIX,
) -> EditResult:
    """Insert a deep copy of an element right after the original"""
    logger.info(
        "Edit: duplicate_element step=%s group=%s element=%s", step_idx, group_idx, element_idx
    )
    resolved = _resolve_element(document, step_idx, group_idx, element_idx)
    group = resolved.owner()
    original = resolved.node

    if isinstance(original.identifier, str):
        identifier = identifiers.copy_of(original.identifier)
    else:
        identifier = identifiers.new_element()
    title = "" if original.title is None else original.title
    duplicate = original.model_copy(
        deep=True,
        update={"identifier": identifier, "title": f"{title}{copy_suffix}"},
    )
    elements = list(group.node.elements)
    elements.insert(element_idx + 1, duplicate)
    new_document = group.replace_children(renumber(elements))

    logger.info("Edit OK: duplicate_element identifier=%s", duplicate.identifier)
    return EditResult(
        new_document,
        element_path(step_idx, group_idx, element_idx + 1),
        True,
        "Duplicated element.",
    )


def delete_element(
    document: Document,
    step_idx: int,
    group_idx: int,
    element_idx: int,
) -> EditResult:
    """Remove an element. The selection is cleared since the node is gone."""
    logger.info(
        "Edit: delete_element step=%s group=%s element=%s", step_idx, group_idx, element_idx
    )
    resolved = _resolve_element(document, step_idx, group_idx, element_idx)
    group = resolved.owner()

    elements = list(group.node.elements)
    removed = elements.pop(element_idx)
    new_document = group.replace_children(renumber(elements))

    logger.info("Edit OK: delete_element identifier=%s", removed.identifier)
    return EditResult(new_document, None, True, "Deleted element.")
