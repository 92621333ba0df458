"""
Structural rules for loaded form documents.

These are the invariants the editor maintains on every edit. A document coming
from outside may break them; the rules report what they find to a
ValidationCollector and never change the document.
"""

from collections import defaultdict
import logging

from form_editor.core.graph import build_document_graph, iter_nodes_of_kind
from form_editor.core.ordering import is_contiguous
from form_editor.core.paths import group_path, step_path
from form_editor.models.document import Document
from form_editor.utils.validation import ValidationCollector, ValidationSeverity

logger = logging.getLogger(__name__)


class DocumentRules:
    """Checks sortOrder contiguity, identifier uniqueness and sibling tag uniqueness"""

    def __init__(self, validation_collector: ValidationCollector):
        self.validator = validation_collector

    def check(self, document: Document) -> None:
        self.check_sort_orders(document)
        self.check_unique_identifiers(document)
        self.check_unique_tags(document)

    def check_sort_orders(self, document: Document) -> None:
        """Elements (and element items) must be numbered 1..n by position"""
        for s, step in enumerate(document.steps):
            for g, group in enumerate(step.question_groups):
                if not is_contiguous(group.elements):
                    found = [element.sort_order for element in group.elements]
                    self.validator.add_result(
                        severity=ValidationSeverity.WARNING,
                        message=f"Elements of group '{group.tag}' have sortOrder {found}, "
                                f"expected 1..{len(found)}.",
                        path=group_path(s, g),
                        node_kind="group",
                        field_name="sortOrder",
                    )
                for e, element in enumerate(group.elements):
                    items = element.element_items
                    if items and not is_contiguous(items):
                        self.validator.add_result(
                            severity=ValidationSeverity.WARNING,
                            message=f"Items of element '{element.identifier}' are not numbered 1..{len(items)}.",
                            path=group_path(s, g) + ("elements", e),
                            node_kind="element",
                            field_name="sortOrder",
                        )

    def check_unique_identifiers(self, document: Document) -> None:
        graph = build_document_graph(document)
        paths_by_identifier = defaultdict(list)
        for path, attrs in iter_nodes_of_kind(graph, "element"):
            if isinstance(attrs["identifier"], str):
                paths_by_identifier[attrs["identifier"]].append(path)

        for identifier, paths in paths_by_identifier.items():
            if len(paths) > 1:
                for path in paths[1:]:
                    self.validator.add_result(
                        severity=ValidationSeverity.ERROR,
                        message=f"Identifier '{identifier}' is used by {len(paths)} elements.",
                        path=path,
                        node_kind="element",
                        field_name="identifier",
                    )

    def check_unique_tags(self, document: Document) -> None:
        """Steps, and groups within a step, should have distinct tags"""
        self._check_sibling_tags(
            [step.tag for step in document.steps],
            lambda index: step_path(index),
            "step",
        )
        for s, step in enumerate(document.steps):
            self._check_sibling_tags(
                [group.tag for group in step.question_groups],
                lambda index, s=s: group_path(s, index),
                "group",
            )

    def _check_sibling_tags(self, tags, path_for, node_kind) -> None:
        seen = set()
        for index, tag in enumerate(tags):
            if not isinstance(tag, str):
                continue
            if tag in seen:
                self.validator.add_result(
                    severity=ValidationSeverity.WARNING,
                    message=f"Duplicate {node_kind} tag '{tag}'.",
                    path=path_for(index),
                    node_kind=node_kind,
                    field_name="tag",
                )
            seen.add(tag)
