"""
Editing session: the current snapshot and selection of one user.

The edit operations in `form_editor.core.editor` are pure functions over
snapshots. A front-end needs somewhere to keep the snapshot it is showing, the
node the user selected and the session's identifier generator; EditorSession
is that place. It is the only holder of mutable state and it only ever swaps
whole snapshots.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from form_editor.business_rules.element_templates import ElementTemplates
from form_editor.core import editor
from form_editor.core.editor import EditResult
from form_editor.core.identifiers import IdentifierGenerator
from form_editor.core.loader import FormDocumentParser
from form_editor.core.paths import NodePath, PathSegment, resolve, same_path
from form_editor.core.serializer import save, serialize
from form_editor.models.document import Document, FormNode
from form_editor.utils.settings import EditorSettings
from form_editor.utils.validation import ValidationCollector

logger = logging.getLogger(__name__)

# Fields offered for direct editing, in display order
EDITABLE_FIELDS = ("identifier", "tag", "title", "type", "value", "sortOrder", "isEnabled")
# Fields shown as serialized JSON only
READ_ONLY_FIELDS = ("attributes", "validations", "dependency", "elementItems")


def _display(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)


class EditorSession:
    """Holds the live snapshot and selection and applies edits to them."""

    def __init__(
        self,
        settings: Optional[EditorSettings] = None,
        templates: Optional[ElementTemplates] = None,
        identifiers: Optional[IdentifierGenerator] = None,
    ):
        self.settings = settings or EditorSettings()
        self.templates = templates or ElementTemplates(self.settings.templates_path)
        self.identifiers = identifiers or IdentifierGenerator()
        self.parser = FormDocumentParser(self.settings.validation_level)
        self.document: Optional[Document] = None
        self.selection: Optional[NodePath] = None
        self.new_element_type = self.settings.default_element_type

    # -------------------------------------------------------------------------
    # Load / export
    # -------------------------------------------------------------------------

    def load_text(self, text: str) -> Document:
        """Replace the current document with one parsed from `text`.

        On MalformedInputError or SchemaShapeError the current document and
        selection are kept.
        """
        document = self.parser.parse_text(text)
        self.document = document
        self.selection = None
        return document

    def load_file(self, filepath: Union[str, Path]) -> Document:
        document = self.parser.parse_file(filepath)
        self.document = document
        self.selection = None
        return document

    @property
    def validation(self) -> ValidationCollector:
        """Diagnostics of the last load"""
        return self.parser.validator

    def export(self) -> str:
        return serialize(self._require_document(), indent=self.settings.indent)

    def save(self, directory: Union[str, Path] = ".") -> Path:
        """Write the export as `settings.export_filename` inside `directory`"""
        path = Path(directory) / self.settings.export_filename
        return save(self._require_document(), path, indent=self.settings.indent)

    def _require_document(self) -> Document:
        if self.document is None:
            raise RuntimeError("No document loaded")
        return self.document

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select(self, path: Optional[Sequence[PathSegment]]) -> Optional[FormNode]:
        """Select the node at `path` (None clears the selection).

        Raises:
            InvalidPathError: If `path` does not resolve in the current document
        """
        if path is None:
            self.selection = None
            return None
        resolved = resolve(self._require_document(), path)
        self.selection = resolved.path
        return resolved.node

    def selected_node(self) -> Optional[FormNode]:
        if self.document is None or self.selection is None:
            return None
        return resolve(self.document, self.selection).node

    def is_selected(self, path: Sequence[PathSegment]) -> bool:
        return self.selection is not None and same_path(self.selection, path)

    def field_view(self) -> Dict[str, Dict[str, str]]:
        """Editable and read-only fields of the selected node as display text"""
        node = self.selected_node()
        if node is None:
            return {"editable": {}, "read_only": {}}

        data = node.model_dump(mode="json", by_alias=True, exclude_unset=True)
        editable = {key: _display(data[key]) for key in EDITABLE_FIELDS if key in data}
        read_only = {
            key: json.dumps(data[key], indent=2, ensure_ascii=False)
            for key in READ_ONLY_FIELDS
            if isinstance(data.get(key), (dict, list))
        }
        return {"editable": editable, "read_only": read_only}

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def _apply(self, result: EditResult) -> EditResult:
        # no-ops leave the selection where the user had it
        if result.changed:
            self.document = result.document
            self.selection = result.selection
        return result

    def set_field(self, field_name: str, value: Any) -> EditResult:
        """Edit a field of the selected node"""
        document = self._require_document()
        if self.selection is None:
            logger.info("Edit noop: set_field nothing selected")
            return EditResult(document, None, False, "Nothing selected.")
        return self._apply(editor.set_field(document, self.selection, field_name, value))

    def move_element(self, step_idx: int, group_idx: int, element_idx: int, direction: int) -> EditResult:
        return self._apply(
            editor.move_element(self._require_document(), step_idx, group_idx, element_idx, direction)
        )

    def add_element(self, step_idx: int, group_idx: int, type_tag: Optional[str] = None) -> EditResult:
        """Append an element of `type_tag` (default: `new_element_type`)"""
        return self._apply(
            editor.add_element(
                self._require_document(),
                step_idx,
                group_idx,
                type_tag or self.new_element_type,
                self.identifiers,
                self.templates,
            )
        )

    def duplicate_element(self, step_idx: int, group_idx: int, element_idx: int) -> EditResult:
        return self._apply(
            editor.duplicate_element(
                self._require_document(),
                step_idx,
                group_idx,
                element_idx,
                self.identifiers,
                copy_suffix=self.settings.copy_suffix,
            )
        )

    def delete_element(self, step_idx: int, group_idx: int, element_idx: int) -> EditResult:
        return self._apply(
            editor.delete_element(self._require_document(), step_idx, group_idx, element_idx)
        )
