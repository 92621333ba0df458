import json
from logging import getLogger
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from form_editor.business_rules.document_rules import DocumentRules
from form_editor.exceptions.parsing import MalformedInputError, SchemaShapeError
from form_editor.models.document import Document
from form_editor.utils.validation import ValidationCollector, ValidationLevel
from form_editor.utils.validation_messages import (
    DocumentValidationMessage,
    format_location,
)

logger = getLogger(__name__)


class FormDocumentParser:
    """Parser for converting form-definition JSON into our document model.

    Loading is all-or-nothing: either a complete Document comes back, or an
    exception is raised and nothing is returned. Structural findings that do
    not prevent editing end up in `self.validator` (see DocumentRules). The
    collector is only replaced when a load succeeds, so it always describes
    the last document returned.
    """

    def __init__(self, validation_level: ValidationLevel = ValidationLevel.LENIENT):
        self.validation_level = validation_level
        self.validator = ValidationCollector(validation_level)

    def parse_file(self, filepath: Union[str, Path]) -> Document:
        """Parse a form-definition JSON file.

        Raises:
            MalformedInputError: The file cannot be read or is not JSON
            SchemaShapeError: The JSON does not have the document shape
        """
        filepath = Path(filepath)
        try:
            text = filepath.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedInputError(
                f"Failed to read {filepath}: {e}", {"path": str(filepath)}
            ) from e
        return self.parse_text(text)

    def parse_text(self, text: str) -> Document:
        """Parse JSON text into a Document"""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedInputError(
                f"Invalid JSON file: {e.msg} (line {e.lineno}, column {e.colno})",
                {"line": e.lineno, "column": e.colno},
            ) from e
        return self.parse_data(data)

    def parse_data(self, data: Any) -> Document:
        """Validate already-decoded JSON data into a Document.

        Only the tree structure is checked: an object with a "steps" array
        whose child sequences are arrays of objects. Field values are taken
        as they are.
        """
        self._check_shape(data)

        try:
            document = Document.model_validate(data)
        except ValidationError as e:
            errors = e.errors()
            messages = [DocumentValidationMessage.format_pydantic_error(err) for err in errors]
            summary = messages[0]
            if len(messages) > 1:
                summary += f" ({len(messages) - 1} more problem(s))"
            raise SchemaShapeError(
                summary,
                location=format_location(errors[0]["loc"]),
                details={"errors": messages},
            ) from e

        validator = ValidationCollector(self.validation_level)
        DocumentRules(validator).check(document)
        self.validator = validator
        logger.info(
            "Loaded document: %d steps, %d issues",
            len(document.steps),
            len(self.validator.results),
        )
        return document

    def _check_shape(self, data: Any) -> None:
        """The minimal shape check: an object with a "steps" array"""
        if not isinstance(data, dict):
            raise SchemaShapeError(
                DocumentValidationMessage.NOT_AN_OBJECT.value.format(type_name=type(data).__name__)
            )
        if "steps" not in data:
            raise SchemaShapeError(DocumentValidationMessage.STEPS_MISSING.value, location="steps")
        if not isinstance(data["steps"], list):
            raise SchemaShapeError(
                DocumentValidationMessage.STEPS_NOT_A_LIST.value.format(
                    type_name=type(data["steps"]).__name__
                ),
                location="steps",
            )
