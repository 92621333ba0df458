from form_editor.exceptions.parsing import MalformedInputError, SchemaShapeError
from form_editor.exceptions.editing import InvalidPathError

__all__ = ["MalformedInputError", "SchemaShapeError", "InvalidPathError"]
