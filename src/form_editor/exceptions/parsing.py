'''Custom exceptions for loading form-definition documents.'''


class MalformedInputError(ValueError):
    """Raised when the input is not parseable JSON text"""
    def __init__(self, message, details=None):
        self.details = details or {}   # Additional context for debugging
        super().__init__(message)


class SchemaShapeError(ValueError):
    """Raised when the input parses but does not have the document shape.

    `location` points at the offending node, e.g. ``steps.0.questionGroups``.
    """
    def __init__(self, message, location=None, details=None):
        self.location = location
        self.details = details or {}
        super().__init__(message)
