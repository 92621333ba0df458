# src/form_editor/exceptions/editing.py
from typing import Optional


class InvalidPathError(LookupError):
    """Raised when an address does not resolve inside a document snapshot"""
    def __init__(self, message: str, path, position: Optional[int] = None):
        self.path = tuple(path)
        self.position = position  # index of the failing segment
        super().__init__(f"{message} (Path: {list(self.path)})")
