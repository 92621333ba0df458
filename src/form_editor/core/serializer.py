"""Export of document snapshots as JSON text."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from form_editor.models.document import Document

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "edited-form.json"


def to_data(document: Document) -> Dict[str, Any]:
    """Plain JSON data for a snapshot.

    Declared fields come first in declaration order, followed by the
    pass-through keys in the order they were read. Keys that were absent
    from the source stay absent.
    """
    return document.model_dump(mode="json", by_alias=True, exclude_unset=True)


def serialize(document: Document, indent: int = 2) -> str:
    """Canonical text of a snapshot, used both for preview and download"""
    return json.dumps(to_data(document), indent=indent, ensure_ascii=False)


def save(document: Document, path: Union[str, Path], indent: int = 2) -> Path:
    """Write the export of `document` to `path`"""
    path = Path(path)
    path.write_text(serialize(document, indent=indent), encoding="utf-8")
    logger.info("Exported document to %s", path)
    return path
