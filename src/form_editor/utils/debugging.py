from pathlib import Path
import logging
from form_editor.core.graph import outline, summarize
from form_editor.core.session import EditorSession
from form_editor.models.document import Document
from form_editor.utils.settings import EditorSettings
from form_editor.utils.validation import ValidationCollector, ValidationLevel

logger = logging.getLogger(__name__)


def setup_debug_logging(level=logging.INFO):
    """Set up logging configuration for debugging purposes.
    level: DEBUG also prints template construction and graph details,
    level: INFO prints edits and load diagnostics"""
    # Reset root logger handlers
    root = logging.getLogger()
    if root.handlers:
        root.handlers.clear()

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def inspect_document(document: Document):
    """Print a summary of the loaded document"""
    summary = summarize(document)
    print("\n=== Document Summary ===")
    for kind, count in summary["kinds"].items():
        print(f"Total {kind}s: {count}")

    print("\n=== Amount of Element Types ===")
    for element_type, count in sorted(summary["element_types"].items()):
        print(f"{element_type}: {count}")


def print_outline(document: Document, include_items: bool = False):
    print("\n=== Outline ===")
    for line in outline(document, include_items=include_items):
        print(line)


def print_diagnostics(validator: ValidationCollector):
    print("\n=== Load Diagnostics ===")
    if not validator.results:
        print("No issues found")
    for result in validator.results:
        location = f" at {result.path}" if result.path is not None else ""
        print(f"{result.severity.value}: {result.message}{location}")


def debug_editing(json_path: Path, validation_level: ValidationLevel = ValidationLevel.LENIENT, logging_level=logging.INFO):
    """Load a form-definition file and print what the editor sees

    Args:
        json_path: Path to the JSON file to load
        validation_level: Validation strictness level (default: LENIENT for debugging)
    """
    setup_debug_logging(logging_level)

    session = EditorSession(settings=EditorSettings(validation_level=validation_level))
    document = session.load_file(json_path)

    inspect_document(document)
    print_outline(document)
    print_diagnostics(session.validation)

    return session
