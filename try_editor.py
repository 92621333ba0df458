import logging
from pathlib import Path
from form_editor.utils.debugging import debug_editing
from form_editor.utils.logging import setup_logger
from form_editor.utils.validation import ValidationLevel


if __name__ == "__main__":
    setup_logger("form_editor")
    # Replace with path to your form-definition file
    json_path = Path("tests/test_data/checkout_form.json")
    session = debug_editing(json_path, validation_level=ValidationLevel.LENIENT, logging_level=logging.INFO)

    result = session.add_element(0, 0, "deliveryOptions")
    print(result.message)
    print(session.export())
