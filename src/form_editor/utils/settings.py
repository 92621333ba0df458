"""Editor settings, optionally read from a JSON file."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ValidationError

from form_editor.models.document import ElementType
from form_editor.utils.validation import ValidationLevel

logger = logging.getLogger(__name__)


class EditorSettings(BaseModel):
    """User-adjustable behaviour of an editing session"""

    indent: int = 2
    export_filename: str = "edited-form.json"
    default_element_type: str = ElementType.TEXTBOX.value
    copy_suffix: str = " (Copy)"
    validation_level: ValidationLevel = ValidationLevel.LENIENT
    templates_path: Optional[Path] = None  # None: packaged element_templates.json

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "EditorSettings":
        """Load settings from a JSON file, falling back to defaults.

        A missing file is normal. An unreadable or invalid file is logged
        and ignored.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                return cls.model_validate(json.load(f))
        except (json.JSONDecodeError, OSError, ValidationError) as e:
            logger.warning("Failed to load settings from %s: %s. Using defaults.", config_path, e)
            return cls()
