from enum import Enum
from typing import Sequence, Union
from pydantic_core import ErrorDetails


def format_location(loc: Sequence[Union[str, int]]) -> str:
    """Render a pydantic error location as a dotted document path"""
    return ".".join(str(part) for part in loc) or "<document>"


class DocumentValidationMessage(Enum):
    """Messages for documents that do not have the expected shape.

    Each value is a template; `format_pydantic_error` picks one for a pydantic
    error and fills in the placeholders.
    """
    NOT_AN_OBJECT = "Invalid JSON: expected an object at the top level, got {type_name}."
    STEPS_MISSING = 'Invalid JSON: missing "steps" array.'
    STEPS_NOT_A_LIST = 'Invalid JSON: "steps" must be an array, got {type_name}.'
    MISSING_FIELD = "Missing required field '{field_name}' at {location}."
    NOT_A_LIST = "Expected an array at {location}."
    NOT_AN_OBJECT_AT = "Expected an object at {location}."
    WRONG_TYPE = "Field '{field_name}' at {location} has the wrong type: {error_msg}."
    INVALID_GENERAL = "Invalid value at {location}: {error_msg}."

    @classmethod
    def format_pydantic_error(cls, error_details: ErrorDetails) -> str:
        """Format a Pydantic validation error into a user-friendly message.

        Args:
            error_details: One entry of ``ValidationError.errors()``

        Returns:
            A formatted, user-friendly error message
        """
        error_type = error_details['type']
        loc = error_details.get('loc', ())
        field_name = str(loc[-1]) if loc else ""

        if error_type == 'missing':
            message_template = cls.MISSING_FIELD.value
            loc = loc[:-1]
        elif error_type == 'list_type':
            message_template = cls.NOT_A_LIST.value
        elif error_type in ('model_type', 'model_attributes_type', 'dict_type'):
            message_template = cls.NOT_AN_OBJECT_AT.value
        elif error_type.endswith('_type') or error_type.endswith('_parsing'):
            message_template = cls.WRONG_TYPE.value
        else:
            message_template = cls.INVALID_GENERAL.value

        return message_template.format(
            field_name=field_name,
            location=format_location(loc),
            error_msg=error_details.get('msg', ''),
        )
