"""
Data model for form-definition documents.

A form definition is a tree: a Document owns Steps, a Step owns QuestionGroups,
a QuestionGroup owns Elements and an Element may own ElementItems (the choices
of choice-like element types). The JSON representation uses camelCase keys
(``questionGroups``, ``sortOrder``, ``isEnabled`` ...), the models expose them
as snake_case attributes with the JSON keys as aliases. Only the JSON keys are
read on input; a snake_case key in the source is an unknown key like any other.

Every model is frozen: a loaded document is a snapshot and edits produce new
snapshots (see ``form_editor.core.editor``). Every model also accepts keys it
does not declare. Those are kept in the model's extra bag and exported again
unchanged, so that fields the editor knows nothing about survive a
load -> edit -> export cycle.

Only the child sequences are validated on load. Scalar fields keep the value
they were loaded with, whatever its JSON type; the type an edit converts to
is attached to the field with `EditAs`.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ModelWrapValidatorHandler, model_validator


class ElementType(str, Enum):
    """Element types known to the editor. The model accepts any other string too."""

    TEXTBOX = "textbox"
    LABEL = "label"
    ZIP_CODE = "zipCode"
    COUNTRY_DROPDOWN = "countryDropDown"
    DELIVERY_OPTIONS = "deliveryOptions"
    SEGMENTED_RADIO = "segmentedRadio"
    IMAGE_RADIO = "imageRadio"
    SIMPLE_DROPDOWN = "simpleDropdown"
    CHECKBOX = "checkbox"
    IMAGE = "image"


class EditAs:
    """Annotated marker naming the type `set_field` converts a field's edits to"""

    def __init__(self, annotation: Any):
        self.annotation = annotation

    def __repr__(self):
        return f"EditAs({self.annotation!r})"


Text = Annotated[Any, EditAs(str)]
OptionalText = Annotated[Any, EditAs(Optional[str])]
Flag = Annotated[Any, EditAs(Optional[bool])]
Position = Annotated[Any, EditAs(int)]


class FormNode(BaseModel):
    """Base class for all nodes of a form definition.

    Subclasses set `children_field` to the attribute holding their ordered
    child sequence (None for leaves).
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    children_field: ClassVar[Optional[str]] = None

    @model_validator(mode="wrap")
    @classmethod
    def _unset_shadowed_fields(
        cls, data: Any, handler: ModelWrapValidatorHandler["FormNode"]
    ) -> "FormNode":
        node = handler(data)
        if isinstance(data, dict) and node.model_extra:
            for name, info in cls.model_fields.items():
                # a source key spelled like the attribute is a pass-through key
                # and must not mark the field as present
                if name in node.model_extra and info.alias and info.alias not in data:
                    node.model_fields_set.discard(name)
        return node

    @classmethod
    def field_for_key(cls, key: str) -> Optional[str]:
        """Map a JSON key or attribute name to the declared attribute name.

        Returns None for keys that are not declared on the model (those live
        in the extra bag).
        """
        for name, info in cls.model_fields.items():
            if key == name or key == info.alias:
                return name
        return None

    @classmethod
    def key_for_field(cls, name: str) -> str:
        """Return the JSON key of a declared attribute"""
        info = cls.model_fields[name]
        return info.alias or name

    @classmethod
    def edit_type(cls, name: str) -> Any:
        """Type that edits of the declared attribute `name` are converted to"""
        info = cls.model_fields[name]
        for marker in info.metadata:
            if isinstance(marker, EditAs):
                return marker.annotation
        return info.annotation

    @classmethod
    def children_key(cls) -> Optional[str]:
        """JSON key of the ordered child sequence, e.g. ``questionGroups``"""
        if cls.children_field is None:
            return None
        return cls.key_for_field(cls.children_field)

    def children(self) -> List["FormNode"]:
        if self.children_field is None:
            return []
        return getattr(self, self.children_field)

    def get_value(self, key: str) -> Any:
        """Read a declared field (by JSON key or attribute name) or a pass-through key.

        Pass-through keys win over attribute names, so a source key like
        ``is_enabled`` reads back as it was loaded.
        """
        extra = self.model_extra or {}
        if key in extra:
            return extra[key]
        name = self.field_for_key(key)
        if name is not None:
            return getattr(self, name)
        return None

    def has_key(self, key: str) -> bool:
        """True if `key` was present in the source (or set by an edit)"""
        if key in (self.model_extra or {}):
            return True
        name = self.field_for_key(key)
        return name is not None and name in self.model_fields_set

    @property
    def display_label(self) -> str:
        label = getattr(self, "title", None) or getattr(self, "tag", None)
        return "" if label is None else str(label)


class ElementItem(FormNode):
    """A choice of a choice-like element (e.g. one delivery option)"""

    tag: OptionalText = None
    title: OptionalText = None
    value: Any = None
    is_enabled: Flag = Field(default=None, alias="isEnabled")
    is_selected: Flag = Field(default=None, alias="isSelected")
    sort_order: Position = Field(default=None, alias="sortOrder")
    attributes: Any = None
    dependency: Any = None


class Element(FormNode):
    """The editable leaf unit of a form: one question, label, image, ...

    `type` is an open tag (see ElementType for the known ones). `sort_order`
    is the 1-based position of the element inside its question group.
    """

    children_field: ClassVar[Optional[str]] = "element_items"

    identifier: Text = None
    type: Text = None
    title: Text = None
    value: Any = None
    sort_order: Position = Field(default=None, alias="sortOrder")
    is_enabled: Flag = Field(default=None, alias="isEnabled")
    attributes: Any = None
    validations: Any = None
    dependency: Any = None
    element_items: List[ElementItem] = Field(default_factory=list, alias="elementItems")


class QuestionGroup(FormNode):
    children_field: ClassVar[Optional[str]] = "elements"

    tag: Text = None
    title: OptionalText = None
    elements: List[Element] = Field(default_factory=list)


class Step(FormNode):
    children_field: ClassVar[Optional[str]] = "question_groups"

    tag: Text = None
    title: OptionalText = None
    question_groups: List[QuestionGroup] = Field(default_factory=list, alias="questionGroups")


class Document(FormNode):
    """Top-level container for an entire form definition"""

    children_field: ClassVar[Optional[str]] = "steps"

    steps: List[Step] = Field(default_factory=list)

    def iter_elements(self):
        """Yield (step_idx, group_idx, element_idx, element) in document order"""
        for s, step in enumerate(self.steps):
            for g, group in enumerate(step.question_groups):
                for e, element in enumerate(group.elements):
                    yield s, g, e, element
