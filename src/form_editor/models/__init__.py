from form_editor.models.document import (
    Document,
    Element,
    ElementItem,
    ElementType,
    FormNode,
    QuestionGroup,
    Step,
)

__all__ = ["Document", "Element", "ElementItem", "ElementType", "FormNode", "QuestionGroup", "Step"]
