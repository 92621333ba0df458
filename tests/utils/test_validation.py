import pytest

from form_editor.exceptions.parsing import SchemaShapeError
from form_editor.utils.validation import ValidationCollector, ValidationLevel, ValidationSeverity
from form_editor.utils.validation_messages import DocumentValidationMessage, format_location


@pytest.mark.parametrize("level, severity, raises", [
    (ValidationLevel.STRICT, ValidationSeverity.ERROR, True),
    (ValidationLevel.STRICT, ValidationSeverity.WARNING, False),
    (ValidationLevel.NORMAL, ValidationSeverity.CRITICAL, True),
    (ValidationLevel.NORMAL, ValidationSeverity.ERROR, False),
    (ValidationLevel.LENIENT, ValidationSeverity.CRITICAL, False),
])
def test_levels(level, severity, raises):
    collector = ValidationCollector(level)
    if raises:
        with pytest.raises(SchemaShapeError):
            collector.add_result(severity, "problem", path=("steps", 0))
    else:
        collector.add_result(severity, "problem", path=("steps", 0))
    # the result is recorded either way
    assert len(collector.results) == 1


def test_results_by_severity():
    collector = ValidationCollector(ValidationLevel.LENIENT)
    collector.add_result(ValidationSeverity.WARNING, "w")
    collector.add_result(ValidationSeverity.CRITICAL, "c")

    assert [r.message for r in collector.get_results_by_severity(ValidationSeverity.WARNING)] == ["w"]
    assert collector.has_critical_issues
    assert collector.has_errors

    collector.clear()
    assert not collector.has_errors


def test_save_report(tmp_path):
    collector = ValidationCollector(ValidationLevel.LENIENT)
    collector.add_result(
        ValidationSeverity.ERROR,
        "Identifier 'a' is used by 2 elements.",
        path=("steps", 0, "questionGroups", 0, "elements", 1),
        node_kind="element",
        field_name="identifier",
    )

    report_path = tmp_path / "reports" / "load_validation.log"
    collector.save_report(report_path)
    report = report_path.read_text(encoding="utf-8")

    assert report.startswith("Form Document Validation Report")
    assert "ERROR Issues (1):" in report
    assert "Path: steps.0.questionGroups.0.elements.1" in report
    assert "ERROR: 1 issues" in report
    assert "Critical issues" not in report


def test_format_location():
    assert format_location(("steps", 0, "questionGroups")) == "steps.0.questionGroups"
    assert format_location(()) == "<document>"


@pytest.mark.parametrize("error, expected", [
    (
        {"type": "missing", "loc": ("steps", 0, "tag"), "msg": "Field required"},
        "Missing required field 'tag' at steps.0.",
    ),
    (
        {"type": "list_type", "loc": ("steps", 0, "questionGroups"), "msg": "Input should be a valid list"},
        "Expected an array at steps.0.questionGroups.",
    ),
    (
        {"type": "model_type", "loc": ("steps", 1), "msg": "Input should be an object"},
        "Expected an object at steps.1.",
    ),
    (
        {"type": "int_parsing", "loc": ("steps", 0, "questionGroups", 0, "elements", 0, "sortOrder"),
         "msg": "Input should be a valid integer"},
        "Field 'sortOrder' at steps.0.questionGroups.0.elements.0.sortOrder has the wrong type: "
        "Input should be a valid integer.",
    ),
    (
        {"type": "value_error", "loc": ("steps",), "msg": "bad"},
        "Invalid value at steps: bad.",
    ),
])
def test_format_pydantic_error(error, expected):
    assert DocumentValidationMessage.format_pydantic_error(error) == expected


def test_strict_error_carries_dotted_location():
    collector = ValidationCollector(ValidationLevel.STRICT)
    with pytest.raises(SchemaShapeError) as exc_info:
        collector.add_result(ValidationSeverity.ERROR, "duplicate", path=("steps", 0, "questionGroups", 1))
    assert exc_info.value.location == "steps.0.questionGroups.1"
