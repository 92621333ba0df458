import json

import pytest
from form_editor.core.loader import FormDocumentParser
from form_editor.core.serializer import to_data
from form_editor.models.document import Document, Element
from form_editor.exceptions.parsing import MalformedInputError, SchemaShapeError
from form_editor.utils.validation import ValidationLevel, ValidationSeverity


@pytest.fixture
def parser():
    """Provides a fresh parser instance for each test"""
    return FormDocumentParser()


def test_parse_checkout_form(parser, checkout_text):
    """Test parsing of a complete form definition"""
    document = parser.parse_text(checkout_text)

    # Verify we got a valid Document object
    assert isinstance(document, Document)
    assert [step.tag for step in document.steps] == ["shipping", "summary"]

    address = document.steps[0].question_groups[0]
    assert address.tag == "address"
    assert [element.identifier for element in address.elements] == ["street", "zip", "country"]

    street = address.elements[0]
    assert isinstance(street, Element)
    assert street.sort_order == 1
    assert street.is_enabled is True
    assert street.attributes["maxLength"] == 80


def test_unknown_keys_are_kept(checkout_document):
    """Keys the model does not declare end up in the extra bag"""
    assert checkout_document.model_extra == {"formId": "checkout-v2"}

    street = checkout_document.steps[0].question_groups[0].elements[0]
    assert street.model_extra == {"analyticsKey": "addr_street"}

    express = checkout_document.steps[0].question_groups[1].elements[0].element_items[1]
    assert express.get_value("badge") == "fast"


def test_parse_empty_document(parser):
    """A document without steps is valid"""
    document = parser.parse_text('{"steps": []}')
    assert document.steps == []


def test_parse_invalid_json(parser):
    """Test that text which is not JSON raises the appropriate error"""
    with pytest.raises(MalformedInputError):
        parser.parse_text('{"steps": [')


def test_parse_missing_file(parser):
    with pytest.raises(MalformedInputError):
        parser.parse_file("nonexistent_file.json")


def test_parse_file(parser, tmp_path, checkout_text):
    path = tmp_path / "form.json"
    path.write_text(checkout_text, encoding="utf-8")

    document = parser.parse_file(path)
    assert len(document.steps) == 2


@pytest.mark.parametrize("text", [
    '{"pages": []}',
    '{"steps": {"tag": "s1"}}',
    '[{"steps": []}]',
    '"steps"',
])
def test_shape_errors(parser, text):
    """Valid JSON without a top-level "steps" array is rejected"""
    with pytest.raises(SchemaShapeError):
        parser.parse_text(text)


def test_missing_steps_message(parser):
    with pytest.raises(SchemaShapeError) as exc_info:
        parser.parse_text('{"pages": []}')
    assert 'missing "steps" array' in str(exc_info.value)
    assert exc_info.value.location == "steps"


def test_nested_shape_error_points_at_node(parser):
    """A child sequence entry that is not an object is reported with its location"""
    text = '''{
        "steps": [{"tag": "s1", "questionGroups": [{"tag": "g1", "elements": [
            {"identifier": "a", "type": "textbox", "title": "A", "sortOrder": 1},
            42
        ]}]}]
    }'''
    with pytest.raises(SchemaShapeError) as exc_info:
        parser.parse_text(text)

    error = exc_info.value
    assert "Expected an object at steps.0.questionGroups.0.elements.1" in str(error)
    assert error.location == "steps.0.questionGroups.0.elements.1"
    assert len(error.details["errors"]) == 1


def test_clean_document_has_no_diagnostics(parser, checkout_text):
    parser.parse_text(checkout_text)
    assert parser.validator.results == []


def test_diagnostics_do_not_change_document(parser):
    """Gaps in sortOrder are reported but kept as they are"""
    text = '''{"steps": [{"tag": "s1", "questionGroups": [{"tag": "g1", "elements": [
        {"identifier": "a", "type": "textbox", "title": "A", "sortOrder": 1},
        {"identifier": "b", "type": "textbox", "title": "B", "sortOrder": 5}
    ]}]}]}'''
    document = parser.parse_text(text)

    assert [e.sort_order for e in document.steps[0].question_groups[0].elements] == [1, 5]
    warnings = parser.validator.get_results_by_severity(ValidationSeverity.WARNING)
    assert len(warnings) == 1
    assert warnings[0].path == ["steps", 0, "questionGroups", 0]


def test_strict_parser_rejects_duplicate_identifiers():
    parser = FormDocumentParser(validation_level=ValidationLevel.STRICT)
    text = '''{"steps": [{"tag": "s1", "questionGroups": [{"tag": "g1", "elements": [
        {"identifier": "a", "type": "textbox", "title": "A", "sortOrder": 1},
        {"identifier": "a", "type": "textbox", "title": "B", "sortOrder": 2}
    ]}]}]}'''
    with pytest.raises(SchemaShapeError):
        parser.parse_text(text)


def test_diagnostics_reset_between_loads(parser):
    parser.parse_text('''{"steps": [{"tag": "s", "questionGroups": []}, {"tag": "s", "questionGroups": []}]}''')
    assert len(parser.validator.results) == 1

    parser.parse_text('{"steps": []}')
    assert parser.validator.results == []


def test_field_values_are_kept_as_loaded(parser):
    """Values of any JSON type are neither converted nor rejected"""
    data = {"steps": [{"tag": "s1", "questionGroups": [{"tag": "g1", "elements": [{
        "identifier": "choice",
        "type": "segmentedRadio",
        "title": "Choice",
        "sortOrder": 1,
        "isEnabled": "yes",
        "attributes": [],
        "validations": "none",
        "dependency": {"on": "other"},
        "elementItems": [
            {"tag": "a", "isSelected": 1, "isEnabled": "yes", "sortOrder": "1", "attributes": []},
            {"tag": "b", "isSelected": 0, "sortOrder": 2.0, "dependency": "x"},
        ],
    }]}]}]}

    document = parser.parse_text(json.dumps(data))

    assert to_data(document) == data
    item = document.steps[0].question_groups[0].elements[0].element_items[0]
    assert item.is_selected == 1 and item.is_selected is not True
    assert item.sort_order == "1"


def test_snake_case_keys_are_unknown_keys(parser):
    """Only the camelCase keys fill declared fields"""
    data = {"steps": [{"tag": "s1", "questionGroups": [{"tag": "g1", "elements": [
        {"identifier": "a", "type": "textbox", "title": "A", "sortOrder": 1, "is_enabled": False},
    ]}]}]}

    document = parser.parse_text(json.dumps(data))

    element = document.steps[0].question_groups[0].elements[0]
    assert element.is_enabled is None
    assert element.model_extra == {"is_enabled": False}
    assert to_data(document) == data


def test_nodes_without_usual_fields_load(parser):
    """Missing tags, identifiers or titles are not load errors"""
    data = {"steps": [{"questionGroups": [{"elements": [{"title": "No id"}, {}]}]}]}

    document = parser.parse_text(json.dumps(data))

    assert to_data(document) == data
    assert len(parser.validator.get_results_by_severity(ValidationSeverity.WARNING)) == 1


def test_failed_load_keeps_previous_diagnostics(parser):
    """The collector always describes the last document that loaded"""
    parser.parse_text('''{"steps": [{"tag": "s", "questionGroups": []}, {"tag": "s", "questionGroups": []}]}''')
    previous = parser.validator

    with pytest.raises(SchemaShapeError):
        parser.parse_text('{"pages": []}')
    with pytest.raises(MalformedInputError):
        parser.parse_text('{"steps": [')

    assert parser.validator is previous
    assert len(parser.validator.results) == 1


def test_strict_failure_keeps_previous_diagnostics():
    parser = FormDocumentParser(validation_level=ValidationLevel.STRICT)
    # duplicate step tags are only a warning, even in strict mode
    parser.parse_text('''{"steps": [{"tag": "s", "questionGroups": []}, {"tag": "s", "questionGroups": []}]}''')
    text = '''{"steps": [{"tag": "s1", "questionGroups": [{"tag": "g1", "elements": [
        {"identifier": "a", "type": "textbox", "title": "A", "sortOrder": 1},
        {"identifier": "a", "type": "textbox", "title": "B", "sortOrder": 2}
    ]}]}]}'''

    with pytest.raises(SchemaShapeError):
        parser.parse_text(text)
    assert len(parser.validator.results) == 1
    assert parser.validator.results[0].field_name == "tag"
