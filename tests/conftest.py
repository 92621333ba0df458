from pathlib import Path

import pytest

from form_editor.business_rules.element_templates import ElementTemplates
from form_editor.core.identifiers import IdentifierGenerator
from form_editor.core.loader import FormDocumentParser
from form_editor.models.document import Document

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def checkout_text():
    """Raw JSON of a two-step checkout form with opaque and unknown fields"""
    return (TEST_DATA / "checkout_form.json").read_text(encoding="utf-8")


@pytest.fixture
def checkout_document(checkout_text):
    return FormDocumentParser().parse_text(checkout_text)


@pytest.fixture
def two_element_document():
    """One step s1, one group g1, two elements numbered 1 and 2"""
    return Document.model_validate({
        "steps": [{
            "tag": "s1",
            "title": "Step 1",
            "questionGroups": [{
                "tag": "g1",
                "title": "Group 1",
                "elements": [
                    {"identifier": "first", "type": "textbox", "title": "First", "sortOrder": 1},
                    {"identifier": "second", "type": "label", "title": "Second", "sortOrder": 2},
                ],
            }],
        }],
    })


@pytest.fixture
def identifiers():
    return IdentifierGenerator(seed=1000)


@pytest.fixture(scope="session")
def templates():
    """Registry with the packaged element templates"""
    return ElementTemplates()
