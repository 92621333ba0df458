"""
Module for constructing new elements of a given type.

Most element types start out empty: a generic element titled ``New <type>``.
A few composite types (e.g. ``deliveryOptions``) only make sense with their
choices filled in, so they are built from canned templates. The templates are
loaded from a JSON configuration file, keyed by type tag.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Set, Union

from pydantic import ValidationError

from form_editor.models.document import Element

logger = logging.getLogger(__name__)

# (type_tag, identifier, sort_order) -> Element
ElementFactory = Callable[[str, str, int], Element]


def generic_element(type_tag: str, identifier: str, sort_order: int) -> Element:
    """Build an empty element of any type"""
    return Element.model_validate({
        "identifier": identifier,
        "type": type_tag,
        "title": f"New {type_tag}",
        "sortOrder": sort_order,
        "elementItems": [],
        "validations": {},
        "attributes": {},
        "dependency": [],
    })


class TemplateFactory:
    """Builds elements by cloning a canned template.

    The template is a JSON object in the document's own format. The identifier,
    type and sortOrder of the template (if any) are always overwritten.
    """

    def __init__(self, template: Dict[str, Any]):
        self.template = template

    def __call__(self, type_tag: str, identifier: str, sort_order: int) -> Element:
        data = copy.deepcopy(self.template)
        data.setdefault("title", f"New {type_tag}")
        data.update(identifier=identifier, type=type_tag, sortOrder=sort_order)
        return Element.model_validate(data)


class ElementTemplates:
    """Registry mapping element type tags to element factories.

    Types without a registered factory fall back to `generic_element`.
    """

    def __init__(self, config_path: Union[str, Path, None] = None):
        """Initialize the registry.

        Args:
            config_path: Path to a templates JSON file. If None, the
                        element_templates.json shipped with this module is used.
        """
        self._factories: Dict[str, ElementFactory] = {}

        if config_path is None:
            self.config_path = Path(__file__).parent / "element_templates.json"
        else:
            self.config_path = Path(config_path)

        self._load_config()

    def _load_config(self) -> None:
        """Register a TemplateFactory for every template in the config file."""
        if not self.config_path.exists():
            logger.info("No element templates at %s, only generic elements available", self.config_path)
            return

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Error loading element templates from %s: %s", self.config_path, e)
            return
        if not isinstance(config, dict):
            logger.error("Element templates in %s must be an object keyed by type tag", self.config_path)
            return

        for type_tag, template in config.items():
            if not isinstance(template, dict):
                logger.warning("Ignoring template '%s': expected an object", type_tag)
                continue
            factory = TemplateFactory(template)
            try:
                factory(type_tag, f"{type_tag}_template", 1)
            except ValidationError as e:
                logger.warning("Ignoring template '%s': %s", type_tag, e.errors()[0]["msg"])
                continue
            self.register(type_tag, factory)

    def register(self, type_tag: str, factory: ElementFactory) -> None:
        """Register (or replace) the factory used for `type_tag`"""
        self._factories[type_tag] = factory

    def is_composite(self, type_tag: str) -> bool:
        return type_tag in self._factories

    def get_composite_types(self) -> Set[str]:
        """Get all type tags that have a dedicated factory"""
        return set(self._factories)

    def build(self, type_tag: str, identifier: str, sort_order: int) -> Element:
        """Construct a new element of type `type_tag`"""
        factory: Optional[ElementFactory] = self._factories.get(type_tag)
        if factory is None:
            return generic_element(type_tag, identifier, sort_order)
        logger.debug("Building '%s' element from template", type_tag)
        return factory(type_tag, identifier, sort_order)
