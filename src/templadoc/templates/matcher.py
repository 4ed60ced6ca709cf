"""
Custom method templates.

A custom template is chosen by the predicate tags it carries: every
predicate must hold for the method, and the first template in stored order
that passes is used with its predicate lines removed.
"""

import logging
import re
from typing import Callable, Dict, Iterable, Optional

from ..models.code_element import MethodRole
from .store import CustomTemplateEntry
from .tags import Predicate, Tag, parse_predicates, strip_predicates

logger = logging.getLogger(__name__)


def _name_contains(predicate: Predicate, method, entry: CustomTemplateEntry) -> bool:
    substring = predicate.argument or entry.name
    return substring in method.name


def _return_type_is(predicate: Predicate, method, entry: CustomTemplateEntry) -> bool:
    if not predicate.argument:
        return False
    return re.sub(r"\s+", "", method.return_type) == predicate.argument


def _has_params(predicate: Predicate, method, entry: CustomTemplateEntry) -> bool:
    names = [token for token in predicate.raw_argument.replace(" ", "").split(",") if token]
    if not names:
        return False
    rendered = method.rendered_parameters
    return all(name in rendered for name in names)


PREDICATE_CHECKS: Dict[Tag, Callable[[Predicate, object, CustomTemplateEntry], bool]] = {
    Tag.NAME_CONTAINS: _name_contains,
    Tag.RETURN_TYPE_IS: _return_type_is,
    Tag.HAS_P: _has_params,
}


class CustomTemplateMatcher:
    """Pick and render the first custom template whose predicates all pass"""

    def __init__(self, resolver):
        self.resolver = resolver

    def applies(self, entry: CustomTemplateEntry, method) -> bool:
        for predicate in parse_predicates(entry.template):
            if not PREDICATE_CHECKS[predicate.tag](predicate, method, entry):
                return False
        return True

    def select(self, custom_templates: Iterable[CustomTemplateEntry], method) -> Optional[CustomTemplateEntry]:
        for entry in custom_templates:
            if self.applies(entry, method):
                return entry
        return None

    def match(self, custom_templates: Iterable[CustomTemplateEntry], method) -> Optional[str]:
        """Comment for ``method`` from the first applicable template, or None"""
        entry = self.select(custom_templates, method)
        if entry is None:
            logger.debug(f"No custom template applies to {method.name}()")
            return None

        logger.debug(f"Using custom template '{entry.name}' for {method.name}()")
        return self.resolver.resolve_method(strip_predicates(entry.template), method, MethodRole.CUSTOM)
