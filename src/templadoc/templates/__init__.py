from .tags import Tag, Predicate, parse_predicates, strip_markup
from .classifier import classify
from .store import TemplateStore, TemplateItem, CustomTemplateEntry, DEFAULT_TEMPLATE
from .matcher import CustomTemplateMatcher
from .resolver import TemplateResolver, render_type

__all__ = [
    "Tag",
    "Predicate",
    "parse_predicates",
    "strip_markup",
    "classify",
    "TemplateStore",
    "TemplateItem",
    "CustomTemplateEntry",
    "DEFAULT_TEMPLATE",
    "CustomTemplateMatcher",
    "TemplateResolver",
    "render_type",
]
