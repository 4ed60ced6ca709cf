"""
Template resolution.

Turns a template and a declaration into Javadoc text. Each step only runs
when its tag is present; whatever can't be resolved is deleted together
with the markup that depends on it, so a rendered comment never contains
a known tag.
"""

import logging
import re
from typing import List, Optional, Tuple

from ..models.code_element import DeclarationKind, MethodRole
from .classifier import classify
from .matcher import CustomTemplateMatcher
from .store import TemplateItem, TemplateStore
from .tags import (
    Tag,
    LINK_TEMPLATE,
    delete_fragment,
    line_prefix,
    strip_markup,
    substitute,
    unresolved_tags,
)

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = {
    'boolean', 'byte', 'char', 'short', 'int', 'long', 'float', 'double'
}

OF_KEYWORD = " of "
AND_KEYWORD = " and "

RETURN_RE = re.compile(r"\breturn\b\s*([^;]*);")
THIS_ASSIGNMENT_RE = re.compile(r"\bthis\s*\.\s*(\w+)\s*=(?!=)")
ASSIGNMENT_RE = re.compile(r"(?<![\w.])(\w+)\s*=(?!=)")

LINKED_RETURN_TYPE = LINK_TEMPLATE.format(Tag.RETURN_TYPE.tag)


def is_primitive(type_text: str) -> bool:
    return type_text.replace("[]", "").strip() in PRIMITIVE_TYPES


def split_type(type_text: str) -> Tuple[str, List[str], str]:
    """Split ``Outer<A, B<C>>suffix`` into ``("Outer", ["A", "B<C>"], "suffix")``"""
    type_text = type_text.strip()
    open_index = type_text.find('<')
    if open_index < 0:
        return type_text, [], ""

    arguments = []
    depth = 0
    start = open_index + 1
    close_index = len(type_text) - 1
    for i in range(open_index, len(type_text)):
        char = type_text[i]
        if char == '<':
            depth += 1
        elif char == '>':
            depth -= 1
            if depth == 0:
                arguments.append(type_text[start:i].strip())
                close_index = i
                break
        elif char == ',' and depth == 1:
            arguments.append(type_text[start:i].strip())
            start = i + 1

    return (type_text[:open_index].strip(),
            [arg for arg in arguments if arg],
            type_text[close_index + 1:].strip())


def render_type(type_text: str, linked: bool) -> str:
    """Readable form of a type, e.g. ``Map of String and List of Integer``.

    With ``linked`` every named component is wrapped in ``{@link ...}``;
    wildcards and primitives never are.
    """
    outer, arguments, suffix = split_type(type_text)
    if not arguments:
        return _link(type_text, linked)

    rendered = [render_type(arg, linked) for arg in arguments]
    if len(rendered) == 1:
        joined = rendered[0]
    else:
        joined = ", ".join(rendered[:-1]) + AND_KEYWORD + rendered[-1]
    return _link(outer, linked) + suffix + OF_KEYWORD + joined


def _link(type_text: str, linked: bool) -> str:
    if not linked or type_text.startswith('?') or is_primitive(type_text):
        return type_text
    base = type_text.rstrip('[]')
    return LINK_TEMPLATE.format(base) + type_text[len(base):]


def _owner_name(method) -> Optional[str]:
    if method.owner is not None:
        return method.owner.name
    if method.is_constructor:
        return method.name
    return None


class TemplateResolver:
    """Render comments for declarations from the templates in a store"""

    def __init__(self, store: TemplateStore):
        self.store = store
        self.matcher = CustomTemplateMatcher(self)

    # Template selection

    def comment_for(self, declaration) -> Optional[str]:
        """Comment for a declaration using the configured templates, or None"""
        kind = declaration.kind
        if kind == DeclarationKind.CLASS:
            return self.resolve(self.store.class_template, declaration)
        if kind == DeclarationKind.FIELD:
            return self.resolve(self.store.field_template, declaration)
        if kind == DeclarationKind.CONSTRUCTOR:
            return self.resolve(self.store.constructor_template, declaration)
        return self.method_comment(declaration)

    def method_comment(self, method) -> Optional[str]:
        if not self.store.is_enabled(TemplateItem.METHODS):
            return None

        role = classify(method)
        if role == MethodRole.CUSTOM:
            return self.matcher.match(self.store.custom_templates(), method)
        return self.resolve_method(self.store.role_template(role), method, role)

    # Resolution

    def resolve(self, template: Optional[str], declaration) -> Optional[str]:
        """Render ``template`` for ``declaration``; None when there is no template"""
        if template is None:
            return None

        kind = declaration.kind
        if kind == DeclarationKind.CLASS:
            text = substitute(template, Tag.CLASS_NAME, declaration.name)
            text = substitute(text, Tag.INSTANCE, declaration.name)
        elif kind == DeclarationKind.FIELD:
            owner = declaration.owner.name if declaration.owner else declaration.name
            text = substitute(template, Tag.INSTANCE, declaration.name)
            text = substitute(text, Tag.CLASS_NAME, owner)
        elif kind == DeclarationKind.CONSTRUCTOR:
            text = substitute(template, Tag.CLASS_NAME, declaration.name)
            text = self._format_params(text, declaration)
        else:
            return self.resolve_method(template, declaration, classify(declaration))

        return self._finalize(text)

    def resolve_method(self, template: Optional[str], method, role: MethodRole) -> Optional[str]:
        if template is None:
            return None

        if method.owner is not None:
            template = substitute(template, Tag.CLASS_NAME, method.owner.name)

        if role == MethodRole.CONSTRUCTOR_LIKE:
            template = substitute(template, Tag.CLASS_NAME, method.name)
        elif role == MethodRole.MUTATOR:
            template = self._format_instance(template, self.setter_instance(method))
            template = self._format_return_type(template, method)
        else:
            instance = self.returned_expression(method)
            if instance is None:
                template = delete_fragment(template, Tag.RETURN_TYPE)
            template = self._format_instance(template, instance)
            template = self._format_return_type(template, method)

        return self._finalize(self._format_params(template, method))

    # Instance

    @staticmethod
    def returned_expression(method) -> Optional[str]:
        """Expression of the first ``return`` statement in the body"""
        if not method.body_text:
            return None
        match = RETURN_RE.search(method.body_text)
        if match is None:
            return None
        expression = re.sub(r"\s+", " ", match.group(1)).strip().rstrip(';').strip()
        if expression.startswith("this."):
            expression = expression[len("this."):]
        return expression or None

    @staticmethod
    def setter_instance(method) -> Optional[str]:
        """Field a setter assigns.

        ``this.<field> = ...`` wins; otherwise an assigned identifier or the
        name without ``set`` is looked up among the owner's fields, ignoring case.
        """
        body = method.body_text or ""
        match = THIS_ASSIGNMENT_RE.search(body)
        if match:
            return match.group(1)

        if method.owner is None:
            return None
        fields = {fld.name.lower(): fld.name for fld in method.owner.fields}
        parameters = set(method.parameter_names)

        for match in ASSIGNMENT_RE.finditer(body):
            target = match.group(1)
            if target not in parameters and target.lower() in fields:
                return fields[target.lower()]

        return fields.get(method.name[len("set"):].lower())

    def _format_instance(self, template: str, instance: Optional[str]) -> str:
        if not Tag.INSTANCE.present_in(template):
            return template
        if instance is None:
            logger.debug("Dropping <instance>: nothing to resolve it to")
            return delete_fragment(template, Tag.INSTANCE)
        return substitute(template, Tag.INSTANCE, instance)

    # Return type

    def _format_return_type(self, template: str, method) -> str:
        if not Tag.RETURN_TYPE.present_in(template):
            return template

        return_type = method.return_type
        if return_type == "void":
            return delete_fragment(template, Tag.RETURN_TYPE)

        linked = LINKED_RETURN_TYPE in template
        if linked:
            # The rendered type carries its own links
            template = template.replace(LINKED_RETURN_TYPE, Tag.RETURN_TYPE.tag)

        return substitute(template, Tag.RETURN_TYPE, render_type(return_type, linked))

    # Params

    def _format_params(self, template: str, method) -> str:
        if not Tag.PARAMS.present_in(template):
            return template
        if not method.parameters:
            return delete_fragment(template, Tag.PARAMS)

        prefix = line_prefix(template, Tag.PARAMS)
        continuation = prefix if prefix.strip() == "*" else " * "
        class_name = _owner_name(method)
        lines = [self.param_line(name, class_name) for name in method.parameter_names]
        return template.replace(Tag.PARAMS.tag, ("\n" + continuation).join(lines), 1)

    def param_line(self, name: str, class_name: Optional[str] = None) -> str:
        """``@param`` entry for a parameter, described by the Fields template"""
        description = self.field_description(name, class_name)
        if description:
            return f"@param {name}: {description}"
        return f"@param {name}:"

    def field_description(self, name: str, class_name: Optional[str] = None) -> str:
        """Plain text of the Fields template rendered for ``name``.

        ``<className>`` is the class owning the field; without one it is dropped.
        """
        template = self.store.field_template
        if template is None:
            return ""
        text = substitute(template, Tag.INSTANCE, name)
        if class_name is not None:
            text = substitute(text, Tag.CLASS_NAME, class_name)
        text = self._finalize(text)
        return strip_markup(text)

    def _finalize(self, text: str) -> str:
        for tag in unresolved_tags(text):
            logger.debug(f"Dropping unresolved {tag.tag}")
            text = delete_fragment(text, tag)
        return text
