"""
Template tag grammar.

Templates are plain Javadoc text with tags written as ``<name>``.
Substitution tags are replaced with text computed from a declaration.
Predicate tags take an argument running to the end of their line and only
decide whether a custom template applies; they never reach the output.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List


class Tag(Enum):
    """Every tag a template may contain"""
    CLASS_NAME = "className"
    INSTANCE = "instance"
    PARAMS = "params"
    RETURN_TYPE = "returnType"
    HAS_P = "hasP"
    RETURN_TYPE_IS = "returnTypeIs"
    NAME_CONTAINS = "nameContains"

    @property
    def tag(self) -> str:
        return f"<{self.value}>"

    @property
    def is_predicate(self) -> bool:
        return self in PREDICATE_TAGS

    def present_in(self, template: str) -> bool:
        return self.tag in template


PREDICATE_TAGS = (Tag.HAS_P, Tag.RETURN_TYPE_IS, Tag.NAME_CONTAINS)

PREDICATE_RE = re.compile(
    r"<(" + "|".join(tag.value for tag in PREDICATE_TAGS) + r")>([^\n]*)"
)

# A line opening with a block tag such as "@return"
BLOCK_TAG_LINE_RE = re.compile(r"^[ \t]*(?:/\*\*)?[ \t]*\*?[ \t]*@\w+")

LINK_TEMPLATE = "{{@link {}}}"


@dataclass(frozen=True)
class Predicate:
    """A predicate tag parsed out of a template"""
    tag: Tag
    argument: str
    raw_argument: str


def parse_predicates(template: str) -> List[Predicate]:
    """Predicate tags of a template in the order they are written"""
    return [
        Predicate(
            tag=Tag(match.group(1)),
            argument=re.sub(r"\s+", "", match.group(2)),
            raw_argument=match.group(2)
        )
        for match in PREDICATE_RE.finditer(template)
    ]


def strip_predicates(template: str) -> str:
    """Remove predicate tags with their arguments.

    A line left with nothing but comment markup is dropped entirely.
    """
    lines = []
    for line in template.split('\n'):
        match = PREDICATE_RE.search(line)
        if match is None:
            lines.append(line)
            continue
        head = line[:match.start()]
        if head.strip(' \t*'):
            lines.append(head.rstrip())
    return '\n'.join(lines)


def substitute(template: str, tag: Tag, value: str) -> str:
    return template.replace(tag.tag, value)


def delete_fragment(template: str, tag: Tag) -> str:
    """Delete an unresolvable tag together with the markup depending on it.

    Block-tag lines (``@return <instance>``) go entirely; elsewhere the tag and
    an inline reference wrapping it (``{@link #<instance>}``) are removed, and
    a line left with nothing but comment markup is dropped.
    """
    if tag.is_predicate:
        return strip_predicates(template)

    inline_ref = re.compile(r"\{@\w+[ \t]+#?" + re.escape(tag.tag) + r"[ \t]*\}")
    lines = []
    for line in template.split('\n'):
        if tag.tag not in line:
            lines.append(line)
            continue
        if BLOCK_TAG_LINE_RE.match(line):
            continue
        line = inline_ref.sub("", line).replace(tag.tag, "")
        if not line.strip(' \t*'):
            continue
        lines.append(re.sub(r"(?<=\S)[ \t]{2,}", " ", line).rstrip())
    return '\n'.join(lines)


def line_prefix(template: str, tag: Tag) -> str:
    """Text between the start of the tag's line and the tag"""
    index = template.find(tag.tag)
    if index < 0:
        return ""
    return template[template.rfind('\n', 0, index) + 1:index]


def strip_markup(comment: str) -> str:
    """Plain text of a Javadoc comment.

    Drops the ``/**`` and ``*/`` delimiters and leading ``*`` of each line and
    joins the remaining lines with single spaces. Inline tags like
    ``{@code x}`` are kept.
    """
    text = comment.strip()
    if text.startswith('/**'):
        text = text[3:]
    elif text.startswith('/*'):
        text = text[2:]
    if text.endswith('*/'):
        text = text[:-2]

    parts = []
    for line in text.split('\n'):
        line = re.sub(r"^\s*\*+(?!/)", "", line).strip()
        if line:
            parts.append(line)
    return ' '.join(parts)


def unresolved_tags(text: str) -> List[Tag]:
    return [tag for tag in Tag if tag.present_in(text)]
