"""
Field to @param synchronization.

Constructor and setter comments repeat the documentation of the fields
their parameters come from. When a field comment is edited, the
synchronizer rewrites the matching ``@param <field>: ...`` fragments:

1. field descriptions of the container are compared with the snapshot
   taken at the end of the previous pass;
2. changed descriptions are substituted into the container text, with
   ``{``, ``}`` and ``*`` encoded as placeholder tokens while patterns are
   built and applied;
3. the rewritten text is parsed again and each constructor/setter is
   matched to its live counterpart by body text, since the two parses
   share no identity;
4. live comments that differ are replaced in a single write transaction.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..errors import HostPreconditionError
from ..models.code_element import MethodRole
from ..parser.java_parser import CommentNode, JavaParser, ParsedClass, ParsedMethod
from ..parser.source_document import SourceDocument
from ..templates.classifier import classify
from ..templates.tags import strip_markup

logger = logging.getLogger(__name__)

# Markup characters and the placeholder tokens standing in for them
MARKUP_PLACEHOLDERS = (
    ("{", "\x00OCBR\x00"),
    ("}", "\x00CCBR\x00"),
    ("*", "\x00STRX\x00"),
)

STAR_TOKEN = dict(MARKUP_PLACEHOLDERS)["*"]

# Roles whose comments carry @param entries derived from fields
PARAM_DERIVED_ROLES = (MethodRole.CONSTRUCTOR_LIKE, MethodRole.MUTATOR)

ContainerId = Tuple[str, str]
FieldKey = Tuple[str, str]


def encode_markup(text: str) -> str:
    for char, token in MARKUP_PLACEHOLDERS:
        text = text.replace(char, token)
    return text


def decode_markup(text: str) -> str:
    for char, token in MARKUP_PLACEHOLDERS:
        text = text.replace(token, char)
    return text


def normalize_body(body: str) -> str:
    return re.sub(r"\s+", " ", body).strip()


def _param_pattern(field_name: str, encoded_description: Optional[str]) -> 're.Pattern':
    """Pattern for ``* @param <field>: <description>`` lines of encoded text"""
    if encoded_description is None:
        description = r"(?P<description>[^\n]*?)"
    else:
        description = re.escape(encoded_description)
    return re.compile(
        r"^(?P<lead>[ \t]*(?:" + re.escape(STAR_TOKEN) + r"[ \t]*)?@param[ \t]+"
        + re.escape(field_name) + r":)[ \t]*" + description + r"[ \t]*$",
        re.MULTILINE
    )


class SyncState(Enum):
    UNINITIALIZED = "uninitialized"
    TRACKING = "tracking"


@dataclass
class FieldChange:
    field_name: str
    old_description: Optional[str]
    new_description: str


@dataclass
class SyncResult:
    """Outcome of one synchronization pass"""
    container: Optional[str] = None
    changes: List[FieldChange] = field(default_factory=list)
    rewritten_comments: int = 0

    @property
    def changed(self) -> bool:
        return self.rewritten_comments > 0


class FieldParamSynchronizer:
    """Keeps @param entries of constructors and setters in step with field comments.

    Owns the snapshot of field descriptions for the container it is
    tracking. Observing a different container resets the snapshot.
    """

    def __init__(self, parser: Optional[JavaParser] = None):
        self.parser = parser or JavaParser()
        self._container_id: Optional[ContainerId] = None
        self._snapshot: Dict[FieldKey, str] = {}

    @property
    def state(self) -> SyncState:
        return SyncState.UNINITIALIZED if self._container_id is None else SyncState.TRACKING

    @property
    def snapshot(self) -> Dict[FieldKey, str]:
        return dict(self._snapshot)

    def reset(self) -> None:
        self._container_id = None
        self._snapshot = {}

    def on_document_changed(self, document: SourceDocument) -> SyncResult:
        """Run one pass over the document's main class"""
        parsed = document.require_parsed()
        container = parsed.main_class
        if container is None:
            raise HostPreconditionError(f"No class found in {document.name}")

        container_id = (str(document.file_path or document.name), container.qualified_name)
        if container_id != self._container_id:
            logger.debug(f"Tracking {container.qualified_name} in {document.name}")
            self.reset()
            self._container_id = container_id

        current = self.field_descriptions(container)
        result = SyncResult(container=container.qualified_name)
        if set(current.items()) == set(self._snapshot.items()):
            return result

        container_text = document.text[container.start:container.end]
        result.changes = self._changes(current, container_text)
        rewritten = self.rewrite_params(container_text, result.changes)

        if rewritten != container_text:
            source = document.text[:container.start] + rewritten + document.text[container.end:]
            replacements = self._replacements(container, source, document.file_path)
            if replacements:
                with document.write_transaction():
                    for node, text in replacements:
                        document.replace_comment(node, text)
                result.rewritten_comments = len(replacements)
                logger.info(f"Updated {len(replacements)} @param comments in {document.name}")

        self._snapshot = current
        return result

    @staticmethod
    def field_descriptions(container: ParsedClass) -> Dict[FieldKey, str]:
        """Plain-text field documentation of a class and its nested classes"""
        descriptions = {}
        for cls in container.walk():
            for fld in cls.fields:
                if fld.doc_comment is not None:
                    descriptions[(cls.qualified_name, fld.name)] = strip_markup(fld.doc_comment.text)
        return descriptions

    def _changes(self, current: Dict[FieldKey, str], container_text: str) -> List[FieldChange]:
        changes = []
        for key, description in current.items():
            old = self._snapshot.get(key)
            if not description or old == description:
                continue
            field_name = key[1]
            if old is None:
                old = self.first_param_description(container_text, field_name)
            if old is not None and old != description:
                changes.append(FieldChange(field_name, old, description))
        return changes

    @staticmethod
    def first_param_description(text: str, field_name: str) -> Optional[str]:
        """Description of the first ``@param <field>:`` fragment in ``text``"""
        match = _param_pattern(field_name, None).search(encode_markup(text))
        if match is None:
            return None
        return decode_markup(match.group('description')).strip()

    @staticmethod
    def rewrite_params(text: str, changes: List[FieldChange]) -> str:
        """Replace ``@param <field>: <old>`` with ``@param <field>: <new>`` for each change"""
        encoded = encode_markup(text)
        for change in changes:
            if change.old_description is None:
                continue
            pattern = _param_pattern(change.field_name, encode_markup(change.old_description))
            replacement = encode_markup(change.new_description)
            encoded = pattern.sub(
                lambda m: m.group('lead') + (" " + replacement if replacement else ""),
                encoded
            )
        return decode_markup(encoded)

    def _replacements(self, container: ParsedClass, source: str,
                      file_path: Optional[Path]) -> List[Tuple[CommentNode, str]]:
        """Live comment nodes paired with their rewritten text"""
        rewritten_file = self.parser.parse_source(source, file_path)
        if not rewritten_file.is_parseable:
            raise HostPreconditionError(
                f"Rewritten {container.qualified_name} doesn't parse: {rewritten_file.parse_errors[0]}"
            )

        rewritten_container = None
        for cls in rewritten_file.walk():
            if cls.qualified_name == container.qualified_name:
                rewritten_container = cls
                break
        if rewritten_container is None:
            return []

        candidates = [m for m in self._param_derived(rewritten_container) if m.doc_comment is not None]
        replacements = []
        for method in self._param_derived(container):
            if method.doc_comment is None:
                continue
            body = normalize_body(method.body_text)
            role = classify(method)
            for candidate in candidates:
                if classify(candidate) == role and normalize_body(candidate.body_text) == body:
                    if candidate.doc_comment.text != method.doc_comment.text:
                        replacements.append((method.doc_comment, candidate.doc_comment.text))
                    break
        return replacements

    @staticmethod
    def _param_derived(container: ParsedClass) -> List[ParsedMethod]:
        return [
            method
            for cls in container.walk()
            for method in cls.methods
            if method.body_text is not None and classify(method) in PARAM_DERIVED_ROLES
        ]
