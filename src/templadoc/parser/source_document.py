"""
Editable Java source with transactional comment edits.

All edits go through a write transaction: they are collected while the
transaction is open and applied in one step when it closes, so a pass
that fails halfway leaves the text untouched.
"""

import logging
import re
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..errors import HostPreconditionError
from .java_parser import CommentNode, JavaParser, ParsedFile

logger = logging.getLogger(__name__)


@dataclass
class TextEdit:
    """Replace ``source[start:end]`` with ``text``"""
    start: int
    end: int
    text: str


class SourceDocument:
    """A Java source text plus its lazily parsed declaration tree"""

    def __init__(self, source_code: str, file_path: Optional[Path] = None,
                 parser: Optional[JavaParser] = None):
        self.file_path = file_path
        self.parser = parser or JavaParser()
        self._text = source_code
        self._parsed: Optional[ParsedFile] = None
        self._lock = threading.Lock()
        self._pending: Optional[List[TextEdit]] = None
        self.modified = False

    @classmethod
    def from_file(cls, file_path: Path, encoding: str = 'utf-8',
                  parser: Optional[JavaParser] = None) -> 'SourceDocument':
        with open(file_path, 'r', encoding=encoding) as f:
            return cls(f.read(), file_path, parser)

    @property
    def text(self) -> str:
        return self._text

    @property
    def parsed(self) -> ParsedFile:
        if self._parsed is None:
            self._parsed = self.parser.parse_source(self._text, self.file_path)
        return self._parsed

    @property
    def name(self) -> str:
        return self.file_path.name if self.file_path else '<source>'

    def require_parsed(self) -> ParsedFile:
        """The parse tree, or a hard failure when the text doesn't parse"""
        parsed = self.parsed
        if not parsed.is_parseable:
            raise HostPreconditionError(f"Can't parse {self.name}: {parsed.parse_errors[0]}")
        return parsed

    @contextmanager
    def write_transaction(self):
        """Exclusive write access; edits are applied only if the block succeeds"""
        if not self._lock.acquire(blocking=False):
            raise HostPreconditionError(f"A write transaction is already open on {self.name}")
        self._pending = []
        try:
            yield self
            self._apply(self._pending)
        finally:
            self._pending = None
            self._lock.release()

    def insert_comment_before(self, declaration, comment: str) -> bool:
        """Insert a comment before a declaration that doesn't already have one.

        The comment is indented like the declaration's first line. Returns
        False when the declaration is already documented.
        """
        edits = self._require_transaction()
        if declaration.doc_comment is not None:
            return False

        line_start = self._text.rfind('\n', 0, declaration.start) + 1
        prefix = self._text[line_start:declaration.start]

        if prefix.strip():
            # Declaration shares its line with something else
            indent = re.match(r'\s*', prefix).group(0)
            text = comment.replace('\n', '\n' + indent) + '\n' + indent
            edits.append(TextEdit(declaration.start, declaration.start, text))
        else:
            lines = [prefix + line for line in comment.split('\n')]
            edits.append(TextEdit(line_start, line_start, '\n'.join(lines) + '\n'))
        return True

    def replace_comment(self, comment_node: CommentNode, comment: str) -> None:
        """Replace a whole comment node with new comment text"""
        edits = self._require_transaction()
        edits.append(TextEdit(comment_node.start, comment_node.end, comment))

    def _require_transaction(self) -> List[TextEdit]:
        if self._pending is None:
            raise HostPreconditionError(f"Edits to {self.name} need an open write transaction")
        return self._pending

    def _apply(self, edits: List[TextEdit]) -> None:
        if not edits:
            return

        # Apply from the end so earlier offsets stay valid
        ordered = sorted(edits, key=lambda e: (e.start, e.end), reverse=True)
        text = self._text
        last_start = len(text) + 1
        for edit in ordered:
            if edit.end > last_start:
                raise HostPreconditionError(f"Overlapping edits in {self.name} at offset {edit.start}")
            text = text[:edit.start] + edit.text + text[edit.end:]
            last_start = edit.start

        logger.debug(f"Applied {len(edits)} edits to {self.name}")
        self._text = text
        self._parsed = None
        self.modified = True

    def save(self, output_path: Optional[Path] = None, encoding: str = 'utf-8') -> Path:
        target = output_path or self.file_path
        if target is None:
            raise HostPreconditionError("Document has no file path to save to")
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding=encoding) as f:
            f.write(self._text)
        return target
