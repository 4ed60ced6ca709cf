"""
Template-driven comment generation

Plans a comment for every undocumented declaration of a file, renders
them all from the configured templates, then inserts them in a single
write transaction.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..parser.java_parser import ParsedClass
from ..parser.source_document import SourceDocument
from ..templates.resolver import TemplateResolver
from ..templates.store import TemplateItem, TemplateStore

logger = logging.getLogger(__name__)


@dataclass
class CommentTask:
    """A rendered comment waiting to be inserted"""
    element_type: str  # "class", "field", "constructor", "method"
    name: str
    declaration: object
    comment: str


class CommentGenerator:
    """Apply documentation templates to Java sources"""

    def __init__(self, store: TemplateStore, resolver: Optional[TemplateResolver] = None):
        self.store = store
        self.resolver = resolver or TemplateResolver(store)

    def add_comments(self, document: SourceDocument) -> int:
        """
        Add template comments to a document.

        This is the main entry point - it:
        1. Walks every class and finds undocumented declarations
        2. Renders all comments before touching the text
        3. Inserts them in one write transaction

        Returns the number of comments inserted.
        """
        parsed = document.require_parsed()

        tasks = []
        for cls in parsed.classes:
            tasks.extend(self._plan_comments(cls))

        if not tasks:
            logger.debug(f"No comments needed for {document.name}")
            return 0

        inserted = 0
        with document.write_transaction():
            for task in tasks:
                if document.insert_comment_before(task.declaration, task.comment):
                    inserted += 1

        logger.debug(f"Inserted {inserted} comments into {document.name}")
        return inserted

    def _plan_comments(self, cls: ParsedClass) -> List[CommentTask]:
        """Figure out what comments we need for a class and its nested classes"""
        tasks = []

        if self.store.is_enabled(TemplateItem.CLASSES) and not cls.has_javadoc:
            self._add_task(tasks, "class", cls)

        if self.store.is_enabled(TemplateItem.FIELDS):
            seen_starts = set()
            for fld in cls.fields:
                # "int a, b;" is one declaration
                if fld.has_javadoc or fld.start in seen_starts:
                    continue
                seen_starts.add(fld.start)
                self._add_task(tasks, "field", fld)

        if self.store.is_enabled(TemplateItem.CONSTRUCTORS):
            for constructor in cls.constructors:
                if not constructor.has_javadoc:
                    self._add_task(tasks, "constructor", constructor)

        if self.store.is_enabled(TemplateItem.METHODS):
            for method in cls.regular_methods:
                if not method.has_javadoc:
                    self._add_task(tasks, "method", method)

        for inner in cls.inner_classes:
            tasks.extend(self._plan_comments(inner))

        return tasks

    def _add_task(self, tasks: List[CommentTask], element_type: str, declaration) -> None:
        comment = self.resolver.comment_for(declaration)
        if comment is None:
            logger.debug(f"No template applies to {element_type} {declaration.name}")
            return
        tasks.append(CommentTask(element_type, declaration.name, declaration, comment))
