from .java_parser import JavaParser, ParsedFile, ParsedClass, ParsedMethod, ParsedField, CommentNode
from .source_document import SourceDocument, TextEdit

__all__ = [
    "JavaParser",
    "ParsedFile",
    "ParsedClass",
    "ParsedMethod",
    "ParsedField",
    "CommentNode",
    "SourceDocument",
    "TextEdit",
]
