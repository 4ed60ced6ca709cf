import logging
import re
from pathlib import Path
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import javalang

from ..models.code_element import DeclarationKind

logger = logging.getLogger(__name__)

# Type declarations we document; annotation types are skipped
TYPE_DECLARATIONS = (
    javalang.tree.ClassDeclaration,
    javalang.tree.InterfaceDeclaration,
    javalang.tree.EnumDeclaration,
)

OPENING = {'(': ')', '{': '}', '[': ']'}
CLOSING = {v: k for k, v in OPENING.items()}


@dataclass
class CommentNode:
    """A doc comment and its span in the source text"""
    start: int
    end: int
    text: str


@dataclass
class ParsedField:
    """A field in a Java class"""
    name: str
    type: str
    start: int = 0
    line_number: int = 0
    doc_comment: Optional[CommentNode] = None
    owner: Optional['ParsedClass'] = field(default=None, repr=False, compare=False)

    kind = DeclarationKind.FIELD

    @property
    def has_javadoc(self) -> bool:
        return self.doc_comment is not None


@dataclass
class ParsedMethod:
    """A method or constructor in a Java class"""
    name: str
    return_type: str
    parameters: List[Tuple[str, str]] = field(default_factory=list)  # (type, name) pairs
    is_constructor: bool = False
    body_text: Optional[str] = None
    start: int = 0
    line_number: int = 0
    doc_comment: Optional[CommentNode] = None
    owner: Optional['ParsedClass'] = field(default=None, repr=False, compare=False)

    @property
    def kind(self) -> DeclarationKind:
        return DeclarationKind.CONSTRUCTOR if self.is_constructor else DeclarationKind.METHOD

    @property
    def has_javadoc(self) -> bool:
        return self.doc_comment is not None

    @property
    def parameter_names(self) -> List[str]:
        return [name for _, name in self.parameters]

    @property
    def rendered_parameters(self) -> str:
        """Parameter list as written in a signature, e.g. ``String name, int count``"""
        return ", ".join(f"{ptype} {pname}" for ptype, pname in self.parameters)


@dataclass
class ParsedClass:
    """A Java class, interface, or enum"""
    name: str
    type: str  # "class", "interface", "enum"
    fields: List[ParsedField] = field(default_factory=list)
    methods: List[ParsedMethod] = field(default_factory=list)
    inner_classes: List['ParsedClass'] = field(default_factory=list)
    visibility: str = "package"
    start: int = 0
    end: int = 0
    line_number: int = 0
    doc_comment: Optional[CommentNode] = None
    owner: Optional['ParsedClass'] = field(default=None, repr=False, compare=False)

    kind = DeclarationKind.CLASS

    @property
    def has_javadoc(self) -> bool:
        return self.doc_comment is not None

    @property
    def qualified_name(self) -> str:
        if self.owner:
            return f"{self.owner.qualified_name}.{self.name}"
        return self.name

    @property
    def constructors(self) -> List[ParsedMethod]:
        return [m for m in self.methods if m.is_constructor]

    @property
    def regular_methods(self) -> List[ParsedMethod]:
        return [m for m in self.methods if not m.is_constructor]

    def walk(self) -> Iterator['ParsedClass']:
        """Yield this class and every nested class, depth first"""
        yield self
        for inner in self.inner_classes:
            yield from inner.walk()


@dataclass
class ParsedFile:
    """A parsed Java source file"""
    file_path: Optional[Path] = None
    package: str = ""
    imports: List[str] = field(default_factory=list)
    classes: List[ParsedClass] = field(default_factory=list)
    source_code: str = ""
    parse_errors: List[str] = field(default_factory=list)

    @property
    def main_class(self) -> Optional[ParsedClass]:
        """Try to find the main class (usually matches filename)"""
        if self.file_path is not None:
            filename = self.file_path.stem
            for cls in self.classes:
                if cls.name == filename:
                    return cls

        # Return first public class
        for cls in self.classes:
            if cls.visibility == "public":
                return cls

        # Just return first class if any
        return self.classes[0] if self.classes else None

    @property
    def is_parseable(self) -> bool:
        """Check if the file was parsed successfully"""
        return len(self.parse_errors) == 0

    def walk(self) -> Iterator[ParsedClass]:
        for cls in self.classes:
            yield from cls.walk()


class _TokenStream:
    """javalang tokens paired with their character offsets in the source.

    javalang drops comments and only reports line/column positions, so
    offsets are recovered by locating each token value at or after the
    start of its line.
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens = list(javalang.tokenizer.tokenize(source))
        self.line_starts = [0] + [m.end() for m in re.finditer('\n', source)]
        self.offsets = []

        cursor = 0
        for token in self.tokens:
            line = token.position[0] if token.position else 1
            line = min(max(line, 1), len(self.line_starts))
            offset = source.find(token.value, max(cursor, self.line_starts[line - 1]))
            if offset < 0:
                offset = source.find(token.value, cursor)
            if offset < 0:
                offset = cursor
            self.offsets.append(offset)
            cursor = offset + len(token.value)

    def __len__(self):
        return len(self.tokens)

    def value(self, i: int) -> str:
        return self.tokens[i].value if 0 <= i < len(self.tokens) else ""

    def is_identifier(self, i: int, name: str) -> bool:
        return (0 <= i < len(self.tokens)
                and isinstance(self.tokens[i], javalang.tokenizer.Identifier)
                and self.tokens[i].value == name)

    def end_offset(self, i: int) -> int:
        return self.offsets[i] + len(self.tokens[i].value)

    def line_of(self, i: int) -> int:
        return self.tokens[i].position[0] if self.tokens[i].position else 0

    def match(self, i: int) -> int:
        """Index of the bracket closing the one opened at ``i``"""
        depth = 0
        for j in range(i, len(self.tokens)):
            value = self.tokens[j].value
            if value in OPENING:
                depth += 1
            elif value in CLOSING:
                depth -= 1
                if depth == 0:
                    return j
        return len(self.tokens) - 1

    def match_backwards(self, i: int) -> int:
        """Index of the bracket opening the one closed at ``i``"""
        depth = 0
        for j in range(i, -1, -1):
            value = self.tokens[j].value
            if value in CLOSING:
                depth += 1
            elif value in OPENING:
                depth -= 1
                if depth == 0:
                    return j
        return 0

    def find(self, start: int, predicate) -> Optional[int]:
        """First index from ``start`` matching ``predicate`` inside the current body.

        Brace groups (method bodies, initializer blocks) are skipped; hitting
        the brace that closes the enclosing body ends the search.
        """
        i = start
        while i < len(self.tokens):
            value = self.tokens[i].value
            if value == '{' and not predicate(i):
                i = self.match(i) + 1
                continue
            if value == '}':
                return None
            if predicate(i):
                return i
            i += 1
        return None

    def find_at_depth(self, start: int, values) -> Optional[int]:
        """First token in ``values`` at bracket depth zero, from ``start``"""
        i = start
        while i < len(self.tokens):
            value = self.tokens[i].value
            if value in values:
                return i
            if value in OPENING:
                i = self.match(i) + 1
                continue
            if value in CLOSING:
                return None
            i += 1
        return None

    def declaration_start(self, name_index: int, floor: int) -> int:
        """Index of the first token (annotation or modifier) of a declaration"""
        j = name_index - 1
        while j > floor:
            value = self.tokens[j].value
            if value in (';', '{', '}'):
                break
            if value == ')':
                j = self.match_backwards(j)
            j -= 1
        return j + 1

    def doc_comment_before(self, token_index: int, floor: int) -> Optional[CommentNode]:
        """The ``/** ... */`` comment directly preceding a token, if any"""
        end = self.offsets[token_index]
        while end > 0 and self.source[end - 1].isspace():
            end -= 1
        if not self.source.startswith('*/', end - 2):
            return None
        start = self.source.rfind('/**', 0, end - 2)
        if start < 0 or self.source.find('*/', start + 2) != end - 2:
            return None
        if floor >= 0 and start < self.end_offset(floor):
            return None
        return CommentNode(start=start, end=end, text=self.source[start:end])


class JavaParser:
    """Java source model built on javalang.

    The parse tree gives names, types and parameters; the token stream gives
    the spans needed to read bodies and existing comments and to insert or
    replace comments.
    """

    def __init__(self, encoding: str = 'utf-8'):
        self.encoding = encoding

    def parse_file(self, file_path: Path) -> ParsedFile:
        """
        Parse a single Java file.

        Returns a ParsedFile even if parsing fails - the caller can
        check is_parseable to see if it worked.
        """
        with open(file_path, 'r', encoding=self.encoding) as f:
            source_code = f.read()
        return self.parse_source(source_code, file_path)

    def parse_source(self, source_code: str, file_path: Optional[Path] = None) -> ParsedFile:
        try:
            tree = javalang.parse.parse(source_code)
            tokens = _TokenStream(source_code)
        except (javalang.parser.JavaSyntaxError, javalang.tokenizer.LexerError) as e:
            name = file_path.name if file_path else '<source>'
            logger.debug(f"Parse failed for {name}: {e!r}")
            return ParsedFile(
                file_path=file_path,
                source_code=source_code,
                parse_errors=[str(e) or type(e).__name__]
            )

        parsed_file = ParsedFile(
            file_path=file_path,
            package=tree.package.name if tree.package else "",
            imports=self._extract_imports(tree),
            source_code=source_code
        )

        cursor = 0
        for node in tree.types:
            if not isinstance(node, TYPE_DECLARATIONS):
                continue
            parsed_class, cursor = self._parse_class_node(node, tokens, cursor, -1)
            if parsed_class:
                parsed_file.classes.append(parsed_class)

        return parsed_file

    def _extract_imports(self, tree) -> List[str]:
        imports = []
        for imp in tree.imports:
            import_str = imp.path
            if imp.static:
                import_str = f"static {import_str}"
            if imp.wildcard:
                import_str += ".*"
            imports.append(import_str)
        return imports

    def _parse_class_node(self, node, tokens: _TokenStream, cursor: int, floor: int,
                          owner: Optional[ParsedClass] = None):
        """Parse a class/interface/enum node; returns the class and the next cursor"""
        keyword = type(node).__name__.replace('Declaration', '').lower()

        name_index = tokens.find(
            cursor,
            lambda i: tokens.value(i - 1) == keyword and tokens.is_identifier(i, node.name)
        )
        if name_index is None:
            logger.debug(f"Couldn't locate declaration of {node.name}")
            return None, cursor

        open_index = tokens.find_at_depth(name_index, ('{',))
        if open_index is None:
            return None, cursor
        close_index = tokens.match(open_index)
        start_index = tokens.declaration_start(name_index, floor)

        parsed_class = ParsedClass(
            name=node.name,
            type=keyword,
            visibility=self._get_visibility(node.modifiers),
            start=tokens.offsets[start_index],
            end=tokens.end_offset(close_index),
            line_number=tokens.line_of(start_index),
            doc_comment=tokens.doc_comment_before(start_index, floor),
            owner=owner
        )

        members = node.body
        body_cursor = open_index + 1
        if isinstance(node, javalang.tree.EnumDeclaration):
            members = node.body.declarations if node.body else []
            semicolon = tokens.find_at_depth(body_cursor, (';',))
            if semicolon is None:
                members = []
            else:
                body_cursor = semicolon + 1

        for member in members or []:
            body_cursor = self._parse_member(member, tokens, body_cursor, open_index, parsed_class)

        return parsed_class, close_index + 1

    def _parse_member(self, member, tokens: _TokenStream, cursor: int, open_index: int,
                      parsed_class: ParsedClass) -> int:
        floor = max(cursor - 1, open_index)

        if isinstance(member, TYPE_DECLARATIONS):
            inner, next_cursor = self._parse_class_node(member, tokens, cursor, floor, parsed_class)
            if inner:
                parsed_class.inner_classes.append(inner)
            return next_cursor

        if isinstance(member, javalang.tree.FieldDeclaration):
            return self._parse_field_declaration(member, tokens, cursor, floor, parsed_class)

        if isinstance(member, (javalang.tree.MethodDeclaration, javalang.tree.ConstructorDeclaration)):
            return self._parse_method_declaration(member, tokens, cursor, floor, parsed_class)

        return cursor

    def _parse_field_declaration(self, field_decl, tokens: _TokenStream, cursor: int, floor: int,
                                 parsed_class: ParsedClass) -> int:
        """Parse field declarations (can declare multiple fields)"""
        declarators = [d for d in field_decl.declarators if hasattr(d, 'name')]
        if not declarators:
            return cursor

        first = declarators[0].name
        name_index = tokens.find(
            cursor,
            lambda i: tokens.is_identifier(i, first) and tokens.value(i + 1) in ('=', ';', ',', '[')
        )
        if name_index is None:
            logger.debug(f"Couldn't locate field {first} in {parsed_class.name}")
            return cursor

        start_index = tokens.declaration_start(name_index, floor)
        comment = tokens.doc_comment_before(start_index, floor)
        field_type = self._get_type_name(field_decl.type)

        for declarator in declarators:
            parsed_class.fields.append(ParsedField(
                name=declarator.name,
                type=field_type,
                start=tokens.offsets[start_index],
                line_number=tokens.line_of(start_index),
                doc_comment=comment,
                owner=parsed_class
            ))

        end_index = tokens.find_at_depth(name_index, (';',))
        return end_index + 1 if end_index is not None else name_index + 1

    def _parse_method_declaration(self, method_decl, tokens: _TokenStream, cursor: int, floor: int,
                                  parsed_class: ParsedClass) -> int:
        name = method_decl.name
        name_index = tokens.find(
            cursor,
            lambda i: tokens.is_identifier(i, name) and tokens.value(i + 1) == '('
        )
        if name_index is None:
            logger.debug(f"Couldn't locate method {name} in {parsed_class.name}")
            return cursor

        is_constructor = isinstance(method_decl, javalang.tree.ConstructorDeclaration)
        return_type = "void" if is_constructor else self._get_type_name(method_decl.return_type)

        parameters = []
        for param in method_decl.parameters or []:
            param_type = self._get_type_name(param.type)
            if getattr(param, 'varargs', False):
                param_type += "..."
            parameters.append((param_type, param.name))

        close_paren = tokens.match(name_index + 1)
        body_open = tokens.find_at_depth(close_paren + 1, ('{', ';'))

        body_text = None
        next_cursor = close_paren + 1
        if body_open is not None:
            if tokens.value(body_open) == '{':
                body_close = tokens.match(body_open)
                body_text = tokens.source[tokens.offsets[body_open]:tokens.end_offset(body_close)]
                next_cursor = body_close + 1
            else:
                next_cursor = body_open + 1

        start_index = tokens.declaration_start(name_index, floor)
        parsed_class.methods.append(ParsedMethod(
            name=name,
            return_type=return_type,
            parameters=parameters,
            is_constructor=is_constructor,
            body_text=body_text,
            start=tokens.offsets[start_index],
            line_number=tokens.line_of(start_index),
            doc_comment=tokens.doc_comment_before(start_index, floor),
            owner=parsed_class
        ))
        return next_cursor

    def _get_visibility(self, modifiers) -> str:
        """Extract visibility from modifiers list"""
        for modifier in modifiers or ():
            if modifier in ('public', 'private', 'protected'):
                return modifier
        return 'package'

    def _get_type_name(self, type_node) -> str:
        """Render a type node as source-like text, generics included"""
        if type_node is None:
            return "void"

        result = type_node.name
        arguments = getattr(type_node, 'arguments', None)
        if arguments:
            result += "<" + ", ".join(self._get_type_argument(arg) for arg in arguments) + ">"
        sub_type = getattr(type_node, 'sub_type', None)
        if sub_type is not None:
            result += "." + self._get_type_name(sub_type)
        result += "[]" * len(getattr(type_node, 'dimensions', None) or [])
        return result

    def _get_type_argument(self, argument) -> str:
        if argument.type is None:
            return "?"
        type_name = self._get_type_name(argument.type)
        if argument.pattern_type in ('extends', 'super'):
            return f"? {argument.pattern_type} {type_name}"
        return type_name
