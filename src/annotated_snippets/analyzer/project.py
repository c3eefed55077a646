import logging
from bisect import bisect_right
from collections.abc import Iterator
from functools import cache
from typing import cast

from tree_sitter import Node, Parser
from tree_sitter_language_pack import SupportedLanguage, get_parser

from annotated_snippets.analyzer.declarations import is_declaration_file, module_specifier_for
from annotated_snippets.core.languages import grammar_for_filename
from annotated_snippets.core.ports.analyzer import ImportDeclaration, NodeKind, SyntaxNode
from annotated_snippets.errors import DocumentExistsError
from annotated_snippets.models import Diagnostic

logger = logging.getLogger(__name__)

_IDENTIFIER_TYPES = frozenset(
    {
        "identifier",
        "property_identifier",
        "type_identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "private_property_identifier",
        "statement_identifier",
    }
)

# Identifier types that may refer to an imported binding.
_REFERENCE_TYPES = frozenset({"identifier", "type_identifier"})

# Identifier types that may introduce a local binding.
_BINDING_TYPES = _REFERENCE_TYPES | {"shorthand_property_identifier_pattern"}

# Comments are leaves in tree-sitter, so documentation-comment contents are
# never emitted as identifiers and no node gets a DOC_COMMENT or DOC_TAG parent.
_PARENT_KINDS = {
    "import_specifier": NodeKind.IMPORT_SPECIFIER,
    "import_clause": NodeKind.IMPORT_CLAUSE,
}

_IMPORT_BINDING_PARENTS = frozenset({"import_specifier", "import_clause", "namespace_import"})

_NAMED_DECLARATIONS = {
    "function_declaration": "function",
    "generator_function_declaration": "function",
    "function_signature": "function",
    "class_declaration": "class",
    "abstract_class_declaration": "class",
    "interface_declaration": "interface",
    "type_alias_declaration": "type",
    "enum_declaration": "enum",
    "method_definition": "method",
    "method_signature": "method",
}

_PARAMETER_PARENTS = {
    "required_parameter": "pattern",
    "optional_parameter": "pattern",
    "arrow_function": "parameter",
    "catch_clause": "parameter",
}

# Field holding the bound name or pattern of each binding site.
_BINDING_FIELDS = {
    "variable_declarator": "name",
    "for_in_statement": "left",
    **_PARAMETER_PARENTS,
    **{declaration: "name" for declaration in _NAMED_DECLARATIONS},
}

# Destructuring patterns. Where a field is given only that child binds,
# e.g. the default value of ``{ a = b }`` is a reference.
_PATTERN_FIELDS: dict[str, str | None] = {
    "object_pattern": None,
    "array_pattern": None,
    "rest_pattern": None,
    "pair_pattern": "value",
    "assignment_pattern": "left",
    "object_assignment_pattern": "left",
}


@cache
def _parser_for(grammar: str) -> Parser:
    return get_parser(cast(SupportedLanguage, grammar))


def _walk(node: Node) -> Iterator[Node]:
    yield node
    for child in node.children:
        yield from _walk(child)


def _is_field(parent: Node, field: str, node: Node) -> bool:
    child = parent.child_by_field_name(field)
    return child is not None and child.start_byte == node.start_byte and child.end_byte == node.end_byte


def _is_binding_position(parent: Node, node: Node) -> bool:
    if parent.type == "formal_parameters":
        return True
    field = _BINDING_FIELDS.get(parent.type)
    return field is not None and _is_field(parent, field, node)


def _binding_site(node: Node) -> Node | None:
    """Return the declaration node that binds ``node``, climbing out of destructuring patterns."""
    child, parent = node, node.parent
    while parent is not None and parent.type in _PATTERN_FIELDS:
        field = _PATTERN_FIELDS[parent.type]
        if field is not None and not _is_field(parent, field, child):
            return None
        child, parent = parent, parent.parent
    if parent is None:
        return None
    if parent.type in _IMPORT_BINDING_PARENTS and child is node:
        return parent
    return parent if _is_binding_position(parent, child) else None


def _offset_tables(text: str) -> tuple[list[int], list[int]]:
    """Return the byte-to-character and character-to-byte offset tables of ``text``."""
    chars: list[int] = []
    byte_offsets: list[int] = []
    position = 0
    for index, char in enumerate(text):
        width = len(char.encode("utf-8"))
        chars.extend([index] * width)
        byte_offsets.append(position)
        position += width
    chars.append(len(text))
    byte_offsets.append(position)
    return chars, byte_offsets


class TreeSitterSourceFile:
    """A registered document parsed with tree-sitter.

    Implements the ``SourceFileHandle`` protocol. Offsets are character
    offsets into ``full_text()``.
    """

    def __init__(self, filename: str, text: str, project: "TreeSitterProject") -> None:
        self._filename = filename
        self._project = project
        self._grammar = grammar_for_filename(filename)
        self._set_text(text)

    @property
    def filename(self) -> str:
        return self._filename

    def full_text(self) -> str:
        return self._text

    def _set_text(self, text: str) -> None:
        self._text = text
        self._source = text.encode("utf-8")
        self._chars, self._bytes = _offset_tables(text)
        self._line_starts = [0] + [index + 1 for index, char in enumerate(text) if char == "\n"]
        self._tree = _parser_for(self._grammar).parse(self._source)
        self._declarations: dict[str, Node] | None = None

    def _start(self, node: Node) -> int:
        return self._chars[node.start_byte]

    def _end(self, node: Node) -> int:
        return self._chars[node.end_byte]

    def _node_text(self, node: Node) -> str:
        return self._text[self._start(node) : self._end(node)]

    def _syntax_node(self, node: Node, kind: NodeKind) -> SyntaxNode:
        parent_kind = None
        if node.parent is not None:
            parent_kind = _PARENT_KINDS.get(node.parent.type, NodeKind.OTHER)
        return SyntaxNode(
            kind=kind,
            start=self._start(node),
            end=self._end(node),
            text=self._node_text(node),
            parent_kind=parent_kind,
        )

    def _import_statements(self) -> list[Node]:
        return [node for node in self._tree.root_node.children if node.type == "import_statement"]

    def get_import_declarations(self) -> list[ImportDeclaration]:
        declarations: list[ImportDeclaration] = []
        for statement in self._import_statements():
            source = statement.child_by_field_name("source")
            if source is None:
                continue
            declarations.append(
                ImportDeclaration(
                    start=self._start(statement),
                    end=self._end(statement),
                    module_specifier=self._syntax_node(source, NodeKind.MODULE_SPECIFIER),
                )
            )
        return declarations

    def get_identifiers(self) -> list[SyntaxNode]:
        return [
            self._syntax_node(node, NodeKind.IDENTIFIER)
            for node in _walk(self._tree.root_node)
            if node.type in _IDENTIFIER_TYPES and not node.is_missing
        ]

    def get_diagnostics(self) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        stack = [self._tree.root_node]
        while stack:
            node = stack.pop()
            if node.is_missing:
                diagnostics.append(Diagnostic(start=self._start(node), length=0, message=f"'{node.type}' expected."))
                continue
            if node.is_error:
                text = self._node_text(node).split("\n", 1)[0].strip()
                diagnostics.append(
                    Diagnostic(
                        start=self._start(node),
                        length=self._end(node) - self._start(node),
                        message=f"Unexpected token '{text}'." if text else "Unexpected token.",
                    )
                )
                continue
            if node.has_error:
                stack.extend(reversed(node.children))
        return sorted(diagnostics, key=lambda diagnostic: (diagnostic.start, diagnostic.length))

    def offset_to_line_column(self, offset: int) -> tuple[int, int]:
        offset = max(0, min(offset, len(self._text)))
        line = bisect_right(self._line_starts, offset)
        return line, offset - self._line_starts[line - 1] + 1

    def reformat(self, indent_size: int = 2) -> None:
        formatted: list[str] = []
        for line in self._text.replace("\r\n", "\n").split("\n"):
            content = line.lstrip("\t")
            tab_count = len(line) - len(content)
            formatted.append((" " * indent_size * tab_count + content).rstrip())
        text = "\n".join(formatted)
        if text != self._text:
            self._set_text(text)

    def _declaration_index(self) -> dict[str, Node]:
        """First binding node of every locally declared name, built once per text."""
        if self._declarations is None:
            declarations: dict[str, Node] = {}
            for node in _walk(self._tree.root_node):
                if node.type in _BINDING_TYPES and _binding_site(node) is not None:
                    declarations.setdefault(self._node_text(node), node)
            self._declarations = declarations
        return self._declarations

    def resolve_missing_imports(self) -> int:
        """Import every unresolved reference that a registered declaration file exports.

        Returns the number of import declarations added.
        """
        declared = self._declaration_index()
        missing: dict[str, list[str]] = {}
        for node in _walk(self._tree.root_node):
            if node.type not in _REFERENCE_TYPES or _binding_site(node) is not None:
                continue
            name = self._node_text(node)
            if name in declared:
                continue
            module = self._project.exporting_module(name)
            if module is None:
                continue
            names = missing.setdefault(module, [])
            if name not in names:
                names.append(name)

        if not missing:
            return 0

        lines = [f'import {{ {", ".join(names)} }} from "{module}";' for module, names in sorted(missing.items())]
        statements = self._import_statements()
        if statements:
            insert_at = self._text.find("\n", self._end(statements[-1]))
            if insert_at == -1:
                insert_at = len(self._text)
            text = self._text[:insert_at] + "\n" + "\n".join(lines) + self._text[insert_at:]
        else:
            text = "\n".join(lines) + "\n\n" + self._text

        logger.debug("Added %d import(s) to %s", len(lines), self._filename)
        self._set_text(text)
        return len(lines)

    def exported_names(self) -> list[str]:
        names: list[str] = []
        for statement in self._tree.root_node.children:
            if statement.type == "export_statement":
                names.extend(self._exported_by(statement))
        return names

    def _exported_by(self, statement: Node) -> list[str]:
        names: list[str] = []
        for child in statement.named_children:
            if child.type == "export_clause":
                for specifier in child.named_children:
                    exported = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                    if exported is not None:
                        names.append(self._node_text(exported))
            elif child.type in ("lexical_declaration", "variable_declaration"):
                for declarator in child.named_children:
                    name = declarator.child_by_field_name("name")
                    if declarator.type == "variable_declarator" and name is not None:
                        names.append(self._node_text(name))
            elif child.type == "ambient_declaration":
                names.extend(self._exported_by(child))
            else:
                name = child.child_by_field_name("name")
                if name is not None and child.type in _NAMED_DECLARATIONS:
                    names.append(self._node_text(name))
        return names

    def _byte_offset(self, offset: int) -> int:
        return self._bytes[max(0, min(offset, len(self._text)))]

    def _describe_declaration(self, node: Node) -> str | None:
        site = _binding_site(node)
        if site is None:
            return None
        name = self._node_text(node)
        if site.type == "variable_declarator":
            declaration = site.parent
            keyword = declaration.children[0].type if declaration is not None and declaration.children else "var"
            return f"{keyword} {name}"
        if site.type == "for_in_statement":
            kind = site.child_by_field_name("kind")
            return f"{kind.type} {name}" if kind is not None else name
        if site.type in _NAMED_DECLARATIONS:
            return f"{_NAMED_DECLARATIONS[site.type]} {name}"
        if site.type in _PARAMETER_PARENTS or site.type == "formal_parameters":
            return f"parameter {name}"
        if site.type in _IMPORT_BINDING_PARENTS:
            statement = site
            while statement is not None and statement.type != "import_statement":
                statement = statement.parent
            source = statement.child_by_field_name("source") if statement is not None else None
            if source is not None:
                return f"import {name} from {self._node_text(source)}"
            return f"import {name}"
        return None

    def get_quick_info(self, offset: int) -> str | None:
        byte_offset = self._byte_offset(offset)
        node = self._tree.root_node.descendant_for_byte_range(byte_offset, byte_offset + 1)
        if node is None:
            return None
        if node.type in ("string_fragment", "'", '"') and node.parent is not None:
            node = node.parent
        if node.type == "string" and node.parent is not None and node.parent.type == "import_statement":
            return f"module {self._node_text(node)}"
        if node.type not in _IDENTIFIER_TYPES:
            return None
        if node.type in _BINDING_TYPES and _binding_site(node) is not None:
            return self._describe_declaration(node)
        if node.type not in _REFERENCE_TYPES:
            return f"property {self._node_text(node)}"

        name = self._node_text(node)
        declaration = self._declaration_index().get(name)
        if declaration is not None:
            return self._describe_declaration(declaration)
        module = self._project.exporting_module(name)
        if module is not None:
            return f'import {name} from "{module}"'
        return name


class TreeSitterProject:
    """Process-wide table of registered documents, keyed by filename.

    Implements the ``DocumentRegistry`` protocol. Declaration files
    (``*.d.ts``) registered here provide the exports used to resolve
    missing imports.
    """

    def __init__(self) -> None:
        self._documents: dict[str, TreeSitterSourceFile] = {}
        self._exports: dict[str, frozenset[str]] = {}

    def __contains__(self, filename: object) -> bool:
        return filename in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def register(self, filename: str, text: str, overwrite: bool = False) -> TreeSitterSourceFile:
        if filename in self._documents and not overwrite:
            raise DocumentExistsError(f"Document already registered: {filename}")

        handle = TreeSitterSourceFile(filename, text, self)
        self._documents[filename] = handle
        if is_declaration_file(filename):
            self._exports[module_specifier_for(filename)] = frozenset(handle.exported_names())
        logger.debug("Registered %s (%d chars)", filename, len(text))
        return handle

    def get(self, filename: str) -> TreeSitterSourceFile | None:
        return self._documents.get(filename)

    def exporting_module(self, name: str) -> str | None:
        for module in sorted(self._exports):
            if name in self._exports[module]:
                return module
        return None

    def dispose(self) -> None:
        self._documents.clear()
        self._exports.clear()
