from annotated_snippets.core.geometry import LINE_HEIGHT, DocumentMode, offset_to_box
from annotated_snippets.core.ports.analyzer import NodeKind, SourceFileHandle, SyntaxNode
from annotated_snippets.models import SymbolBound

_DOC_PARENTS = frozenset({NodeKind.DOC_COMMENT, NodeKind.DOC_TAG})
_IMPORT_PARENTS = frozenset({NodeKind.IMPORT_SPECIFIER, NodeKind.IMPORT_CLAUSE})


def collect_symbol_nodes(handle: SourceFileHandle, mode: DocumentMode) -> list[SyntaxNode]:
    """Return the hoverable nodes: module specifiers first, then identifiers."""
    module_specifiers = (
        [] if mode.is_markup_only else [decl.module_specifier for decl in handle.get_import_declarations()]
    )
    nodes = [*module_specifiers, *handle.get_identifiers()]

    def is_visible(node: SyntaxNode) -> bool:
        if node.parent_kind in _DOC_PARENTS:
            return False
        # Imports injected for a markup-only snippet are not part of the rendered text.
        return not (mode.is_markup_only and node.parent_kind in _IMPORT_PARENTS)

    return [node for node in nodes if is_visible(node)]


def get_symbol_bounds(
    handle: SourceFileHandle,
    mode: DocumentMode,
    line_height: int = LINE_HEIGHT,
) -> list[SymbolBound]:
    """Get the bounding box of every import module specifier and identifier in a document."""
    bounds: list[SymbolBound] = []
    for node in collect_symbol_nodes(handle, mode):
        box = offset_to_box(handle, node.start, node.width, mode, line_height)
        bounds.append(
            SymbolBound(
                start=node.start,
                top=box.top,
                left=box.left,
                width=box.width,
                height=box.height,
            )
        )
    return bounds
