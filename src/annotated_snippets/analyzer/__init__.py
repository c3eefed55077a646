from annotated_snippets.analyzer.declarations import (
    DeclarationFile,
    TypeDeclarationLoader,
    is_declaration_file,
    module_specifier_for,
)
from annotated_snippets.analyzer.project import TreeSitterProject, TreeSitterSourceFile

__all__ = [
    "DeclarationFile",
    "TreeSitterProject",
    "TreeSitterSourceFile",
    "TypeDeclarationLoader",
    "is_declaration_file",
    "module_specifier_for",
]
