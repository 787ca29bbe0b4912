"""
Syntax Tree Package.

Parses JavaScript / TypeScript with tree-sitter into a statement-level
`SourceFile`, and prints it back without disturbing untouched text.
"""

from log_codemod.core.tree.nodes import ImportDeclaration, ImportSpecifier, SourceFile, Statement
from log_codemod.core.tree.parser import SourceParser, parse_source
from log_codemod.core.tree.printer import SourcePrinter, render

__all__ = [
  "ImportDeclaration",
  "ImportSpecifier",
  "SourceFile",
  "SourceParser",
  "SourcePrinter",
  "Statement",
  "parse_source",
  "render",
]
