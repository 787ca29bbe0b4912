"""
Grammar registry.

Maps each :class:`Dialect` to a tree-sitter parser. Parsers are created lazily
and cached per dialect; they hold no per-file state.
"""

from typing import Dict

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser

from log_codemod.enums import Dialect

_PARSERS: Dict[Dialect, Parser] = {}


def get_language(dialect: Dialect) -> Language:
  """
  Resolves the tree-sitter grammar for a dialect.

  The JavaScript grammar parses JSX natively, so `js` and `jsx` share it.

  Args:
      dialect: The requested dialect.

  Returns:
      Language: The grammar handle.
  """
  if dialect == Dialect.TS:
    return Language(tree_sitter_typescript.language_typescript())
  if dialect == Dialect.TSX:
    return Language(tree_sitter_typescript.language_tsx())
  return Language(tree_sitter_javascript.language())


def get_parser(dialect: Dialect) -> Parser:
  """
  Get or create the parser for a dialect.

  Args:
      dialect: The requested dialect.

  Returns:
      Parser: A parser bound to the dialect's grammar.
  """
  parser = _PARSERS.get(dialect)
  if parser is None:
    parser = Parser(get_language(dialect))
    _PARSERS[dialect] = parser
  return parser
