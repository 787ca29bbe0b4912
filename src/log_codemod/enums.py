"""
Enumerations for log-codemod.

This module defines the standard enumerations shared by the parser, the scope
resolver and the import consolidator.
"""

from enum import Enum


class Dialect(str, Enum):
  """
  Syntax dialect used to select the tree-sitter grammar for a file.
  """

  JS = "js"
  JSX = "jsx"
  TS = "ts"
  TSX = "tsx"


class SpecifierKind(str, Enum):
  """
  Shape of one entry inside an import declaration.
  """

  NAMED = "named"  # import { a } / import { a as b }
  DEFAULT = "default"  # import a
  NAMESPACE = "namespace"  # import * as a


class CommentPlacement(str, Enum):
  """
  Where a top-level comment was attached when the file was parsed.
  """

  FILE = "file"
  LEADING = "leading"
  TRAILING = "trailing"


class ScopeKind(str, Enum):
  """
  Lexical region categories. Function scopes receive hoisted `var` bindings.
  """

  FUNCTION = "function"
  BLOCK = "block"


class BindingKind(str, Enum):
  """
  The declaring construct of a binding.
  """

  PARAMETER = "parameter"
  VAR = "var"
  LET = "let"
  CONST = "const"
  FUNCTION = "function"
  CLASS = "class"
  IMPORT = "import"
  CATCH = "catch"
  ENUM = "enum"
  NAMESPACE = "namespace"
