"""
Error types raised by the codemod core.

Two failure kinds exist:

1.  **ParseError**: the input could not be parsed into a tree. Fatal for the
    file; the batch driver decides whether to skip it or abort.
2.  **InvariantViolation**: the input has a shape the transform refuses to
    guess about (e.g. two value imports from the same module source). Raised
    as a hard assertion and never recovered locally.

A file with no matching call sites is *not* an error; see
:class:`log_codemod.core.transform_result.TransformResult`.
"""

from typing import Optional


class CodemodError(Exception):
  """Base class for all codemod failures."""


class ParseError(CodemodError):
  """
  Raised when the source text contains syntax errors.

  Attributes:
      line (Optional[int]): 1-based line of the first error node.
      column (Optional[int]): 1-based column (in bytes) of the first error node.
  """

  def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
    self.line = line
    self.column = column
    if line is not None:
      message = f"{message} (line {line}, column {column})"
    super().__init__(message)


class InvariantViolation(CodemodError, AssertionError):
  """Raised when the tree violates a structural precondition of the transform."""
