"""
Top-of-file Placement.

Decides where a new import declaration goes when the file has no imports, and
how the first statement's comments are redistributed so none are lost or
duplicated:

=====  =========================================  ======================================
Case   Situation                                  Action
=====  =========================================  ======================================
a      file-level comment bucket is non-empty     prepend; the bucket prints above it
b      first statement has no comments            prepend
c      first statement has comments, and a        leading comments move onto the new
       second statement exists                    import; trailing comments move ahead
                                                  of the second statement's leading ones
d      first statement has comments, alone        leading comments move onto the new
                                                  import; trailing comments stay
=====  =========================================  ======================================
"""

import logging

from log_codemod.core.tree.nodes import ImportDeclaration, SourceFile

logger = logging.getLogger(__name__)


def insert_at_top(file: SourceFile, declaration: ImportDeclaration) -> str:
  """
  Prepends `declaration` to the file, redistributing the first statement's comments.

  Args:
      file: Target file. Its statement list is edited.
      declaration: The fresh import declaration.

  Returns:
      str: The case letter applied ("a" to "d"), for tracing.
  """
  statements = file.statements

  if file.comments:
    statements.insert(0, declaration)
    return "a"

  if not statements or not statements[0].has_comments:
    statements.insert(0, declaration)
    return "b"

  first = statements[0]
  if len(statements) > 1:
    second = statements[1]
    statements[1] = second.with_changes(leading_comments=first.trailing_comments + second.leading_comments)
    statements[0] = first.with_changes(leading_comments=(), trailing_comments=())
    statements.insert(0, declaration.with_changes(leading_comments=first.leading_comments))
    logger.debug("Moved comments of the first statement around the new import")
    return "c"

  statements[0] = first.with_changes(leading_comments=())
  statements.insert(0, declaration.with_changes(leading_comments=first.leading_comments))
  return "d"


def insert_after_imports(file: SourceFile, declaration: ImportDeclaration) -> bool:
  """
  Inserts `declaration` directly after the last top-level import declaration.

  Args:
      file: Target file. Its statement list is edited.
      declaration: The fresh import declaration.

  Returns:
      bool: False if the file has no import declarations (nothing inserted).
  """
  existing = file.import_declarations()
  if not existing:
    return False
  last_index = existing[-1][0]
  file.statements.insert(last_index + 1, declaration)
  return True
