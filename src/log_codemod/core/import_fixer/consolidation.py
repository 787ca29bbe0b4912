"""
Import Consolidation.

Guarantees that a file imports one named value from one module source, with
at most one value-kind import declaration per source:

1.  **Partition**: declarations importing from the source are split into
    mergeable ones (`import a, { b } from "x"`), namespace-form ones
    (`import * as ns from "x"`, which cannot take a `{ ... }` clause) and
    type-only ones (`import type { T } from "x"`).
2.  **Merge**: a single mergeable declaration is rebuilt with the specifier
    appended and substituted at its slot.
3.  **Insert**: otherwise a standalone declaration is created, after the last
    import or at the top of the file (see :mod:`.placement`).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from log_codemod.core.errors import InvariantViolation
from log_codemod.core.import_fixer.placement import insert_after_imports, insert_at_top
from log_codemod.core.tracer import TraceLogger
from log_codemod.core.tree.nodes import ImportDeclaration, ImportSpecifier, SourceFile

logger = logging.getLogger(__name__)

IndexedImport = Tuple[int, ImportDeclaration]


@dataclass
class SourceImports:
  """
  The import declarations of one module source, by category.
  """

  mergeable: List[IndexedImport] = field(default_factory=list)
  namespace_form: List[IndexedImport] = field(default_factory=list)
  type_only: List[IndexedImport] = field(default_factory=list)

  @classmethod
  def collect(cls, file: SourceFile, import_source: str) -> "SourceImports":
    """
    Partitions the file's declarations for `import_source`.

    Args:
        file: Parsed file.
        import_source: Module source to match (compared verbatim).

    Returns:
        SourceImports: The partition.

    Raises:
        InvariantViolation: If more than one value-kind (mergeable or namespace-form)
            declaration exists.
    """
    found = cls()
    for index, decl in file.import_declarations():
      if decl.source != import_source:
        continue
      if decl.type_only:
        found.type_only.append((index, decl))
      elif decl.is_namespace_form:
        found.namespace_form.append((index, decl))
      else:
        found.mergeable.append((index, decl))

    value_kind = sorted(found.mergeable + found.namespace_form, key=lambda item: item[0])
    if len(value_kind) > 1:
      lines = [file.source.count(b"\n", 0, d.slot.start) + 1 for _, d in value_kind if d.slot]
      raise InvariantViolation(
        f"Expected at most one value import from '{import_source}', found {len(value_kind)} (lines {lines})"
      )
    return found


class ImportConsolidator:
  """
  Adds one named import to a file, merging into an existing declaration when possible.
  """

  def __init__(self, tracer: Optional[TraceLogger] = None):
    """
    Args:
        tracer: Trace log for this run. A private one is created if omitted.
    """
    self.tracer = tracer or TraceLogger()

  def ensure(
    self,
    file: SourceFile,
    imported_name: str,
    import_source: str,
    local_alias: Optional[str] = None,
  ) -> bool:
    """
    Ensures `file` imports `imported_name` from `import_source`.

    Args:
        file: Parsed file. Its statement list is edited.
        imported_name: Exported name to import.
        import_source: Module source string.
        local_alias: Optional local binding name (`import { a as b }`).

    Returns:
        bool: True if the file was changed, False if the name was already imported.

    Raises:
        InvariantViolation: If the file holds several value-kind declarations for the source.
    """
    specifier = ImportSpecifier.named(imported_name, local_alias)
    existing = SourceImports.collect(file, import_source)

    if existing.mergeable:
      index, decl = existing.mergeable[0]
      if decl.imports(imported_name):
        self.tracer.log_import("already present", import_source, imported_name)
        return False
      file.statements[index] = decl.merged_with(specifier)
      self.tracer.log_import("merged", import_source, imported_name)
      logger.debug("Merged '%s' into existing import of '%s'", imported_name, import_source)
      return True

    declaration = ImportDeclaration.build(import_source, [specifier])
    if insert_after_imports(file, declaration):
      self.tracer.log_import("inserted after imports", import_source, imported_name)
    else:
      case = insert_at_top(file, declaration)
      self.tracer.log_import(f"inserted at top (case {case})", import_source, imported_name)
    return True


def ensure_import(
  file: SourceFile,
  imported_name: str,
  import_source: str,
  local_alias: Optional[str] = None,
  tracer: Optional[TraceLogger] = None,
) -> bool:
  """
  Functional entry point for :class:`ImportConsolidator`.

  Args:
      file: Parsed file. Its statement list is edited.
      imported_name: Exported name to import.
      import_source: Module source string.
      local_alias: Optional local binding name.
      tracer: Optional trace log.

  Returns:
      bool: True if the file changed.
  """
  return ImportConsolidator(tracer).ensure(file, imported_name, import_source, local_alias)
