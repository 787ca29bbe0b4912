"""
Import Fixer Package.

Provides ``ensure_import``, which makes a file import one named value from a
module source:

1.  **Merging**: adding the specifier to the single existing value import.
2.  **Insertion**: creating a standalone declaration after the last import,
    or at the top of the file with its comments redistributed.
"""

from log_codemod.core.import_fixer.consolidation import ImportConsolidator, SourceImports, ensure_import
from log_codemod.core.import_fixer.placement import insert_after_imports, insert_at_top

__all__ = ["ImportConsolidator", "SourceImports", "ensure_import", "insert_after_imports", "insert_at_top"]
