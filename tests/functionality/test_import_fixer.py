"""
Tests for the Import Fixer (ensure_import).

Verifies that:
1. A missing import is created as a standalone, double-quoted declaration.
2. An existing value import from the same source is merged into, not duplicated.
3. Type-only and namespace-form declarations are never merged into.
4. Repeated calls are idempotent.
5. More than one mergeable declaration is rejected.
"""

import pytest

from log_codemod.core.errors import InvariantViolation
from log_codemod.core.import_fixer import SourceImports, ensure_import
from log_codemod.core.tracer import TraceEventType, TraceLogger
from log_codemod.core.tree import parse_source, render
from log_codemod.enums import Dialect

SOURCE = "src/lib.logger"
NEW_IMPORT = 'import { logError } from "src/lib.logger";'


def apply_fixer(code: str, name: str = "logError", source: str = SOURCE, alias=None, dialect=Dialect.TS):
  """Helper to parse, run ensure_import, and emit code."""
  file = parse_source(code, dialect)
  changed = ensure_import(file, name, source, alias)
  return changed, render(file)


def test_empty_file_gets_single_import():
  changed, out = apply_fixer("")
  assert changed is True
  assert out == NEW_IMPORT


def test_inserted_at_top_of_plain_file():
  changed, out = apply_fixer("foo();\n")
  assert changed is True
  assert out == f"{NEW_IMPORT}\nfoo();\n"


def test_inserted_after_last_import():
  code = 'import React from "react";\nimport { x } from "./x";\n\nfoo();\n'
  _, out = apply_fixer(code)
  assert out == f'import React from "react";\nimport {{ x }} from "./x";\n{NEW_IMPORT}\n\nfoo();\n'


def test_merge_into_existing_named_import():
  code = "import { a } from 'src/lib.logger';\nfoo();\n"
  changed, out = apply_fixer(code)
  assert changed is True
  assert out == 'import { a, logError } from "src/lib.logger";\nfoo();\n'


def test_merge_into_default_import():
  code = 'import Logger from "src/lib.logger";\nfoo();\n'
  _, out = apply_fixer(code)
  assert out == 'import Logger, { logError } from "src/lib.logger";\nfoo();\n'


def test_merge_into_side_effect_import():
  code = 'import "src/lib.logger";\nfoo();\n'
  _, out = apply_fixer(code)
  assert out == f"{NEW_IMPORT}\nfoo();\n"


def test_merge_keeps_specifier_order_and_multiple_names():
  code = 'import { b, c as d, e } from "src/lib.logger";\n'
  _, out = apply_fixer(code)
  assert out == 'import { b, c as d, e, logError } from "src/lib.logger";\n'


def test_already_imported_is_noop():
  code = 'import { logError } from "src/lib.logger";\nfoo();\n'
  changed, out = apply_fixer(code)
  assert changed is False
  assert out == code


def test_already_imported_under_alias_is_noop():
  code = 'import { logError as le } from "src/lib.logger";\n'
  changed, out = apply_fixer(code)
  assert changed is False
  assert out == code


def test_alias_on_new_import():
  _, out = apply_fixer("foo();\n", alias="reportError")
  assert out == 'import { logError as reportError } from "src/lib.logger";\nfoo();\n'


def test_alias_equal_to_name_is_dropped():
  _, out = apply_fixer("foo();\n", alias="logError")
  assert out == f"{NEW_IMPORT}\nfoo();\n"


def test_alias_on_merge():
  code = 'import { a } from "src/lib.logger";\n'
  _, out = apply_fixer(code, alias="le")
  assert out == 'import { a, logError as le } from "src/lib.logger";\n'


def test_type_only_import_is_not_merged():
  code = 'import type { Level } from "src/lib.logger";\nfoo();\n'
  _, out = apply_fixer(code)
  assert out == f'import type {{ Level }} from "src/lib.logger";\n{NEW_IMPORT}\nfoo();\n'


def test_inline_type_specifier_is_kept_on_merge():
  code = 'import { type Level, a } from "src/lib.logger";\n'
  _, out = apply_fixer(code)
  assert out == 'import { type Level, a, logError } from "src/lib.logger";\n'


def test_inline_type_specifier_is_upgraded_to_value():
  code = 'import { a, type logError } from "src/lib.logger";\nfoo();\n'
  changed, out = apply_fixer(code)
  assert changed is True
  assert out == 'import { a, logError } from "src/lib.logger";\nfoo();\n'


def test_namespace_import_is_not_merged():
  code = 'import * as L from "src/lib.logger";\nfoo();\n'
  _, out = apply_fixer(code)
  assert out == f'import * as L from "src/lib.logger";\n{NEW_IMPORT}\nfoo();\n'


def test_import_attributes_survive_merge():
  code = 'import { a } from "src/lib.logger" with { type: "json" };\n'
  _, out = apply_fixer(code, dialect=Dialect.JS)
  assert out == 'import { a, logError } from "src/lib.logger" with { type: "json" };\n'


def test_other_sources_untouched():
  code = 'import { logError } from "other/logger";\nfoo();\n'
  _, out = apply_fixer(code)
  assert out == f'import {{ logError }} from "other/logger";\n{NEW_IMPORT}\nfoo();\n'


def test_double_ensure_is_idempotent():
  file = parse_source("foo();\n")
  assert ensure_import(file, "logError", SOURCE) is True
  assert ensure_import(file, "logError", SOURCE) is False
  assert render(file) == f"{NEW_IMPORT}\nfoo();\n"


def test_two_names_same_source_share_one_declaration():
  file = parse_source("foo();\n")
  ensure_import(file, "a", "x")
  ensure_import(file, "b", "x")
  assert render(file) == 'import { a, b } from "x";\nfoo();\n'


def test_two_sources_get_two_declarations():
  file = parse_source("foo();\n")
  ensure_import(file, "a", "x")
  ensure_import(file, "b", "y")
  assert render(file) == 'import { a } from "x";\nimport { b } from "y";\nfoo();\n'


def test_multiple_mergeable_declarations_raise():
  code = 'import { a } from "src/lib.logger";\nimport { b } from "src/lib.logger";\n'
  with pytest.raises(InvariantViolation, match="at most one value import"):
    apply_fixer(code)


def test_namespace_and_named_declarations_raise():
  code = 'import * as L from "src/lib.logger";\nimport { log } from "src/lib.logger";\nfoo();\n'
  with pytest.raises(InvariantViolation, match=r"found 2 \(lines \[1, 2\]\)"):
    apply_fixer(code)


def test_multiple_type_only_declarations_are_allowed():
  code = 'import type { A } from "src/lib.logger";\nimport type { B } from "src/lib.logger";\n'
  changed, out = apply_fixer(code)
  assert changed is True
  assert out.endswith(f"{NEW_IMPORT}\n")


def test_source_imports_partition():
  code = (
    'import type { T } from "m";\n'
    'import * as ns from "m";\n'
    'import { a } from "n";\n'
    'import { z } from "other";\n'
  )
  file = parse_source(code)

  found = SourceImports.collect(file, "m")
  assert [i for i, _ in found.type_only] == [0]
  assert [i for i, _ in found.namespace_form] == [1]
  assert found.mergeable == []

  found = SourceImports.collect(file, "n")
  assert [i for i, _ in found.mergeable] == [2]
  assert found.namespace_form == [] and found.type_only == []


def test_import_actions_are_traced():
  tracer = TraceLogger()
  file = parse_source('import { a } from "src/lib.logger";\n')
  ensure_import(file, "logError", SOURCE, tracer=tracer)

  events = tracer.events_of(TraceEventType.IMPORT_ACTION)
  assert len(events) == 1
  assert events[0].description == "Import merged"
  assert events[0].metadata == {"source": SOURCE, "name": "logError"}
