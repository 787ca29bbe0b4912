"""
Tests for the Call-Site Rewriter.

Verifies:
1. Only `<object>.<severity>(...)` shapes on the ambient object are rewritten.
2. Shadowed objects are skipped and the decision is traced.
3. Arguments, including nested matches, pass through verbatim.
"""

import pytest

from log_codemod.core.rewriter import CallSiteRewriter
from log_codemod.core.tracer import TraceEventType, TraceLogger
from log_codemod.core.tree import parse_source, render
from log_codemod.enums import Dialect


def rewrite(code: str, dialect: Dialect = Dialect.TS, **kwargs):
  file = parse_source(code, dialect)
  rewriter = CallSiteRewriter(**kwargs)
  count = rewriter.rewrite(file)
  return count, render(file), rewriter.tracer


def test_simple_call():
  count, out, _ = rewrite("console.error(err);\n")
  assert count == 1
  assert out == "logError(err);\n"


def test_arguments_pass_through_verbatim():
  code = "console.error(\n  'failed:',   err , { id }, ...rest\n);\n"
  _, out, _ = rewrite(code)
  assert out == "logError(\n  'failed:',   err , { id }, ...rest\n);\n"


def test_whitespace_between_callee_and_arguments_is_kept():
  _, out, _ = rewrite("console.error (e);\n")
  assert out == "logError (e);\n"


def test_nested_calls_are_both_rewritten():
  count, out, _ = rewrite("console.error(console.error(e));\n")
  assert count == 2
  assert out == "logError(logError(e));\n"


def test_calls_inside_nested_functions():
  code = "export class A {\n  run() {\n    try { go(); } catch (e) { console.error(e); }\n  }\n}\n"
  count, out, _ = rewrite(code)
  assert count == 1
  assert "catch (e) { logError(e); }" in out


def test_iife_arrow():
  count, out, _ = rewrite("(() => { console.error(e); })();\n")
  assert count == 1
  assert out == "(() => { logError(e); })();\n"


def test_multiple_statements():
  code = "console.error(a);\nconst x = 1;\nif (x) console.error(b);\n"
  count, out, _ = rewrite(code)
  assert count == 2
  assert out == "logError(a);\nconst x = 1;\nif (x) logError(b);\n"


@pytest.mark.parametrize(
  "code",
  [
    "console.log(e);",
    "console.warn(e);",
    "console?.error(e);",
    "console.error?.(e);",
    'console["error"](e);',
    "window.console.error(e);",
    "logger.error(e);",
    "const f = console.error;",
    "console.error;",
  ],
)
def test_non_matching_shapes(code):
  count, out, _ = rewrite(code)
  assert count == 0
  assert out == code


@pytest.mark.parametrize("dialect", list(Dialect))
def test_optional_call_is_not_matched_in_any_dialect(dialect):
  code = "console.error?.(e);\nconsole?.error(e);\n"
  count, out, _ = rewrite(code, dialect)
  assert count == 0
  assert out == code


def test_shadowed_call_is_skipped_and_traced():
  code = "function f(console) { console.error(1); }\nconsole.error(2);\n"
  count, out, tracer = rewrite(code)

  assert count == 1
  assert out == "function f(console) { console.error(1); }\nlogError(2);\n"

  inspections = tracer.events_of(TraceEventType.INSPECTION)
  assert len(inspections) == 1
  assert inspections[0].metadata["outcome"] == "skipped"
  assert "parameter" in inspections[0].metadata["detail"]


def test_mutations_are_traced():
  tracer = TraceLogger()
  file = parse_source("foo();\nconsole.error(e);\n")
  CallSiteRewriter(tracer=tracer).rewrite(file)

  mutations = tracer.events_of(TraceEventType.AST_MUTATION)
  assert len(mutations) == 1
  assert mutations[0].metadata == {"before": "console.error(e)", "after": "logError(e)", "line": 2}


def test_configurable_names():
  code = "console.warn(w);\nconsole.error(e);\n"
  count, out, _ = rewrite(code, severity="warn", replacement="logWarning")
  assert count == 1
  assert out == "logWarning(w);\nconsole.error(e);\n"


def test_custom_global_object():
  count, out, _ = rewrite("logger.error(e);\nconsole.error(e);\n", global_object="logger")
  assert count == 1
  assert out == "logError(e);\nconsole.error(e);\n"


def test_jsx_expression():
  code = "const A = () => <button onClick={() => console.error(e)} />;\n"
  count, out, _ = rewrite(code, Dialect.JSX)
  assert count == 1
  assert out == "const A = () => <button onClick={() => logError(e)} />;\n"


def test_tsx_expression():
  code = "const A = (p: Props) => <div>{p.ok ? null : console.error(p.err)}</div>;\n"
  count, out, _ = rewrite(code, Dialect.TSX)
  assert count == 1
  assert "logError(p.err)" in out
