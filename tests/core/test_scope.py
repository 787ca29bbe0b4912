"""
Tests for Lexical Scope Analysis.

Each snippet's reference of interest is the object of its last
`console.<method>` member access; the test asserts what it resolves to.
"""

import pytest

from log_codemod.core.scope import ScopeBuilder, resolve_binding
from log_codemod.core.tree import parse_source
from log_codemod.core.tree.utils import iter_nodes, node_text
from log_codemod.enums import BindingKind, Dialect, ScopeKind


def resolve_last(code: str, name: str = "console", dialect: Dialect = Dialect.TS):
  file = parse_source(code, dialect)
  root = file.tree.root_node
  table = ScopeBuilder().build(root)
  refs = [
    n
    for n in iter_nodes(root)
    if n.type == "identifier" and node_text(n) == name and n.parent.type == "member_expression"
  ]
  return resolve_binding(table, refs[-1], name)


@pytest.mark.parametrize(
  "code",
  [
    "console.error(e);",
    "function f(x) { console.error(x); }",
    "function f(console) {}\nconsole.error(e);",
    "{ let console = x; }\nconsole.error(e);",
    "try {} catch (console) {}\nconsole.error(e);",
    "const f = function console() {};\nconsole.error(e);",
    "for (const console of xs) {}\nconsole.error(e);",
    "interface console {}\nconsole.error(e);",
    "declare function f(console: Logger): void;\nconsole.error(e);",
    "type F = (console: Logger) => void;\nconsole.error(e);",
  ],
)
def test_ambient_references(code):
  assert resolve_last(code) is None


@pytest.mark.parametrize(
  "code, kind",
  [
    ("const console = makeLogger();\nconsole.error(e);", BindingKind.CONST),
    ("let console;\nconsole.error(e);", BindingKind.LET),
    ("function f(console) { console.error(e); }", BindingKind.PARAMETER),
    ("const f = (console) => console.error(e);", BindingKind.PARAMETER),
    ("const f = console => console.error(e);", BindingKind.PARAMETER),
    ("function f({ console }) { console.error(e); }", BindingKind.PARAMETER),
    ("function f({ log: console }) { console.error(e); }", BindingKind.PARAMETER),
    ("function f([console]) { console.error(e); }", BindingKind.PARAMETER),
    ("function f(...console) { console.error(e); }", BindingKind.PARAMETER),
    ("function f(console = other) { console.error(e); }", BindingKind.PARAMETER),
    ("class A { constructor(private console: Logger) { console.error(e); } }", BindingKind.PARAMETER),
    ("function f(console?: Logger) { console.error(e); }", BindingKind.PARAMETER),
    ("try {} catch (console) { console.error(e); }", BindingKind.CATCH),
    ("try {} catch ({ console }) { console.error(e); }", BindingKind.CATCH),
    ('import console from "./c";\nconsole.error(e);', BindingKind.IMPORT),
    ('import { logger as console } from "./c";\nconsole.error(e);', BindingKind.IMPORT),
    ('import * as console from "./c";\nconsole.error(e);', BindingKind.IMPORT),
    ('import console = require("./c");\nconsole.error(e);', BindingKind.IMPORT),
    ("function console() {}\nconsole.error(e);", BindingKind.FUNCTION),
    ("class console {}\nconsole.error(e);", BindingKind.CLASS),
    ("enum console { A }\nconsole.error(e);", BindingKind.ENUM),
    ("namespace console { }\nconsole.error(e);", BindingKind.NAMESPACE),
    ("for (let console = 0; ; ) { console.error(e); }", BindingKind.LET),
    ("for (const console of xs) { console.error(e); }", BindingKind.CONST),
  ],
)
def test_bound_references(code, kind):
  binding = resolve_last(code)
  assert binding is not None
  assert binding.kind == kind
  assert binding.name == "console"


def test_var_is_hoisted_to_function_scope():
  code = "function f() {\n  if (x) { var console = y; }\n  console.error(e);\n}\n"
  assert resolve_last(code).kind == BindingKind.VAR


def test_var_does_not_escape_function():
  code = "function f() { var console = y; }\nconsole.error(e);\n"
  assert resolve_last(code) is None


def test_function_declaration_hoists_within_block():
  code = "function outer() {\n  console.error(e);\n  function console() {}\n}\n"
  assert resolve_last(code).kind == BindingKind.FUNCTION


def test_nested_functions_see_outer_bindings():
  code = "function f(console) {\n  return () => { const g = () => console.error(e); };\n}\n"
  assert resolve_last(code).kind == BindingKind.PARAMETER


def test_default_value_is_a_reference_not_a_binding():
  code = "function f(log = console.error) { return log; }"
  assert resolve_last(code) is None


def test_scope_chain_structure():
  file = parse_source("function f() { { } }")
  table = ScopeBuilder().build(file.tree.root_node)
  assert table.root.kind == ScopeKind.FUNCTION
  assert table.root.parent is None

  block = next(n for n in iter_nodes(file.tree.root_node) if n.type == "statement_block")
  inner = next(n for n in iter_nodes(block) if n is not block and n.type == "statement_block")
  scope = table.scope_for(inner)
  assert scope.kind == ScopeKind.BLOCK
  assert scope.function_scope().node.type == "function_declaration"
