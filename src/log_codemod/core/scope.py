"""
Lexical Scope Analysis.

Answers one question for the call-site rewriter: *is this identifier bound by
user code, or does it resolve to the ambient/global environment?*

`ScopeBuilder` walks the tree-sitter tree once, pushing a `Scope` for the
program, every function-like node and every block-like node. Each scope owns a
`name -> Binding` mapping and a non-owning `parent` reference used only for
lookup. Declarations are collected before any lookup happens, so hoisted
names (`var`, function declarations) and names declared later in the same
scope are visible everywhere in it.

Binding placement:

- `var` binds in the nearest function scope (the program counts as one).
- `let` / `const` / `class` / function declarations / TS `enum` and
  `namespace` bind in the current scope.
- imports bind in the program scope.
- parameters bind in the function's own scope; catch parameters in the
  catch clause scope; names of function / class *expressions* in the
  expression's own scope.

Type-space declarations (interfaces, type aliases) never bind values.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from tree_sitter import Node

from log_codemod.core.tree.utils import node_text
from log_codemod.enums import BindingKind, ScopeKind

FUNCTION_SCOPE_TYPES = {
  "function_declaration",
  "function",
  "function_expression",
  "generator_function",
  "generator_function_declaration",
  "arrow_function",
  "method_definition",
}

BLOCK_SCOPE_TYPES = {
  "statement_block",
  "for_statement",
  "for_in_statement",
  "catch_clause",
  "switch_body",
  "class",
  "class_static_block",
}

_LEXICAL_KINDS = {"let": BindingKind.LET, "const": BindingKind.CONST}

NodeKey = Tuple[str, int, int]


def _key(node: Node) -> NodeKey:
  return (node.type, node.start_byte, node.end_byte)


@dataclass(frozen=True)
class Binding:
  """
  An identifier name's declaration within a scope.

  Attributes:
      name: The bound identifier.
      kind: The declaring construct.
      node: The identifier node of the declaration.
  """

  name: str
  kind: BindingKind
  node: Node


class Scope:
  """
  Represents a lexical region.
  """

  def __init__(self, node: Node, kind: ScopeKind, parent: Optional["Scope"] = None):
    """
    Initialize the scope.

    Args:
        node: The tree node that opens the scope.
        kind: Function or block scope.
        parent: The enclosing scope (None for the program).
    """
    self.node = node
    self.kind = kind
    self.parent = parent
    self.bindings: Dict[str, Binding] = {}

  def declare(self, name: str, kind: BindingKind, node: Node) -> None:
    """
    Register a binding. The first declaration of a name wins.

    Args:
        name: Identifier text.
        kind: Declaring construct.
        node: Declaring identifier node.
    """
    self.bindings.setdefault(name, Binding(name, kind, node))

  def lookup(self, name: str) -> Optional[Binding]:
    """
    Resolve a name, walking outward through enclosing scopes.

    Args:
        name: Identifier to look up.

    Returns:
        The nearest Binding, or None when the name is ambient.
    """
    scope: Optional[Scope] = self
    while scope is not None:
      binding = scope.bindings.get(name)
      if binding is not None:
        return binding
      scope = scope.parent
    return None

  def function_scope(self) -> "Scope":
    """Returns the nearest enclosing function (or program) scope."""
    scope = self
    while scope.kind != ScopeKind.FUNCTION and scope.parent is not None:
      scope = scope.parent
    return scope


class ScopeTable:
  """
  Maps scope-opening nodes to their `Scope` and answers binding queries.
  """

  def __init__(self, root: Scope):
    self.root = root
    self._scopes: Dict[NodeKey, Scope] = {_key(root.node): root}

  def register(self, scope: Scope) -> None:
    self._scopes[_key(scope.node)] = scope

  def scope_for(self, node: Node) -> Scope:
    """
    Finds the innermost scope enclosing `node`.

    Args:
        node: Any node of the tree.

    Returns:
        Scope: The enclosing scope (the program scope at worst).
    """
    current: Optional[Node] = node.parent
    while current is not None:
      scope = self._scopes.get(_key(current))
      if scope is not None:
        return scope
      current = current.parent
    return self.root

  def resolve_binding(self, reference: Node, name: str) -> Optional[Binding]:
    """
    Resolves `name` as seen from `reference`.

    Args:
        reference: The identifier node being resolved.
        name: The identifier text.

    Returns:
        The nearest Binding, or None if the name resolves to the ambient environment.
    """
    return self.scope_for(reference).lookup(name)


class ScopeBuilder:
  """
  Single pass over a tree-sitter tree that populates a `ScopeTable`.
  """

  def build(self, root: Node) -> ScopeTable:
    """
    Builds the scope table for a program.

    Args:
        root: The `program` node.

    Returns:
        ScopeTable: All scopes, linked to their parents.
    """
    program = Scope(root, ScopeKind.FUNCTION)
    table = ScopeTable(program)

    stack: List[Tuple[Node, Scope]] = [(root, program)]
    while stack:
      node, scope = stack.pop()
      inner = scope
      if node is not root:
        if node.type in FUNCTION_SCOPE_TYPES:
          inner = Scope(node, ScopeKind.FUNCTION, parent=scope)
          table.register(inner)
        elif node.type in BLOCK_SCOPE_TYPES:
          inner = Scope(node, ScopeKind.BLOCK, parent=scope)
          table.register(inner)

      self._declare(node, scope, inner, program)
      stack.extend((child, inner) for child in reversed(node.named_children))

    return table

  def _declare(self, node: Node, outer: Scope, inner: Scope, program: Scope) -> None:
    """
    Records the bindings introduced by `node`.

    Args:
        node: Node being visited.
        outer: Scope the node sits in.
        inner: Scope the node opens (same as outer for non-scope nodes).
        program: The root scope.
    """
    kind = node.type

    if kind == "variable_declaration":
      target = outer.function_scope()
      for declarator in _children_of_type(node, "variable_declarator"):
        _bind_pattern(target, declarator.child_by_field_name("name"), BindingKind.VAR)

    elif kind == "lexical_declaration":
      kind_node = node.child_by_field_name("kind")
      binding_kind = _LEXICAL_KINDS.get(node_text(kind_node) if kind_node else "", BindingKind.LET)
      for declarator in _children_of_type(node, "variable_declarator"):
        _bind_pattern(outer, declarator.child_by_field_name("name"), binding_kind)

    elif kind in ("function_declaration", "generator_function_declaration"):
      _bind_name(outer, node, BindingKind.FUNCTION)
      _bind_parameters(inner, node)

    elif kind == "function_signature":
      _bind_name(outer, node, BindingKind.FUNCTION)

    elif kind in ("function", "function_expression", "generator_function"):
      _bind_name(inner, node, BindingKind.FUNCTION)
      _bind_parameters(inner, node)

    elif kind in ("arrow_function", "method_definition"):
      _bind_parameters(inner, node)

    elif kind in ("class_declaration", "abstract_class_declaration"):
      _bind_name(outer, node, BindingKind.CLASS)

    elif kind == "class":
      _bind_name(inner, node, BindingKind.CLASS)

    elif kind == "catch_clause":
      _bind_pattern(inner, node.child_by_field_name("parameter"), BindingKind.CATCH)

    elif kind == "for_in_statement":
      kind_node = node.child_by_field_name("kind")
      if kind_node is not None:
        keyword = node_text(kind_node)
        if keyword == "var":
          _bind_pattern(outer.function_scope(), node.child_by_field_name("left"), BindingKind.VAR)
        else:
          _bind_pattern(inner, node.child_by_field_name("left"), _LEXICAL_KINDS.get(keyword, BindingKind.LET))

    elif kind == "import_statement":
      for ident in _import_locals(node):
        program.declare(node_text(ident), BindingKind.IMPORT, ident)

    elif kind == "enum_declaration":
      _bind_name(outer, node, BindingKind.ENUM)

    elif kind in ("internal_module", "module"):
      name = node.child_by_field_name("name")
      if name is not None and name.type == "identifier":
        outer.declare(node_text(name), BindingKind.NAMESPACE, name)


def _children_of_type(node: Node, node_type: str) -> Iterator[Node]:
  return (child for child in node.named_children if child.type == node_type)


def _bind_name(scope: Scope, node: Node, kind: BindingKind) -> None:
  name = node.child_by_field_name("name")
  if name is not None and name.type in ("identifier", "type_identifier"):
    scope.declare(node_text(name), kind, name)


def _bind_parameters(scope: Scope, node: Node) -> None:
  single = node.child_by_field_name("parameter")
  if single is not None:
    _bind_pattern(scope, single, BindingKind.PARAMETER)
  params = node.child_by_field_name("parameters")
  if params is None:
    return
  for param in params.named_children:
    _bind_pattern(scope, param, BindingKind.PARAMETER)


def _bind_pattern(scope: Scope, pattern: Optional[Node], kind: BindingKind) -> None:
  for ident in _pattern_identifiers(pattern):
    scope.declare(node_text(ident), kind, ident)


def _pattern_identifiers(pattern: Optional[Node]) -> Iterator[Node]:
  """
  Yields the identifiers a binding pattern declares.

  Default values and computed keys are skipped; they are references.

  Args:
      pattern: An identifier, destructuring pattern or TS parameter node.

  Yields:
      Node: Declared identifier nodes.
  """
  stack = [pattern] if pattern is not None else []
  while stack:
    node = stack.pop()
    kind = node.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
      yield node
    elif kind in ("object_pattern", "array_pattern"):
      stack.extend(reversed(node.named_children))
    elif kind == "pair_pattern":
      _push_field(stack, node, "value")
    elif kind in ("assignment_pattern", "object_assignment_pattern"):
      _push_field(stack, node, "left")
    elif kind in ("required_parameter", "optional_parameter"):
      _push_field(stack, node, "pattern")
    elif kind == "rest_pattern":
      stack.extend(c for c in node.named_children if c.type != "type_annotation")


def _push_field(stack: List[Node], node: Node, field_name: str) -> None:
  child = node.child_by_field_name(field_name)
  if child is not None:
    stack.append(child)


def _import_locals(node: Node) -> Iterator[Node]:
  for child in node.named_children:
    if child.type == "import_require_clause":
      yield from _children_of_type(child, "identifier")
    elif child.type == "import_clause":
      for part in child.named_children:
        if part.type == "identifier":
          yield part
        elif part.type == "namespace_import":
          yield from _children_of_type(part, "identifier")
        elif part.type == "named_imports":
          for spec in _children_of_type(part, "import_specifier"):
            local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
            if local is not None and local.type == "identifier":
              yield local


def resolve_binding(table: ScopeTable, reference: Node, name: str) -> Optional[Binding]:
  """
  Resolves `name` from `reference` against a built scope table.

  Args:
      table: The file's scope table.
      reference: The referencing identifier node.
      name: Identifier text.

  Returns:
      The nearest Binding, or None when the name is ambient.
  """
  return table.resolve_binding(reference, name)
