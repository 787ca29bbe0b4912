"""
Call-Site Rewriter.

Finds every call shaped `<ambient-object>.<severity>(...)`, e.g.
`console.error(err)`, and replaces the whole call expression with
`<callee>(...)`, passing the argument region through byte for byte.

A call is only rewritten when its object identifier resolves to the ambient
environment. If user code binds the name anywhere on the scope chain
(a parameter, an import, a local `const console = ...`), the call is left
alone and the decision is recorded in the trace log.

Optional chains (`console?.error()`, `console.error?.()`) and computed members
(`console["error"]()`) do not match.
"""

import logging
from typing import Dict, List, Optional

from tree_sitter import Node

from log_codemod.core.scope import ScopeBuilder, ScopeTable
from log_codemod.core.tracer import TraceLogger
from log_codemod.core.tree.nodes import CallExpression, Identifier, Replacement, SourceFile, SourceRange
from log_codemod.core.tree.utils import iter_nodes, node_text

logger = logging.getLogger(__name__)


class CallSiteRewriter:
  """
  Substitutes canonical error-logging calls for ambient `console.error` calls.
  """

  def __init__(
    self,
    global_object: str = "console",
    severity: str = "error",
    replacement: str = "logError",
    tracer: Optional[TraceLogger] = None,
  ):
    """
    Initialize the rewriter.

    Args:
        global_object: Name of the ambient logging object.
        severity: Property name selecting the error-severity method.
        replacement: Identifier emitted as the new callee.
        tracer: Trace log for this run. A private one is created if omitted.
    """
    self.global_object = global_object
    self.severity = severity
    self.replacement = replacement
    self.tracer = tracer or TraceLogger()

  def rewrite(self, file: SourceFile) -> int:
    """
    Rewrites all matching, non-shadowed call sites in `file`.

    Statements containing rewritten calls are substituted with fresh nodes
    carrying the replacements.

    Args:
        file: The parsed file. Its statement list is edited.

    Returns:
        int: Number of call expressions rewritten. Zero means not actionable.
    """
    root = file.tree.root_node
    scopes: Optional[ScopeTable] = None
    grouped: Dict[int, List[Replacement]] = {}

    for call in iter_nodes(root):
      obj = self._match(call)
      if obj is None:
        continue

      # Only built when a candidate exists
      if scopes is None:
        scopes = ScopeBuilder().build(root)

      binding = scopes.resolve_binding(obj, self.global_object)
      if binding is not None:
        self.tracer.log_inspection(
          node_text(call),
          "skipped",
          f"'{self.global_object}' is bound locally ({binding.kind.value}, line {binding.node.start_point[0] + 1})",
        )
        continue

      index = self._statement_index(file, call)
      if index is None:
        continue

      function = call.child_by_field_name("function")
      grouped.setdefault(index, []).append(
        Replacement(
          start=call.start_byte,
          end=call.end_byte,
          node=CallExpression(Identifier(self.replacement), SourceRange(function.end_byte, call.end_byte)),
        )
      )

    count = 0
    for index, replacements in grouped.items():
      stmt = file.statements[index]
      merged = stmt.replacements + tuple(replacements)
      for rep in replacements:
        self.tracer.log_mutation(
          "Call",
          file.source[rep.start : rep.end].decode("utf-8"),
          rep.node.render(file.source, merged).decode("utf-8"),
          line=file.source.count(b"\n", 0, rep.start) + 1,
        )
      file.statements[index] = stmt.with_changes(replacements=merged)
      count += len(replacements)

    logger.debug("Rewrote %d call site(s)", count)
    return count

  def _match(self, node: Node) -> Optional[Node]:
    """
    Checks the call shape.

    Args:
        node: Any tree node.

    Returns:
        The object identifier node for a matching call, else None.
    """
    if node.type != "call_expression" or _has_optional_chain(node):
      return None
    function = node.child_by_field_name("function")
    if function is None or function.type != "member_expression" or _has_optional_chain(function):
      return None

    obj = function.child_by_field_name("object")
    prop = function.child_by_field_name("property")
    if obj is None or prop is None:
      return None
    if obj.type != "identifier" or node_text(obj) != self.global_object:
      return None
    if prop.type != "property_identifier" or node_text(prop) != self.severity:
      return None
    return obj

  def _statement_index(self, file: SourceFile, node: Node) -> Optional[int]:
    top = node
    while top.parent is not None and top.parent.type != "program":
      top = top.parent
    return file.statement_index_at(top.start_byte)


def _has_optional_chain(node: Node) -> bool:
  # TS grammars emit a bare `?.` token instead of an optional_chain node
  return any(child.type in ("optional_chain", "?.") for child in node.children)
