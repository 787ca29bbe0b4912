"""
Utilities for working with tree-sitter nodes.
"""

from typing import Iterator, Optional

from tree_sitter import Node


def iter_nodes(root: Node) -> Iterator[Node]:
  """
  Yields every node below `root` (inclusive) in pre-order.

  Iterative, so deeply nested files do not hit the recursion limit.

  Args:
      root: Starting node.

  Yields:
      Node: Nodes in document order.
  """
  stack = [root]
  while stack:
    node = stack.pop()
    yield node
    stack.extend(reversed(node.children))


def first_error(root: Node) -> Optional[Node]:
  """
  Finds the first ERROR or MISSING node in document order.

  Args:
      root: Tree root.

  Returns:
      Optional[Node]: The offending node, or None for a clean tree.
  """
  if not root.has_error:
    return None
  for node in iter_nodes(root):
    if node.type == "ERROR" or node.is_missing:
      return node
  return root


def node_text(node: Node) -> str:
  """Decodes the source text covered by a node."""
  return node.text.decode("utf-8") if node.text is not None else ""


def has_token(node: Node, token: str) -> bool:
  """
  Checks for an anonymous keyword child, e.g. the `type` in `import type {...}`.

  Args:
      node: Parent node.
      token: Literal token text.

  Returns:
      bool: True if a direct anonymous child has that type.
  """
  return any(not child.is_named and child.type == token for child in node.children)


def string_value(node: Node) -> str:
  """
  Extracts the contents of a string literal node (quotes stripped, escapes kept).

  Args:
      node: A `string` node.

  Returns:
      str: The raw contents.
  """
  text = node_text(node)
  if len(text) >= 2 and text[0] in "'\"" and text[-1] == text[0]:
    return text[1:-1]
  return text
