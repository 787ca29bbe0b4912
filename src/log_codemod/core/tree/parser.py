"""
Source Parser.

Converts JavaScript / TypeScript text into a :class:`SourceFile`:

1.  tree-sitter parses the bytes; any ERROR / MISSING node is a `ParseError`.
2.  Program-level children are split into statements and comments.
3.  Comments are attached:
    - a hash-bang line, every comment of a statement-free file, and a comment
      run at the top of the file that is separated from the first statement
      by a blank line go to the file-level bucket;
    - a comment starting on the line where the previous statement ends is a
      trailing comment of that statement;
    - any other comment leads the next statement (or trails the last one).
4.  `import` declarations are decoded into `ImportDeclaration` nodes.

Comments nested inside statements stay part of the statement text.
"""

from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

from log_codemod.core.errors import ParseError
from log_codemod.core.tree.languages import get_parser
from log_codemod.core.tree.nodes import Comment, ImportDeclaration, ImportSpecifier, Slot, SourceFile, Statement
from log_codemod.core.tree.utils import first_error, has_token, node_text, string_value
from log_codemod.enums import CommentPlacement, Dialect, SpecifierKind

COMMENT_TYPES = {"comment", "html_comment", "hash_bang_line"}


class SourceParser:
  """
  Builds `SourceFile` trees for one dialect.
  """

  def __init__(self, dialect: Dialect):
    """
    Initialize the parser.

    Args:
        dialect: Grammar selector.
    """
    self.dialect = Dialect(dialect)

  def parse(self, code: str) -> SourceFile:
    """
    Parses the code.

    Args:
        code: Source text.

    Returns:
        SourceFile: The statement-level tree.

    Raises:
        ParseError: If the text is not valid in the selected dialect.
    """
    source = code.encode("utf-8")
    tree = get_parser(self.dialect).parse(source)
    root = tree.root_node

    error = first_error(root)
    if error is not None:
      raise ParseError(
        f"Could not parse {self.dialect.value} source",
        line=error.start_point[0] + 1,
        column=error.start_point[1] + 1,
      )

    file = SourceFile(source=source, dialect=self.dialect, tree=tree)
    items = list(root.children)
    if not items:
      file.body_start = 0
      file.body_end = 0
      return file

    file.body_start = items[0].start_byte
    file.body_end = items[-1].end_byte

    first_stmt = next((i for i, node in enumerate(items) if node.type not in COMMENT_TYPES), None)
    if first_stmt is None:
      file.comments = [_comment(node, i, CommentPlacement.FILE) for i, node in enumerate(items)]
      return file

    header_end = _detached_header_end(source, items, first_stmt)
    file.comments = [_comment(items[i], i, CommentPlacement.FILE) for i in range(header_end)]

    pending: List[int] = list(range(header_end, first_stmt))
    grouped: List[Tuple[int, List[int], List[int]]] = []
    previous_end = 0

    for ordinal in range(first_stmt, len(items)):
      node = items[ordinal]
      if node.type not in COMMENT_TYPES:
        grouped.append((ordinal, pending, []))
        pending = []
      elif not pending and b"\n" not in source[previous_end : node.start_byte]:
        grouped[-1][2].append(ordinal)
      else:
        pending.append(ordinal)
      previous_end = node.end_byte

    # Comments after the last statement trail it
    grouped[-1][2].extend(pending)

    for ordinal, leading, trailing in grouped:
      file.statements.append(
        self._statement(
          items[ordinal],
          ordinal,
          tuple(_comment(items[i], i, CommentPlacement.LEADING) for i in leading),
          tuple(_comment(items[i], i, CommentPlacement.TRAILING) for i in trailing),
        )
      )
    return file

  def _statement(
    self,
    node: Node,
    ordinal: int,
    leading: Tuple[Comment, ...],
    trailing: Tuple[Comment, ...],
  ) -> Statement:
    slot = Slot(ordinal, node.start_byte, node.end_byte)
    if node.type == "import_statement":
      declaration = _import_declaration(node, slot, leading, trailing)
      if declaration is not None:
        return declaration
    return Statement(kind=node.type, slot=slot, leading_comments=leading, trailing_comments=trailing)


def parse_source(code: str, dialect: Dialect = Dialect.TS) -> SourceFile:
  """
  Convenience wrapper around :class:`SourceParser`.

  Args:
      code: Source text.
      dialect: Grammar selector.

  Returns:
      SourceFile: The parsed file.
  """
  return SourceParser(dialect).parse(code)


def _comment(node: Node, ordinal: int, placement: CommentPlacement) -> Comment:
  text = node_text(node)
  return Comment(
    text=text,
    block=text.startswith("/*"),
    placement=placement,
    slot=Slot(ordinal, node.start_byte, node.end_byte),
  )


def _detached_header_end(source: bytes, items: List[Node], first_stmt: int) -> int:
  """
  Counts the leading items that belong to the file-level bucket.

  Args:
      source: File bytes.
      items: Program-level children.
      first_stmt: Index of the first statement.

  Returns:
      int: Number of leading items (all comments) that are file-level.
  """
  header_end = 1 if items[0].type == "hash_bang_line" else 0
  for i in range(first_stmt):
    gap = source[items[i].end_byte : items[i + 1].start_byte]
    if gap.count(b"\n") >= 2:
      header_end = i + 1
  return header_end


def _import_declaration(
  node: Node,
  slot: Slot,
  leading: Tuple[Comment, ...],
  trailing: Tuple[Comment, ...],
) -> Optional[ImportDeclaration]:
  """
  Decodes an ES `import` statement.

  TS `import x = require("y")` is not an ES import declaration and yields None.
  """
  clause: Optional[Node] = None
  attributes: Optional[str] = None
  for child in node.named_children:
    if child.type == "import_require_clause":
      return None
    if child.type == "import_clause":
      clause = child
    elif child.type in ("import_attribute", "import_assertion"):
      attributes = node_text(child)

  source_node = node.child_by_field_name("source")
  if source_node is None:
    return None

  return ImportDeclaration(
    slot=slot,
    leading_comments=leading,
    trailing_comments=trailing,
    source=string_value(source_node),
    specifiers=tuple(_specifiers(clause)) if clause is not None else (),
    type_only=has_token(node, "type") or has_token(node, "typeof"),
    attributes=attributes,
  )


def _specifiers(clause: Node) -> Iterator[ImportSpecifier]:
  for child in clause.named_children:
    if child.type == "identifier":
      yield ImportSpecifier(SpecifierKind.DEFAULT, local=node_text(child))
    elif child.type == "namespace_import":
      ident = next((c for c in child.named_children if c.type == "identifier"), None)
      yield ImportSpecifier(SpecifierKind.NAMESPACE, local=node_text(ident) if ident is not None else None)
    elif child.type == "named_imports":
      for spec in child.named_children:
        if spec.type != "import_specifier":
          continue
        name = spec.child_by_field_name("name")
        alias = spec.child_by_field_name("alias")
        yield ImportSpecifier(
          SpecifierKind.NAMED,
          imported=node_text(name) if name is not None else None,
          local=node_text(alias) if alias is not None else None,
          type_only=has_token(spec, "type") or has_token(spec, "typeof"),
        )
