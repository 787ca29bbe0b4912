"""
Syntax Tree Nodes.

The codemod edits JavaScript / TypeScript at two granularities:

- **Top-level statements** (`Statement`, `ImportDeclaration`) with their
  attached comments. These are the units the import consolidator inserts,
  replaces and redistributes comments between.
- **Expression replacements** (`Replacement` holding a `CallExpression`)
  recorded on the statement that contains them.

Nodes are immutable. An edit builds a fresh node (`with_changes`) and
substitutes it at its parent's slot in `SourceFile.statements`; a node parsed
from the file keeps a `Slot` pointing at its original text so the printer can
reproduce everything around it verbatim.
"""

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple

from tree_sitter import Tree

from log_codemod.enums import CommentPlacement, Dialect, SpecifierKind

_DEFAULT_KEY = "__default__"
_NAMESPACE_KEY = "__namespace__"


@dataclass(frozen=True)
class Slot:
  """
  Position of a parsed item in the original file.

  Attributes:
      ordinal: Index among the top-level items (statements and comments) in source order.
      start: Byte offset of the first byte.
      end: Byte offset one past the last byte.
  """

  ordinal: int
  start: int
  end: int


@dataclass(frozen=True)
class Comment:
  """
  A top-level comment.

  Attributes:
      text: Raw comment text including delimiters.
      block: True for `/* */` comments. Line comments force a line break after them.
      placement: Where the parser attached the comment.
      slot: Original position; None for comments that never existed in the file.
  """

  text: str
  block: bool
  placement: CommentPlacement
  slot: Optional[Slot] = None


@dataclass(frozen=True)
class SourceRange:
  """A byte range of the original file rendered verbatim (modulo nested replacements)."""

  start: int
  end: int


@dataclass(frozen=True)
class Identifier:
  name: str


@dataclass(frozen=True)
class CallExpression:
  """
  A call whose callee is rebuilt and whose argument region is copied.

  `arguments` spans everything after the original callee: type arguments,
  whitespace and the parenthesized argument list.
  """

  callee: Identifier
  arguments: SourceRange

  def render(self, source: bytes, replacements: Iterable["Replacement"] = ()) -> bytes:
    """
    Renders the call, applying any replacements nested in its arguments.

    Args:
        source: Original file bytes.
        replacements: All replacements of the owning statement.

    Returns:
        bytes: The call expression text.
    """
    args = splice(source, self.arguments.start, self.arguments.end, replacements)
    return self.callee.name.encode("utf-8") + args


@dataclass(frozen=True)
class Replacement:
  """Substitutes `node` for the original bytes [start, end)."""

  start: int
  end: int
  node: CallExpression


def splice(source: bytes, start: int, end: int, replacements: Iterable[Replacement]) -> bytes:
  """
  Renders source[start:end] with the outermost contained replacements applied.

  Replacements nested inside another one are rendered by their container.

  Args:
      source: Original file bytes.
      start: Range start.
      end: Range end.
      replacements: Candidate replacements (any outside the range are ignored).

  Returns:
      bytes: The rendered range.
  """
  candidates = list(replacements)
  inside = sorted(
    (r for r in candidates if start <= r.start and r.end <= end),
    key=lambda r: (r.start, -r.end),
  )
  chunks: List[bytes] = []
  pos = start
  for rep in inside:
    if rep.start < pos:
      continue
    chunks.append(source[pos : rep.start])
    chunks.append(rep.node.render(source, candidates))
    pos = rep.end
  chunks.append(source[pos:end])
  return b"".join(chunks)


@dataclass(frozen=True)
class Statement:
  """
  One top-level statement.

  Attributes:
      kind: tree-sitter node type of the statement.
      slot: Layout position inherited from the original file, if any.
      verbatim: True when the statement text is the original text at `slot`.
      leading_comments: Comments printed on the lines above the statement.
      trailing_comments: Comments printed after the statement.
      replacements: Expression substitutions applied inside the original text.
  """

  kind: str
  slot: Optional[Slot] = None
  verbatim: bool = True
  leading_comments: Tuple[Comment, ...] = ()
  trailing_comments: Tuple[Comment, ...] = ()
  replacements: Tuple[Replacement, ...] = ()

  @property
  def has_comments(self) -> bool:
    return bool(self.leading_comments or self.trailing_comments)

  def with_changes(self, **changes: Any) -> "Statement":
    """
    Builds a copy of this node with the given fields replaced.

    Args:
        **changes: Field values for the new node.

    Returns:
        Statement: The fresh node (same class as self).
    """
    return dataclasses.replace(self, **changes)

  def render(self, source: bytes) -> bytes:
    """
    Produces the statement text, without attached comments.

    Args:
        source: Original file bytes.

    Returns:
        bytes: Statement text.
    """
    if self.verbatim and self.slot is not None:
      return splice(source, self.slot.start, self.slot.end, self.replacements)
    return self.generate().encode("utf-8")

  def generate(self) -> str:
    raise NotImplementedError(f"Cannot print synthesized '{self.kind}' statements")


@dataclass(frozen=True)
class ImportSpecifier:
  """
  One entry of an import declaration.

  Attributes:
      kind: named, default or namespace.
      imported: Exported name for named specifiers (raw text; may be a string literal).
      local: Local binding name. For named specifiers, None means "same as imported".
      type_only: TS inline `type` modifier on a named specifier.
  """

  kind: SpecifierKind
  imported: Optional[str] = None
  local: Optional[str] = None
  type_only: bool = False

  @classmethod
  def named(cls, imported: str, local: Optional[str] = None) -> "ImportSpecifier":
    if local == imported:
      local = None
    return cls(SpecifierKind.NAMED, imported=imported, local=local)

  @property
  def dedup_key(self) -> str:
    """Default and namespace specifiers occupy one sentinel slot each."""
    if self.kind == SpecifierKind.DEFAULT:
      return _DEFAULT_KEY
    if self.kind == SpecifierKind.NAMESPACE:
      return _NAMESPACE_KEY
    return self.imported or ""

  def generate(self) -> str:
    if self.kind == SpecifierKind.DEFAULT:
      return self.local or ""
    if self.kind == SpecifierKind.NAMESPACE:
      return f"* as {self.local}"
    text = f"type {self.imported}" if self.type_only else str(self.imported)
    if self.local and self.local != self.imported:
      text += f" as {self.local}"
    return text


@dataclass(frozen=True)
class ImportDeclaration(Statement):
  """
  A top-level `import` declaration.

  Attributes:
      source: Module source value (quotes stripped). Opaque key for consolidation.
      specifiers: Ordered specifiers.
      type_only: True for `import type ...` declarations.
      attributes: Raw import attributes text (`with { type: "json" }`), kept on rebuild.
  """

  kind: str = "import_statement"
  source: str = ""
  specifiers: Tuple[ImportSpecifier, ...] = ()
  type_only: bool = False
  attributes: Optional[str] = None

  @classmethod
  def build(cls, source: str, specifiers: Iterable[ImportSpecifier]) -> "ImportDeclaration":
    """Creates a synthesized value-kind declaration."""
    return cls(verbatim=False, source=source, specifiers=tuple(specifiers))

  @property
  def is_namespace_form(self) -> bool:
    """`import * as ns` cannot be combined with a `{ ... }` clause."""
    return any(s.kind == SpecifierKind.NAMESPACE for s in self.specifiers)

  def imports(self, imported_name: str) -> bool:
    """True if `imported_name` is imported as a value (inline `type` specifiers do not count)."""
    return any(
      s.kind == SpecifierKind.NAMED and s.imported == imported_name and not s.type_only for s in self.specifiers
    )

  def merged_with(self, specifier: ImportSpecifier) -> "ImportDeclaration":
    """
    Builds a replacement declaration with `specifier` appended.

    Existing specifiers are deduplicated by imported name: the first position of
    a name is kept and the last specifier seen for it wins. The new node takes
    over this node's slot and comments.

    Args:
        specifier: The specifier to add.

    Returns:
        ImportDeclaration: A fresh, non-verbatim declaration.
    """
    unique = {}
    for spec in (*self.specifiers, specifier):
      unique[spec.dedup_key] = spec
    return self.with_changes(verbatim=False, specifiers=tuple(unique.values()), replacements=())

  def generate(self) -> str:
    head = "import type " if self.type_only else "import "
    default = [s for s in self.specifiers if s.kind == SpecifierKind.DEFAULT]
    namespace = [s for s in self.specifiers if s.kind == SpecifierKind.NAMESPACE]
    named = [s for s in self.specifiers if s.kind == SpecifierKind.NAMED]

    clauses = [s.generate() for s in default + namespace]
    if named:
      clauses.append("{ " + ", ".join(s.generate() for s in named) + " }")

    quoted = json.dumps(self.source, ensure_ascii=False)
    if clauses:
      text = f"{head}{', '.join(clauses)} from {quoted}"
    else:
      text = f"{head}{quoted}"
    if self.attributes:
      text += f" {self.attributes}"
    return text + ";"


@dataclass(eq=False)
class SourceFile:
  """
  Root of one parsed file.

  Attributes:
      source: Original UTF-8 bytes.
      dialect: Grammar the file was parsed with.
      tree: The tree-sitter tree, used for structural queries.
      statements: Top-level statements in order. Edited by slot substitution.
      comments: File-level comment bucket (comments attached to no statement).
      body_start: Offset of the first top-level item (end of the original prefix).
      body_end: Offset past the last top-level item (start of the original suffix).
  """

  source: bytes
  dialect: Dialect
  tree: Tree
  statements: List[Statement] = field(default_factory=list)
  comments: List[Comment] = field(default_factory=list)
  body_start: int = 0
  body_end: int = 0

  @property
  def newline(self) -> bytes:
    return b"\r\n" if b"\r\n" in self.source else b"\n"

  def import_declarations(self) -> List[Tuple[int, ImportDeclaration]]:
    """
    Lists top-level import declarations with their statement index.

    Returns:
        List of (index, declaration) pairs in source order.
    """
    return [(i, s) for i, s in enumerate(self.statements) if isinstance(s, ImportDeclaration)]

  def statement_index_at(self, start_byte: int) -> Optional[int]:
    """
    Finds the statement whose original text starts at `start_byte`.

    Args:
        start_byte: Offset of a program-level tree-sitter node.

    Returns:
        Optional[int]: Index into `statements`, or None.
    """
    for i, stmt in enumerate(self.statements):
      if stmt.verbatim and stmt.slot is not None and stmt.slot.start == start_byte:
        return i
    return None
