"""
Source Printer.

Renders a :class:`SourceFile` back to text. The file is flattened into a
sequence of pieces (file-level comments, then each statement with its leading
and trailing comments). Separators between pieces follow three rules:

1.  Two pieces that were adjacent in the original file keep the original
    whitespace between them. A comment that moved from trailing to leading
    placement is pushed onto its own line.
2.  A synthesized piece (a new import) hugs its left neighbour with a single
    newline; the piece after it inherits the original gap that separated it
    from the last original piece.
3.  Everything else is separated by a single newline.

Untouched regions therefore print byte for byte, and an unmodified tree
renders exactly to its input.
"""

from dataclasses import dataclass
from typing import List, Optional

from log_codemod.core.tree.nodes import Comment, Slot, SourceFile
from log_codemod.enums import CommentPlacement


@dataclass
class _Piece:
  text: bytes
  slot: Optional[Slot]
  moved: bool = False


class SourcePrinter:
  """
  Lossless renderer for one `SourceFile`.
  """

  def __init__(self, file: SourceFile):
    """
    Args:
        file: The (possibly edited) tree to render.
    """
    self.file = file
    self.source = file.source
    self.newline = file.newline

  def render(self) -> str:
    """
    Renders the file.

    Returns:
        str: The complete source text.
    """
    pieces = self._collect()
    chunks: List[bytes] = [self.source[: self.file.body_start]]

    previous: Optional[_Piece] = None
    anchor: Optional[_Piece] = None
    for piece in pieces:
      if previous is not None:
        chunks.append(self._separator(previous, piece, anchor))
      chunks.append(piece.text)
      previous = piece
      if piece.slot is not None:
        anchor = piece

    chunks.append(self.source[self.file.body_end :])
    return b"".join(chunks).decode("utf-8")

  def _collect(self) -> List[_Piece]:
    pieces = [self._comment_piece(c, CommentPlacement.FILE) for c in self.file.comments]
    for stmt in self.file.statements:
      pieces.extend(self._comment_piece(c, CommentPlacement.LEADING) for c in stmt.leading_comments)
      pieces.append(_Piece(stmt.render(self.source), stmt.slot))
      pieces.extend(self._comment_piece(c, CommentPlacement.TRAILING) for c in stmt.trailing_comments)
    return pieces

  def _comment_piece(self, comment: Comment, placement: CommentPlacement) -> _Piece:
    if comment.slot is not None:
      text = self.source[comment.slot.start : comment.slot.end]
    else:
      text = comment.text.encode("utf-8")
    moved = comment.placement == CommentPlacement.TRAILING and placement != CommentPlacement.TRAILING
    return _Piece(text, comment.slot, moved)

  def _separator(self, previous: _Piece, current: _Piece, anchor: Optional[_Piece]) -> bytes:
    if previous.slot is not None and current.slot is not None and current.slot.ordinal == previous.slot.ordinal + 1:
      gap = self._gap(previous.slot, current.slot)
      if (previous.moved or current.moved) and b"\n" not in gap:
        return self.newline
      return gap

    if previous.slot is None and current.slot is not None and anchor is not None:
      if current.slot.ordinal == anchor.slot.ordinal + 1:
        gap = self._gap(anchor.slot, current.slot)
        if b"\n" in gap:
          return gap

    return self.newline

  def _gap(self, left: Slot, right: Slot) -> bytes:
    return self.source[left.end : right.start]


def render(file: SourceFile) -> str:
  """
  Convenience wrapper around :class:`SourcePrinter`.

  Args:
      file: The tree to render.

  Returns:
      str: Source text.
  """
  return SourcePrinter(file).render()
