"""
Data structures representing the output of one codemod run.

This module defines the `TransformResult` Pydantic model, which encapsulates
the rendered code, what the run changed, and the execution trace.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class TransformResult(BaseModel):
  """
  Container for the results of a single-file transform.
  """

  code: str = Field(default="", description="The rendered source code.")
  actionable: bool = Field(
    default=False,
    description="True if at least one call site matched and was rewritten.",
  )
  rewritten_calls: int = Field(default=0, description="Number of call expressions replaced.")
  import_changed: bool = Field(default=False, description="True if an import was merged or inserted.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def changed(self) -> bool:
    """
    Check if the file needs to be written back.

    Returns:
        True if any call site or import declaration changed.
    """
    return self.rewritten_calls > 0 or self.import_changed
