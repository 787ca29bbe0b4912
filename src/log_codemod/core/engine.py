"""
Orchestration Engine for the Codemod.

This module provides the `CodemodEngine`, the driver for one file. The pipeline:

1.  **Parse**: builds a `SourceFile` with the configured dialect. Syntax errors
    raise `ParseError` to the caller.
2.  **Rewrite Call Sites**: the `CallSiteRewriter` replaces ambient
    `console.error(...)` calls, skipping those whose object is shadowed.
3.  **Ensure Import**: only when at least one call was rewritten, the import
    consolidator makes the canonical function available.
4.  **Render**: the printer reproduces every untouched byte.

A file with nothing to rewrite is returned unchanged (not actionable).
"""

from typing import Optional

from log_codemod.config import CodemodConfig
from log_codemod.core.import_fixer import ensure_import
from log_codemod.core.rewriter import CallSiteRewriter
from log_codemod.core.tracer import TraceLogger
from log_codemod.core.transform_result import TransformResult
from log_codemod.core.tree.nodes import SourceFile
from log_codemod.core.tree.parser import SourceParser
from log_codemod.core.tree.printer import render
from log_codemod.utils.console import file_label, log_info, log_success


class CodemodEngine:
  """
  The per-file transformation unit.

  Holds configuration only; every `run` builds its own tree and trace log.
  """

  def __init__(self, config: Optional[CodemodConfig] = None):
    """
    Initializes the Engine.

    Args:
        config (CodemodConfig, optional): The run configuration. Loaded from
            ``pyproject.toml`` (or defaults) if None.
    """
    self.config = config or CodemodConfig.load()
    self.parser = SourceParser(self.config.dialect)

  def parse(self, code: str) -> SourceFile:
    """
    Parses source text with the configured dialect.

    Args:
        code (str): JavaScript / TypeScript source.

    Returns:
        SourceFile: The parsed tree.

    Raises:
        ParseError: If the input is not valid in the dialect.
    """
    return self.parser.parse(code)

  def to_source(self, file: SourceFile) -> str:
    """
    Renders a tree back to source text.

    Args:
        file (SourceFile): The (possibly edited) tree.

    Returns:
        str: Source text.
    """
    return render(file)

  def run(self, code: str, path: Optional[str] = None) -> TransformResult:
    """
    Executes the full pipeline on one file.

    Args:
        code (str): The input source string.
        path (str, optional): File name used to label log messages.

    Returns:
        TransformResult: Rendered code, change summary and trace.

    Raises:
        ParseError: If the input cannot be parsed.
        InvariantViolation: If the file holds several value imports from the import source.
    """
    tracer = TraceLogger()
    cfg = self.config
    tracer.start_phase("Codemod Pipeline", f"{cfg.global_object}.{cfg.severity} -> {cfg.callee_name}")

    tracer.start_phase("Parse", f"dialect={cfg.dialect.value}")
    file = self.parse(code)
    tracer.end_phase()

    tracer.start_phase("Rewrite Call Sites", "Scope-aware call matching")
    rewriter = CallSiteRewriter(cfg.global_object, cfg.severity, cfg.callee_name, tracer=tracer)
    rewritten = rewriter.rewrite(file)
    tracer.end_phase()

    if rewritten == 0:
      tracer.end_phase()
      return TransformResult(code=code, actionable=False, trace_events=tracer.export())

    tracer.start_phase("Ensure Import", cfg.import_source)
    import_changed = ensure_import(file, cfg.function_name, cfg.import_source, cfg.local_alias, tracer=tracer)
    tracer.end_phase()

    label = file_label(path)
    log_info(f"{label}Rewrote {rewritten} call site(s) to {cfg.callee_name}")
    if import_changed:
      log_success(f"{label}Added '{cfg.function_name}' import from '{cfg.import_source}'")

    output = self.to_source(file)
    tracer.end_phase()
    return TransformResult(
      code=output,
      actionable=True,
      rewritten_calls=rewritten,
      import_changed=import_changed,
      trace_events=tracer.export(),
    )
