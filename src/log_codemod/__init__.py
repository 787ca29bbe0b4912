"""
log-codemod Package.

A deterministic source-to-source transform for JavaScript and TypeScript that
replaces ambient ``console.error(...)`` calls with a canonical error-logging
function and makes sure the file imports it.

This package exposes the engine and configuration for programmatic usage by a
batch driver.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import log_codemod
    code = "console.error(err);"
    print(log_codemod.transform(code))
    # import { logError } from "src/lib.logger";
    # logError(err);

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from log_codemod import CodemodConfig, CodemodEngine

    config = CodemodConfig(dialect="tsx", import_source="@app/logger")
    engine = CodemodEngine(config=config)
    res = engine.run(source_text)

    if res.changed:
        path.write_text(res.code)
"""

from typing import Any

from log_codemod.config import CodemodConfig
from log_codemod.core.engine import CodemodEngine
from log_codemod.core.errors import CodemodError, InvariantViolation, ParseError
from log_codemod.core.import_fixer import ensure_import
from log_codemod.core.transform_result import TransformResult

__version__ = "0.1.0"


def transform(code: str, dialect: str = "ts", **overrides: Any) -> str:
  """
  Rewrites one file's source text.

  A convenience wrapper around `CodemodEngine` that does not read
  ``pyproject.toml``; every setting is a default unless overridden.

  Args:
      code (str): The source code to transform.
      dialect (str): Grammar to parse with ("js", "jsx", "ts", "tsx").
      **overrides: Any other `CodemodConfig` field (e.g. ``import_source``).

  Returns:
      str: The transformed source, or the input unchanged if nothing matched.

  Raises:
      ParseError: If the code cannot be parsed in the dialect.
      InvariantViolation: If the file holds several value imports from the import source.
      ValueError: If a configuration value is invalid.
  """
  config = CodemodConfig(dialect=dialect, **overrides)
  return CodemodEngine(config=config).run(code).code


__all__ = [
  "CodemodConfig",
  "CodemodEngine",
  "CodemodError",
  "InvariantViolation",
  "ParseError",
  "TransformResult",
  "ensure_import",
  "transform",
  "__version__",
]
