"""
Runtime Configuration Store.

Holds the knobs of a codemod run: which grammar parses the file, which ambient
call shape is targeted, and which canonical function replaces it. Values can
come from the ``[tool.log_codemod]`` table of the nearest ``pyproject.toml``
and be overridden per call by the batch driver.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator
from rich.markup import escape

from log_codemod.enums import Dialect
from log_codemod.utils.console import log_warning

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Parser names accepted by common JS codemod drivers, mapped to our grammars.
_DIALECT_ALIASES = {
  "javascript": "js",
  "babel": "js",
  "babylon": "js",
  "typescript": "ts",
}


class CodemodConfig(BaseModel):
  """
  Configuration container for one codemod invocation.
  """

  dialect: Dialect = Field(Dialect.TS, description="Grammar used to parse the file (js, jsx, ts, tsx).")
  global_object: str = Field("console", description="Ambient logging object whose calls are rewritten.")
  severity: str = Field("error", description="Property of the ambient object that marks the targeted calls.")
  function_name: str = Field("logError", description="Canonical error-logging function to call instead.")
  import_source: str = Field("src/lib.logger", description="Module source that exports the canonical function.")
  local_alias: Optional[str] = Field(None, description="Local name to import the canonical function under.")

  @field_validator("dialect", mode="before")
  @classmethod
  def normalize_dialect(cls, v: Any) -> Any:
    """
    Lower-cases dialect strings and maps driver parser names onto grammars.

    Args:
        v (Any): Raw dialect value (string or Dialect).

    Returns:
        Any: A value pydantic can coerce into :class:`Dialect`.
    """
    if isinstance(v, str) and not isinstance(v, Dialect):
      clean = v.lower().strip()
      return _DIALECT_ALIASES.get(clean, clean)
    return v

  @field_validator("global_object", "severity", "function_name", "local_alias")
  @classmethod
  def validate_identifier(cls, v: Optional[str]) -> Optional[str]:
    """
    Ensures names are valid JavaScript identifiers.

    Args:
        v (Optional[str]): The configured name.

    Returns:
        Optional[str]: The unchanged name.

    Raises:
        ValueError: If the value is not an identifier.
    """
    if v is not None and not _IDENTIFIER.match(v):
      raise ValueError(f"Not a valid identifier: '{v}'")
    return v

  @field_validator("import_source")
  @classmethod
  def validate_import_source(cls, v: str) -> str:
    """
    Rejects empty module sources.

    Args:
        v (str): Module source string.

    Returns:
        str: The unchanged module source.

    Raises:
        ValueError: If the module source is blank.
    """
    if not v.strip():
      raise ValueError("import_source must not be empty")
    return v

  @property
  def callee_name(self) -> str:
    """
    The identifier rewritten call sites use.

    Returns:
        str: The local alias when one is configured, else the function name.
    """
    return self.local_alias or self.function_name

  @classmethod
  def load(cls, search_path: Optional[Path] = None, **overrides: Any) -> "CodemodConfig":
    """
    Loads configuration from pyproject.toml and applies explicit overrides.

    Overrides set to None are ignored, so a driver can pass its optional CLI
    values straight through.

    Args:
        search_path (Optional[Path]): Directory to start searching for TOML config.
        **overrides: Field values that take precedence over the TOML table.

    Returns:
        CodemodConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)
    if toml_dir:
      logger.debug("Loaded [tool.log_codemod] from %s", toml_dir / "pyproject.toml")

    values: Dict[str, Any] = {k: v for k, v in toml_config.items() if k in cls.model_fields}
    values.update({k: v for k, v in overrides.items() if v is not None})
    return cls(**values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        log_warning(f"Ignoring unreadable {toml_path}: {escape(str(e))}")
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("log_codemod", {}), parent

  return {}, None
