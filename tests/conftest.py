"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console isolation so captured output does not leak between tests.
- A `run_codemod` helper fixture for end-to-end transforms.
"""

import sys
from pathlib import Path
from typing import Callable

import pytest

# Add src to path so we can import 'log_codemod' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from log_codemod.config import CodemodConfig  # noqa: E402
from log_codemod.core.engine import CodemodEngine  # noqa: E402
from log_codemod.core.transform_result import TransformResult  # noqa: E402
from log_codemod.utils.console import reset_console  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_console():
  """Restores the stdout console after tests that inject a capturing one."""
  yield
  reset_console()


@pytest.fixture
def run_codemod() -> Callable[..., TransformResult]:
  """
  Returns a helper running the engine with defaults plus overrides.

  The helper never reads ``pyproject.toml`` so results do not depend on the cwd.
  """

  def _run(code: str, **overrides) -> TransformResult:
    config = CodemodConfig(**overrides)
    return CodemodEngine(config=config).run(code)

  return _run
