"""
Logging for the Codemod.

Every message goes to the `log_codemod` package logger. Importing the library
installs no handler, so an embedding tool keeps control of its own logging;
without a handler only warnings reach stderr (via `logging.lastResort`).

A batch driver that wants per-file progress calls `set_console` with a rich
`Console` (stdout, a file, or a recording console it reads back after each
file). That attaches a single `RichHandler` to the package logger.

Attributes:
    logger (logging.Logger): The package logger.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

# Between INFO and WARNING, used for "import added" messages
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

THEME = Theme({"logging.level.success": "green"})

logger = logging.getLogger("log_codemod")


def _drop_rich_handlers() -> None:
  for handler in list(logger.handlers):
    if isinstance(handler, RichHandler):
      logger.removeHandler(handler)


def set_console(new_console: Optional[Console] = None, level: int = logging.INFO) -> RichHandler:
  """
  Routes the package's log records to a rich console.

  Replaces any handler installed by an earlier call, so records are never
  emitted twice.

  Args:
      new_console: Destination console. A themed stdout console if None.
      level: Minimum level shown.

  Returns:
      RichHandler: The installed handler.
  """
  _drop_rich_handlers()
  handler = RichHandler(
    console=new_console or Console(theme=THEME),
    show_time=False,
    show_path=False,
    markup=True,
    rich_tracebacks=True,
  )
  logger.addHandler(handler)
  logger.setLevel(level)
  return handler


def reset_console() -> None:
  """Detaches the rich handler and returns the package logger to its defaults."""
  _drop_rich_handlers()
  logger.setLevel(logging.NOTSET)


def file_label(path: Optional[str]) -> str:
  """Markup prefix naming the file a message is about ('' when unnamed)."""
  return f"[bold blue]{escape(path)}[/bold blue]: " if path else ""


def log_info(msg: str) -> None:
  logger.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  logger.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  logger.warning(f"⚠️  {msg}", extra={"markup": True})
