import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

_logger = logging.getLogger(__name__)


def _create_plain_handler():
    h = logging.StreamHandler(sys.stdout)
    h.terminator = ""
    h.setFormatter(logging.Formatter("%(message)s"))
    return h


def _create_rich_handler():
    console = Console()
    h = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=True,
    )
    h.terminator = ""
    h.setFormatter(logging.Formatter("%(message)s"))
    return h


_handler = _create_rich_handler()
_plain = False
_logger.setLevel(logging.INFO)
_logger.propagate = False
_logger.addHandler(_handler)


def _log(level, msg, new_line=True):
    if new_line and not msg.endswith("\n"):
        msg += "\n"
    _logger.log(level, msg)


def debug(msg, new_line=True):
    _log(logging.DEBUG, msg, new_line)


def info(msg, new_line=True):
    _log(logging.INFO, msg, new_line)


def warning(msg, new_line=True):
    _log(logging.WARNING, msg, new_line)


def error(msg, new_line=True):
    _log(logging.ERROR, msg, new_line)


def set_default_level(level):
    _logger.setLevel(level.upper() if isinstance(level, str) else level)


def use_plain_output():
    """Swaps the rich handler for a plain one, needed for GitHub workflow commands."""
    global _handler, _plain
    if _plain:
        return
    _logger.removeHandler(_handler)
    _handler = _create_plain_handler()
    _logger.addHandler(_handler)
    _plain = True


def text(s) -> str:
    """Escapes user provided text so it's never interpreted as rich markup."""
    s = str(s)
    return s if _plain else escape(s)


def format_annotation(message: str, title: str = None) -> str:
    """Formats a message as a GitHub Actions '::error::' workflow command."""
    data = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    if title:
        title = title.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        title = title.replace(":", "%3A").replace(",", "%2C")
        return f"::error title={title}::{data}"
    return f"::error::{data}"


def report_failure(message: str, title: str = None):
    if _plain:
        _log(logging.ERROR, format_annotation(message, title))
    else:
        _log(logging.ERROR, f"[red]✗ {escape(message)}[/red]")
