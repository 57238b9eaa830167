"""
Render templated Kubernetes manifests and print them in the order in which they must be applied or deleted.
"""

from enum import Enum
import sys
from loguru import logger
from typer import Option, Typer


app = Typer(help=__doc__, no_args_is_help=True, pretty_exceptions_enable=False)


from . import render  # noqa: F401,E402


class LogLevel(str, Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@app.callback()
def _callback(
    log_level: LogLevel = Option(LogLevel.INFO, "--log-level", "-l", help="The log level to use."),
) -> None:
    logger.remove()
    logger.add(sys.stderr, level=log_level.name)
