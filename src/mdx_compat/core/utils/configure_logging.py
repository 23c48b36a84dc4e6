import logging
import sys
from typing import Dict, Optional, Union

from tqdm import tqdm

LevelLike = Union[str, int]

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
# Used at DEBUG level (--verbose): one short line per rewritten node.
VERBOSE_FORMAT = "  [VERBOSE] %(name)s: %(message)s"


class TqdmAwareHandler(logging.Handler):
    """
    Sends log records through `tqdm.write()` on stderr, so log lines and the
    transformer's progress bar do not overwrite each other.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def resolve_level(level: Optional[LevelLike], fallback: int) -> int:
    """'debug', 'DEBUG' and logging.DEBUG all give logging.DEBUG; unknown names give 'fallback'."""
    if level is None:
        return fallback
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else fallback


def _set_levels(levels: Optional[Dict[str, LevelLike]], fallback: int) -> None:
    for name, level in (levels or {}).items():
        logging.getLogger(name).setLevel(resolve_level(level, fallback))


def configure_logger(
        general_level: LevelLike = "INFO",
        module_specific_levels: Optional[Dict[str, LevelLike]] = None,
        silenced_loggers: Optional[Dict[str, LevelLike]] = None,
) -> logging.Handler:
    """
    Installs a single tqdm-aware handler on the root logger.

    Args:
        general_level: Root level (name or number). DEBUG switches to the verbose trace format.
        module_specific_levels: Per-logger levels, e.g. {"transformer.rules": "DEBUG"}.
        silenced_loggers: Noisy third-party loggers and the level they are capped at.

    Returns:
        The installed handler.
    """
    root_level = resolve_level(general_level, logging.INFO)

    handler = TqdmAwareHandler()
    handler.setFormatter(logging.Formatter(VERBOSE_FORMAT if root_level <= logging.DEBUG else LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    _set_levels(module_specific_levels, logging.INFO)
    _set_levels(silenced_loggers, logging.CRITICAL)
    return handler
