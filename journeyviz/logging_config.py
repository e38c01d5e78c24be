import logging
import sys

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# matplotlib's font cache and PIL log every lookup at DEBUG
QUIET_LOGGERS = ('matplotlib', 'PIL')

_LEVEL_COLORS = {
    logging.DEBUG: '\033[36m',
    logging.INFO: '\033[32m',
    logging.WARNING: '\033[33m',
    logging.ERROR: '\033[31m',
    logging.CRITICAL: '\033[35m',
}


class _LevelColorFormatter(logging.Formatter):
    """Bold, colored level names; the record itself is left untouched for other handlers."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}\033[1m{record.levelname}\033[0m"
        return super().format(colored)


def setup_logging(level: int | str = logging.INFO) -> None:
    """Route pipeline logs to stdout, replacing any handlers set up by an earlier run."""
    if isinstance(level, str):
        name, level = level, logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level {name!r}")

    formatter_cls = _LevelColorFormatter if sys.stdout.isatty() else logging.Formatter
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter_cls(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
