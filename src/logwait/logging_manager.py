"""Logging setup for logwait.

Library code only creates loggers under the ``logwait`` namespace; handlers
are attached here, by the command line entry point or by applications that
want the same console and file output.
"""

import logging
import logging.handlers
from pathlib import Path

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s", '
    '"line": %(lineno)d}'
)


class LoggingManager:
    """Configures the ``logwait`` logger with console and optional file output."""

    def __init__(self, log_level: str = "INFO", log_file: str | Path | None = None):
        """Initialize logging manager.

        Args:
            log_level: Level for the console handler (e.g. "DEBUG", "INFO").
            log_file: Optional path of a rotating file that receives every
                record down to DEBUG, including scanned line traces.
        """
        level = getattr(logging, log_level.upper(), None)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        self.log_level = level
        self.log_file = Path(log_file) if log_file else None
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        logger = logging.getLogger("logwait")
        logger.propagate = False
        logger.handlers.clear()

        # Console handler - human readable
        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(
            logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(console_handler)

        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
            logger.addHandler(file_handler)
            logger.setLevel(logging.DEBUG)
        else:
            logger.setLevel(self.log_level)

        return logger

    def close(self) -> None:
        """Detach and close the handlers and hand records back to the root logger."""
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        self.logger.propagate = True
        self.logger.setLevel(logging.NOTSET)


def setup_logging(log_level: str = "INFO", log_file: str | Path | None = None) -> LoggingManager:
    """Configure logwait logging and return the manager."""
    return LoggingManager(log_level=log_level, log_file=log_file)
