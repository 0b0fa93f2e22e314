import logging
import logging.handlers
from pathlib import Path
import traceback

from scheme_engine.config import config
from scheme_engine.exceptions import SchemeEngineError

class Logger:
    """Logging manager for scheme calculations and tools."""

    _instance = None
    _loggers = {}

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Set up the console output once; file handlers are added per named logger."""
        if self._initialized:
            return

        self._log_config = config.log_config
        self._log_dir = Path(self._log_config['directory'])
        self._level = getattr(logging, self._log_config['level'].upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(self._level)
        if self._log_config['console_output'] and not root_logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(self._log_config['format']))
            root_logger.addHandler(console_handler)

        self._initialized = True

    def _file_handler(self, name):
        if not self._log_dir.exists():
            self._log_dir.mkdir(parents=True)

        handler = logging.handlers.RotatingFileHandler(
            self._log_dir / f"{name}.log",
            maxBytes=self._log_config['max_size_mb'] * 1024 * 1024,
            backupCount=self._log_config['backup_count']
        )
        handler.setFormatter(logging.Formatter(self._log_config['format']))
        return handler

    def get_logger(self, name):
        """Get a logger writing to logs/<name>.log.

        Records still propagate to the root console handler.

        Args:
            name: Logger name, e.g. 'scheme_cli'

        Returns:
            Configured logger instance
        """
        if name not in self._loggers:
            named = logging.getLogger(name)
            named.setLevel(self._level)
            named.addHandler(self._file_handler(name))
            self._loggers[name] = named
        return self._loggers[name]

    def log_exception(self, logger_name, exception, message=None):
        """Log a failed scheme operation.

        Scheme engine errors are logged with their code and details, the
        stack trace only at DEBUG. Anything else is logged with its trace.

        Args:
            logger_name: Logger name
            exception: Exception object
            message: Optional context, e.g. the command that failed
        """
        named = self.get_logger(logger_name)
        text = f"{message}: {exception}" if message else str(exception)

        if isinstance(exception, SchemeEngineError):
            named.error(text)
            if exception.details:
                named.error(f"Details: {exception.details}")
            named.debug(traceback.format_exc())
        else:
            named.error(f"{text}\n{traceback.format_exc()}")

# Global logger instance
logger = Logger()

def get_logger(name):
    """Get a logger with the specified name."""
    return logger.get_logger(name)

def log_exception(logger_name, exception, message=None):
    """Log an exception through the named logger."""
    logger.log_exception(logger_name, exception, message)
