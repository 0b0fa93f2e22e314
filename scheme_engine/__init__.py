from .config import config
from .db import db, session_scope
from .logging_setup import logger, get_logger, log_exception
from .exceptions import (
    SchemeEngineError, ConfigError, DatabaseError, ValidationError,
    RepositoryError, NotFoundError
)

__all__ = [
    'config',
    'db',
    'session_scope',
    'logger',
    'get_logger',
    'log_exception',
    'SchemeEngineError',
    'ConfigError',
    'DatabaseError',
    'ValidationError',
    'RepositoryError',
    'NotFoundError'
]
