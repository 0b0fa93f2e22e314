from .scheme_repository import (
    SchemeRepository, InMemorySchemeRepository, SqlSchemeRepository, select_scope
)
from .scheme_service import (
    SchemeService, SchemeEvaluation,
    STATUS_NO_SCHEME, STATUS_BELOW_MINIMUM, STATUS_APPLIED
)
from .reporting import build_scheme_report, format_qty_plus_free, is_scheme_line

__all__ = [
    'SchemeRepository',
    'InMemorySchemeRepository',
    'SqlSchemeRepository',
    'select_scope',
    'SchemeService',
    'SchemeEvaluation',
    'STATUS_NO_SCHEME',
    'STATUS_BELOW_MINIMUM',
    'STATUS_APPLIED',
    'build_scheme_report',
    'format_qty_plus_free',
    'is_scheme_line'
]
