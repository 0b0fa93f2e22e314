# scheme_engine/services/scheme_repository.py
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from scheme_engine.core.tiers import SchemeTier
from scheme_engine.exceptions import RepositoryError
from scheme_engine.models import SchemeSlab

logger = logging.getLogger(__name__)

def _matches(value: Optional[str], wanted: Optional[str]) -> bool:
    return bool(value) and bool(wanted) and str(value).strip().upper() == str(wanted).strip().upper()

def select_scope(records: Iterable[Any], customer_code: Optional[str], division: Optional[str]) -> List[Any]:
    """Pick the most specific scope that has tiers.

    Customer-specific tiers win over division-wide tiers, which win over
    product-wide tiers (no customer and no division).

    Args:
        records: Active tier records of one product, in declared order
        customer_code: Customer placing the order
        division: Product division

    Returns:
        Records of the winning scope, possibly empty
    """
    records = list(records)

    customer_rows = [r for r in records if _matches(r.customer_code, customer_code)]
    if customer_rows:
        return customer_rows

    division_rows = [
        r for r in records
        if not r.customer_code and _matches(r.division, division)
    ]
    if division_rows:
        return division_rows

    return [r for r in records if not r.customer_code and not r.division]

class SchemeRepository(ABC):
    """Read-only source of explicit scheme tiers."""

    @abstractmethod
    def get_tiers(
        self,
        product_code: str,
        customer_code: Optional[str] = None,
        division: Optional[str] = None
    ) -> List[SchemeTier]:
        """Get explicit tiers for a product scope.

        An empty list means the product has no active scheme.
        """

class InMemorySchemeRepository(SchemeRepository):
    """Repository over plain records, for previews and tests."""

    def __init__(self, records: Optional[Iterable[Any]] = None):
        self._records = []
        for record in records or []:
            self.add(record)

    def add(self, record: Any) -> None:
        """Add a SchemeSlab (or any object with the same attributes)."""
        self._records.append(record)

    def get_tiers(self, product_code, customer_code=None, division=None):
        records = [
            r for r in self._records
            if r.product_code == product_code and getattr(r, 'is_active', True) is not False
        ]
        return [SchemeTier.from_record(r) for r in select_scope(records, customer_code, division)]

class SqlSchemeRepository(SchemeRepository):
    """Repository over the scheme_slabs table."""

    def __init__(self, session: Session):
        """Initialize the repository.

        Args:
            session: Database session
        """
        self.session = session

    def get_tiers(self, product_code, customer_code=None, division=None):
        statement = (
            select(SchemeSlab)
            .where(SchemeSlab.product_code == product_code)
            .where(SchemeSlab.is_active.is_(True))
            .order_by(SchemeSlab.id)
        )

        try:
            records = self.session.execute(statement).scalars().all()
        except SQLAlchemyError as e:
            raise RepositoryError(
                f"Error loading scheme tiers for product {product_code}: {e}",
                details={'product_code': product_code}
            )

        scoped = select_scope(records, customer_code, division)
        logger.debug(
            f"Loaded {len(scoped)} of {len(records)} active tiers for product {product_code} "
            f"(customer={customer_code}, division={division})"
        )

        return [SchemeTier.from_record(r) for r in scoped]
