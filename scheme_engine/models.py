# scheme_engine/models.py
from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, Index
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class SchemeSlab(Base):
    """Explicit scheme tier declared in master data.

    Scope is product plus, optionally, a customer or a division. Rows
    with neither apply to every customer of the product.
    """
    __tablename__ = 'scheme_slabs'

    id = Column(Integer, primary_key=True)
    product_code = Column(String(50), nullable=False)
    product_name = Column(String(255))
    customer_code = Column(String(50), nullable=True)
    division = Column(String(50), nullable=True)
    min_qty = Column(Integer, nullable=False)
    free_qty = Column(Integer, nullable=False, default=0)
    scheme_percent = Column(Float, default=0.0)
    scheme_name = Column(String(255))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    __table_args__ = (
        Index('idx_scheme_slab_scope', 'product_code', 'customer_code', 'division'),
    )

    def __repr__(self):
        return (
            f"<SchemeSlab(product_code='{self.product_code}', min_qty={self.min_qty}, "
            f"free_qty={self.free_qty})>"
        )
