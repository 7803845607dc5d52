from sqlalchemy import Column, Integer, String, Float, DateTime, Index
from sqlalchemy.sql import func
from catalog_api.database import Base


class ProductPricing(Base):
    __tablename__ = "product_pricing"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, nullable=False, index=True)
    msrp = Column(Float, nullable=False)
    map = Column(Float, nullable=True)
    cost = Column(Float, nullable=True)
    sell = Column(Float, nullable=True)
    base = Column(Float, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)  # open-ended when NULL
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('ix_product_pricing_window', 'product_id', 'start_date'),
    )
