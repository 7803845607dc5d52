from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON
from sqlalchemy.sql import func
from catalog_api.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    product_name = Column(String, nullable=False, index=True)
    sku = Column(String, nullable=True, index=True)
    short_description = Column(Text, nullable=True)
    long_description = Column(Text, nullable=True)
    shipping_notes = Column(Text, nullable=True)
    warranty_info = Column(Text, nullable=True)
    visible_to_front_end = Column(Boolean, default=False, nullable=False)
    featured_product = Column(Boolean, default=False, nullable=False)
    # Weak references: no foreign keys, the importer validates them at write time
    category_id = Column(Integer, nullable=True, index=True)
    brand_id = Column(Integer, nullable=True, index=True)
    specifications = Column(JSON, nullable=False, default=dict)
    review_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
