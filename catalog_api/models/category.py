from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func
from catalog_api.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    category_name = Column(String, nullable=False, unique=True, index=True)
    url = Column(String, nullable=True)
    parent_category = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    sort_order = Column(String, nullable=True)
    is_visible = Column(Boolean, nullable=True)
    smart_category = Column(Boolean, nullable=True)
    product_must_watch = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
