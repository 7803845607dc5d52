from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from catalog_api.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, nullable=False, index=True)
    user = Column(String, nullable=True)
    comment = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
