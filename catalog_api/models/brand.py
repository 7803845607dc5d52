from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from catalog_api.database import Base


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True)
    brand_name = Column(String, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    assets = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
