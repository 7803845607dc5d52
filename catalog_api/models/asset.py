import enum
from sqlalchemy import Column, Integer, String, DateTime, LargeBinary, Enum, Index
from sqlalchemy.sql import func
from catalog_api.database import Base


class AssetType(str, enum.Enum):
    IMAGE = "Image"
    VIDEO = "Video"
    DOCUMENT = "Document"
    OTHER = "Other"


class ProductAsset(Base):
    __tablename__ = "product_assets"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, nullable=False, index=True)
    # Sequence number within the owning product
    product_asset_id = Column(Integer, nullable=False)
    file_name = Column(String, nullable=False)
    type = Column(Enum(AssetType, values_callable=lambda e: [m.value for m in e], native_enum=False), nullable=False)
    extension = Column(String, nullable=False)
    binary_data = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('ix_product_assets_product_seq', 'product_id', 'product_asset_id'),
    )
