from sqlalchemy import Column, Integer, String, Index
from catalog_api.database import Base


class ProductInventory(Base):
    __tablename__ = "product_inventory"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, nullable=False, index=True)
    bin = Column(String, nullable=False)
    location = Column(String, nullable=False)
    source = Column(String, nullable=False)
    on_hand = Column(Integer, default=0, nullable=False)
    on_hold = Column(Integer, default=0, nullable=False)

    # Upsert key, not enforced as unique
    __table_args__ = (
        Index('ix_product_inventory_key', 'product_id', 'bin', 'location'),
    )
