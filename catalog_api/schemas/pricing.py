from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class PricingUpsert(BaseModel):
    """Incoming price record; accepts ``productId`` style keys as well.

    Required fields are checked by the ledger so that a missing one surfaces
    as a catalog ``ValidationError`` naming every absent field.
    """
    product_id: Optional[int] = None
    msrp: Optional[float] = None
    map: Optional[float] = None
    cost: Optional[float] = None
    sell: Optional[float] = None
    base: Optional[float] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_by: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PricingResponse(BaseModel):
    id: int
    product_id: int
    msrp: float
    map: Optional[float] = None
    cost: Optional[float] = None
    sell: Optional[float] = None
    base: Optional[float] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    created_by: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
