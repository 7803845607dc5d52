from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class InventoryUpsert(BaseModel):
    product_id: Optional[int] = None
    bin: Optional[str] = None
    location: Optional[str] = None
    source: Optional[str] = None
    on_hand: Optional[int] = None
    on_hold: Optional[int] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InventoryResponse(BaseModel):
    id: int
    product_id: int
    bin: str
    location: str
    source: str
    on_hand: int
    on_hold: int

    model_config = {"from_attributes": True}
