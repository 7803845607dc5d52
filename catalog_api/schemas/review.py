from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ReviewCreate(BaseModel):
    user: Optional[str] = None
    comment: Optional[str] = None
    rating: Optional[int] = None


class ReviewResponse(ReviewCreate):
    id: int
    product_id: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
