from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class RowRejection(BaseModel):
    row_number: int = Field(..., description="1-based position among parsed data rows")
    row_label: Optional[str] = Field(None, description="Identifying field of the rejected row")
    reason: str


class ImportReport(BaseModel):
    mode: str
    rows_seen: int = 0
    rows_committed: int = 0
    rows_rejected: int = 0
    rejections: List[RowRejection] = Field(default_factory=list)


class ImportTaskResponse(BaseModel):
    id: int
    task_id: str
    mode: str
    status: str
    progress: float
    total_rows: int
    processed_rows: int
    committed_rows: int
    rejected_rows: int
    errors: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
