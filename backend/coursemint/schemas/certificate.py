from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class CertificateRequestCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)


class CertificateRequestRead(BaseModel):
    id: UUID
    user_id: UUID
    course_id: UUID
    full_name: str
    completion_date: datetime
    status: str
    requested_at: datetime

    model_config = {"from_attributes": True}
