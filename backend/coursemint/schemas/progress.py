from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class LessonProgressRead(BaseModel):
    id: UUID
    user_id: UUID
    course_id: UUID
    lesson_id: UUID
    watch_percentage: int
    completed: bool
    completed_at: datetime | None = None
    updated_at: datetime

    model_config = {"from_attributes": True}


class UpsertProgressRequest(BaseModel):
    lesson_id: str
    watch_percentage: int = Field(..., ge=0, le=100)
    completed: bool = False


class LessonProgressView(BaseModel):
    id: str
    title: str
    duration: str | None = None
    completed: bool
    watch_percentage: int


class ModuleProgressView(BaseModel):
    id: str
    title: str
    completed: bool
    completed_count: int
    total_count: int
    percentage: int
    lessons: list[LessonProgressView]


class CourseProgressView(BaseModel):
    course_id: str
    course_title: str
    completed_count: int
    total_count: int
    percentage: int
    can_request_certificate: bool
    certificate_status: str | None = None
    modules: list[ModuleProgressView]
