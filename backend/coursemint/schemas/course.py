from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class LessonRead(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    duration: str | None = None
    video_url: str | None = None
    order_index: int

    model_config = {"from_attributes": True}


class ModuleRead(BaseModel):
    id: UUID
    title: str
    order_index: int
    lessons: list[LessonRead]

    model_config = {"from_attributes": True}


class CourseSummaryRead(BaseModel):
    id: UUID
    title: str
    description_short: str
    status: str
    price: Decimal
    currency: str
    level: str
    category: str
    language: str

    model_config = {"from_attributes": True}


class CourseRead(CourseSummaryRead):
    modules: list[ModuleRead]


class NavigationRead(BaseModel):
    current: LessonRead | None = None
    next: LessonRead | None = None
    previous: LessonRead | None = None
    has_next: bool
    has_previous: bool
    position: int
    total: int
