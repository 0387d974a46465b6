"""Course service: read access to published courses and their lesson tree.

The module/lesson tree returned here is the only course structure the
progress code works from.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from coursemint.models.course import Course, CourseStatus, Lesson, Module, ProductType


async def list_courses(
    db: AsyncSession,
    *,
    status: CourseStatus | None = CourseStatus.published,
    category: str | None = None,
) -> list[Course]:
    """List courses (not e-books), by default only published ones."""
    stmt = (
        select(Course)
        .where(Course.product_type == ProductType.course)
        .order_by(Course.title.asc())
    )
    if status is not None:
        stmt = stmt.where(Course.status == status)
    if category:
        stmt = stmt.where(Course.category == category)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_course(db: AsyncSession, *, course_id: uuid.UUID) -> Course:
    """Get a course with its full tree. Raises NoResultFound if missing."""
    result = await db.execute(
        select(Course)
        .where(Course.id == course_id, Course.product_type == ProductType.course)
        .options(selectinload(Course.modules).selectinload(Module.lessons))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def get_modules_with_lessons(
    db: AsyncSession,
    *,
    course_id: uuid.UUID,
) -> list[Module]:
    """Modules of a course, each with its lessons, both ordered by order_index."""
    result = await db.execute(
        select(Module)
        .where(Module.course_id == course_id)
        .order_by(Module.order_index.asc())
        .options(selectinload(Module.lessons))
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_lesson_with_course_id(
    db: AsyncSession,
    *,
    lesson_id: uuid.UUID,
) -> tuple[Lesson, uuid.UUID]:
    """A lesson and the id of the course it belongs to. Raises NoResultFound."""
    result = await db.execute(
        select(Lesson, Module.course_id)
        .join(Module, Lesson.module_id == Module.id)
        .where(Lesson.id == lesson_id)
    )
    lesson, course_id = result.one()
    return lesson, course_id
