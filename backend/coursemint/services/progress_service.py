"""Progress service: per-lesson watch progress and completion.

One LessonProgress row per (user, lesson). Writes overwrite the watch
percentage, but ``completed`` is monotonic: once a lesson is completed, a
later write (a stale player event, a rewatch) cannot un-complete it and
``completed_at`` keeps the first completion time.

All writes audit-logged.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.config import settings
from coursemint.core.notifier import Notifier
from coursemint.models.progress import LessonProgress
from coursemint.services import audit_service, course_service

logger = logging.getLogger("coursemint.progress")


async def get_user_progress(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
) -> list[LessonProgress]:
    """All progress records of a user, across courses."""
    result = await db.execute(
        select(LessonProgress)
        .where(LessonProgress.user_id == user_id)
        .order_by(LessonProgress.created_at.asc())
    )
    return list(result.scalars().all())


async def get_course_progress(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    course_id: uuid.UUID,
) -> list[LessonProgress]:
    """Progress records of a user for one course."""
    result = await db.execute(
        select(LessonProgress)
        .where(
            LessonProgress.user_id == user_id,
            LessonProgress.course_id == course_id,
        )
        .order_by(LessonProgress.created_at.asc())
    )
    return list(result.scalars().all())


async def get_progress_for_lesson(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    lesson_id: uuid.UUID,
) -> LessonProgress | None:
    result = await db.execute(
        select(LessonProgress).where(
            LessonProgress.user_id == user_id,
            LessonProgress.lesson_id == lesson_id,
        )
    )
    return result.scalar_one_or_none()


async def _insert_progress(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    lesson_id: uuid.UUID,
    course_id: uuid.UUID,
) -> LessonProgress | None:
    """Insert an empty record; None if a concurrent request inserted it first."""
    progress = LessonProgress(
        user_id=user_id,
        lesson_id=lesson_id,
        course_id=course_id,
        watch_percentage=0,
        completed=False,
    )
    try:
        async with db.begin_nested():
            db.add(progress)
            await db.flush()
    except IntegrityError:
        logger.info("progress row for lesson=%s created concurrently, updating it", lesson_id)
        return None
    return progress


async def upsert_progress(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    lesson_id: uuid.UUID,
    watch_percentage: int,
    completed: bool = False,
    ip_address: str | None = None,
    notifier: Notifier | None = None,
) -> LessonProgress:
    """Record a watch event for a lesson.

    Raises ValueError for a percentage outside 0..100 and NoResultFound for
    an unknown lesson.
    """
    if not 0 <= watch_percentage <= 100:
        raise ValueError(
            f"Invalid watch_percentage {watch_percentage}. Must be between 0 and 100."
        )

    lesson, course_id = await course_service.get_lesson_with_course_id(db, lesson_id=lesson_id)

    if watch_percentage >= settings.auto_complete_watch_percentage:
        completed = True

    progress = await get_progress_for_lesson(db, user_id=user_id, lesson_id=lesson_id)
    if progress is None:
        progress = await _insert_progress(
            db, user_id=user_id, lesson_id=lesson_id, course_id=course_id
        )
    if progress is None:
        progress = await get_progress_for_lesson(db, user_id=user_id, lesson_id=lesson_id)

    newly_completed = completed and not progress.completed
    if progress.completed and not completed:
        logger.debug("kept completed=True for lesson=%s despite stale write", lesson_id)

    progress.watch_percentage = watch_percentage
    if newly_completed:
        progress.completed = True
        progress.completed_at = datetime.now(timezone.utc)
    await db.flush()

    await audit_service.log_event(
        db,
        user_id=user_id,
        event_type="lesson.progress_updated",
        entity_type="LessonProgress",
        entity_id=progress.id,
        action="upsert",
        detail={
            "lesson_id": str(lesson_id),
            "watch_percentage": watch_percentage,
            "completed": progress.completed,
        },
        ip_address=ip_address,
    )

    if newly_completed:
        await audit_service.log_event(
            db,
            user_id=user_id,
            event_type="lesson.completed",
            entity_type="LessonProgress",
            entity_id=progress.id,
            action="complete",
            detail={"lesson_id": str(lesson_id), "lesson_title": lesson.title},
            ip_address=ip_address,
        )
        if notifier is not None:
            notifier.notify(user_id, "lesson_completed", f"Lesson completed: {lesson.title}")

    return progress
