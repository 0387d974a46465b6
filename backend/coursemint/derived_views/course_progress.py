"""Course progress view: completion per course, module and lesson."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.services import certificate_service, course_service, progress_service
from coursemint.services.completion import (
    can_request_certificate,
    compute_course_completion,
    is_module_completed,
    module_completion,
)
from coursemint.services.lesson_tree import ordered_lessons, ordered_modules


async def course_progress_view(
    db: AsyncSession,
    user_id: uuid.UUID,
    course_id: uuid.UUID,
) -> dict:
    """Everything a course player needs to draw progress bars and the sidebar.

    Raises NoResultFound for an unknown course.
    """
    course = await course_service.get_course(db, course_id=course_id)
    modules = await course_service.get_modules_with_lessons(db, course_id=course_id)
    records = await progress_service.get_course_progress(
        db, user_id=user_id, course_id=course_id
    )
    request = await certificate_service.get_request(db, user_id=user_id, course_id=course_id)

    by_lesson = {r.lesson_id: r for r in records}
    summary = compute_course_completion(modules, records)

    module_views = []
    for module in ordered_modules(modules):
        module_summary = module_completion(module, records)
        lessons = []
        for lesson in ordered_lessons(module):
            record = by_lesson.get(lesson.id)
            lessons.append({
                "id": str(lesson.id),
                "title": lesson.title,
                "duration": lesson.duration,
                "completed": bool(record and record.completed),
                "watch_percentage": record.watch_percentage if record else 0,
            })
        module_views.append({
            "id": str(module.id),
            "title": module.title,
            "completed": is_module_completed(module, records),
            "completed_count": module_summary.completed_count,
            "total_count": module_summary.total_count,
            "percentage": module_summary.percentage,
            "lessons": lessons,
        })

    existing = 1 if request is not None else 0
    return {
        "course_id": str(course.id),
        "course_title": course.title,
        "completed_count": summary.completed_count,
        "total_count": summary.total_count,
        "percentage": summary.percentage,
        "can_request_certificate": (
            summary.total_count > 0 and can_request_certificate(modules, records, existing)
        ),
        "certificate_status": request.status.value if request else None,
        "modules": module_views,
    }
