"""Course routes: catalogue, lesson tree, progress view, lesson navigation."""

import uuid as uuid_mod

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.core.auth import get_current_user
from coursemint.dependencies import get_db
from coursemint.derived_views.course_progress import course_progress_view
from coursemint.models.user import User
from coursemint.schemas.course import CourseRead, CourseSummaryRead, LessonRead, NavigationRead
from coursemint.schemas.progress import CourseProgressView
from coursemint.services import course_service
from coursemint.services.navigation import LessonNavigator, next_lesson, previous_lesson

router = APIRouter(prefix="/courses", tags=["courses"])


def parse_uuid(value: str, field: str) -> uuid_mod.UUID:
    try:
        return uuid_mod.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {field}")


@router.get("", response_model=list[CourseSummaryRead])
async def list_courses(
    category: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Published courses, optionally filtered by category."""
    courses = await course_service.list_courses(db, category=category)
    return [CourseSummaryRead.model_validate(c) for c in courses]


@router.get("/{course_id}", response_model=CourseRead)
async def get_course(
    course_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """A course with its modules and lessons in order."""
    cid = parse_uuid(course_id, "course_id")
    try:
        course = await course_service.get_course(db, course_id=cid)
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Course not found")
    return CourseRead.model_validate(course)


@router.get("/{course_id}/progress", response_model=CourseProgressView)
async def get_course_progress(
    course_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Completion of the course, each module and each lesson for the current learner."""
    cid = parse_uuid(course_id, "course_id")
    try:
        return await course_progress_view(db, current_user.id, cid)
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Course not found")


@router.get("/{course_id}/navigation", response_model=NavigationRead)
async def get_navigation(
    course_id: str,
    lesson_id: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Neighbours of a lesson. Without lesson_id, starts at the first lesson.

    An unknown lesson_id is not an error: every neighbour comes back empty.
    """
    cid = parse_uuid(course_id, "course_id")
    try:
        await course_service.get_course(db, course_id=cid)
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Course not found")
    modules = await course_service.get_modules_with_lessons(db, course_id=cid)

    navigator = LessonNavigator(modules)
    if lesson_id is None:
        navigator.start()
    else:
        navigator.go_to(parse_uuid(lesson_id, "lesson_id"))

    current = navigator.current_lesson
    nxt = next_lesson(modules, navigator.current_lesson_id)
    prev = previous_lesson(modules, navigator.current_lesson_id)
    position, total = navigator.position()

    return NavigationRead(
        current=LessonRead.model_validate(current) if current else None,
        next=LessonRead.model_validate(nxt) if nxt else None,
        previous=LessonRead.model_validate(prev) if prev else None,
        has_next=nxt is not None,
        has_previous=prev is not None,
        position=position,
        total=total,
    )
