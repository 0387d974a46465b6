"""Course progress view: recomputed from the current snapshot on every read."""

import uuid

import pytest
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.derived_views.course_progress import course_progress_view
from coursemint.models.user import User
from coursemint.services import certificate_service, progress_service
from coursemint.services.course_seed import seed_demo_course


async def _setup(db: AsyncSession):
    user = User(email="view@test.com", password_hash="x")
    db.add(user)
    await db.flush()
    course = await seed_demo_course(db)
    return user, course


@pytest.mark.asyncio
async def test_view_without_progress(db_session: AsyncSession):
    user, course = await _setup(db_session)

    view = await course_progress_view(db_session, user.id, course.id)
    assert view["course_title"] == course.title
    assert (view["completed_count"], view["total_count"], view["percentage"]) == (0, 3, 0)
    assert view["can_request_certificate"] is False
    assert view["certificate_status"] is None
    assert [m["total_count"] for m in view["modules"]] == [2, 1]
    assert all(
        lesson["watch_percentage"] == 0 and lesson["completed"] is False
        for m in view["modules"] for lesson in m["lessons"]
    )


@pytest.mark.asyncio
async def test_view_tracks_progress_and_certificate(db_session: AsyncSession):
    user, course = await _setup(db_session)
    m1, m2 = course.modules

    for lesson in m1.lessons:
        await progress_service.upsert_progress(
            db_session, user_id=user.id, lesson_id=lesson.id, watch_percentage=100
        )
    await progress_service.upsert_progress(
        db_session, user_id=user.id, lesson_id=m2.lessons[0].id, watch_percentage=45
    )

    view = await course_progress_view(db_session, user.id, course.id)
    assert view["percentage"] == 67
    assert [m["completed"] for m in view["modules"]] == [True, False]
    assert view["modules"][1]["lessons"][0]["watch_percentage"] == 45
    assert view["can_request_certificate"] is False

    await progress_service.upsert_progress(
        db_session, user_id=user.id, lesson_id=m2.lessons[0].id, watch_percentage=100
    )
    view = await course_progress_view(db_session, user.id, course.id)
    assert view["percentage"] == 100
    assert view["can_request_certificate"] is True

    await certificate_service.request_certificate(
        db_session, user_id=user.id, course_id=course.id, full_name="Ana Souza"
    )
    view = await course_progress_view(db_session, user.id, course.id)
    assert view["can_request_certificate"] is False
    assert view["certificate_status"] == "pending"


@pytest.mark.asyncio
async def test_view_unknown_course(db_session: AsyncSession):
    user, _ = await _setup(db_session)
    with pytest.raises(NoResultFound):
        await course_progress_view(db_session, user.id, uuid.uuid4())
