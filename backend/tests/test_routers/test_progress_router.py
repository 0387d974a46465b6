"""Progress routes: watch events, monotonic completion, listing."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.services import progress_service
from coursemint.services.course_seed import seed_demo_course
from factories import register_and_login


async def _post(client: AsyncClient, headers: dict, lesson_id, pct: int, completed: bool = False):
    return await client.post(
        "/progress",
        json={"lesson_id": str(lesson_id), "watch_percentage": pct, "completed": completed},
        headers=headers,
    )


@pytest.mark.asyncio
async def test_upsert_progress(client: AsyncClient, db_session: AsyncSession):
    headers = await register_and_login(client)
    course = await seed_demo_course(db_session)
    lesson = course.modules[0].lessons[0]

    resp = await _post(client, headers, lesson.id, 35)
    assert resp.status_code == 200
    data = resp.json()
    assert data["watch_percentage"] == 35
    assert data["completed"] is False
    assert data["course_id"] == str(course.id)


@pytest.mark.asyncio
async def test_stale_write_keeps_completion(client: AsyncClient, db_session: AsyncSession, notifier):
    headers = await register_and_login(client)
    course = await seed_demo_course(db_session)
    lesson = course.modules[0].lessons[0]

    assert (await _post(client, headers, lesson.id, 90, completed=True)).json()["completed"] is True
    data = (await _post(client, headers, lesson.id, 20)).json()
    assert data["completed"] is True
    assert data["watch_percentage"] == 20
    assert notifier.kinds() == ["lesson_completed"]


@pytest.mark.asyncio
async def test_out_of_range_percentage_is_422(client: AsyncClient, db_session: AsyncSession):
    headers = await register_and_login(client)
    course = await seed_demo_course(db_session)
    lesson = course.modules[0].lessons[0]

    assert (await _post(client, headers, lesson.id, 101)).status_code == 422
    assert (await _post(client, headers, lesson.id, -5)).status_code == 422


@pytest.mark.asyncio
async def test_unknown_and_invalid_lesson(client: AsyncClient):
    headers = await register_and_login(client)
    assert (await _post(client, headers, uuid.uuid4(), 10)).status_code == 404
    assert (await _post(client, headers, "not-a-uuid", 10)).status_code == 400


@pytest.mark.asyncio
async def test_list_progress(client: AsyncClient, db_session: AsyncSession):
    headers = await register_and_login(client)
    course = await seed_demo_course(db_session)
    lessons = [l for m in course.modules for l in m.lessons]

    await _post(client, headers, lessons[0].id, 100)
    await _post(client, headers, lessons[2].id, 10)

    resp = await client.get("/progress", headers=headers)
    assert resp.status_code == 200
    assert len(resp.json()) == 2

    resp = await client.get("/progress", params={"course_id": str(course.id)}, headers=headers)
    assert {r["lesson_id"] for r in resp.json()} == {str(lessons[0].id), str(lessons[2].id)}

    resp = await client.get("/progress", params={"course_id": str(uuid.uuid4())}, headers=headers)
    assert resp.json() == []


@pytest.mark.asyncio
async def test_progress_is_per_learner(client: AsyncClient, db_session: AsyncSession):
    course = await seed_demo_course(db_session)
    lesson = course.modules[0].lessons[0]
    ana = await register_and_login(client, "ana@test.com")
    bia = await register_and_login(client, "bia@test.com")

    await _post(client, ana, lesson.id, 100)

    resp = await client.get("/progress", headers=bia)
    assert resp.json() == []


@pytest.mark.asyncio
async def test_backend_failure_is_503_and_notifies(
    client: AsyncClient, db_session: AsyncSession, notifier, monkeypatch
):
    headers = await register_and_login(client)
    course = await seed_demo_course(db_session)
    lesson = course.modules[0].lessons[0]
    await _post(client, headers, lesson.id, 40)

    async def unavailable(db, *, user_id, lesson_id):
        raise OperationalError("SELECT lesson_progress", {}, Exception("connection lost"))

    monkeypatch.setattr(progress_service, "get_progress_for_lesson", unavailable)

    resp = await _post(client, headers, lesson.id, 90)
    assert resp.status_code == 503
    body = resp.json()
    assert body["error"] is True
    assert body["status_code"] == 503
    assert body["detail"] == "Service temporarily unavailable"
    assert notifier.kinds() == ["error"]

    monkeypatch.undo()
    resp = await client.get("/progress", headers=headers)
    assert [r["watch_percentage"] for r in resp.json()] == [40]
