"""Certificate routes: request once, only at full completion."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.services.course_seed import seed_demo_course
from factories import register_and_login


async def _complete_lessons(client: AsyncClient, headers: dict, lessons) -> None:
    for lesson in lessons:
        await client.post(
            "/progress",
            json={"lesson_id": str(lesson.id), "watch_percentage": 100, "completed": True},
            headers=headers,
        )


@pytest.mark.asyncio
async def test_certificate_flow(client: AsyncClient, db_session: AsyncSession, notifier):
    headers = await register_and_login(client)
    course = await seed_demo_course(db_session)
    m1, m2 = course.modules

    await _complete_lessons(client, headers, m1.lessons)
    resp = await client.post(
        f"/courses/{course.id}/certificate", json={"full_name": "Ana Souza"}, headers=headers
    )
    assert resp.status_code == 400
    assert "2/3" in resp.json()["detail"]

    await _complete_lessons(client, headers, m2.lessons)
    progress = (await client.get(f"/courses/{course.id}/progress", headers=headers)).json()
    assert progress["percentage"] == 100
    assert progress["can_request_certificate"] is True

    resp = await client.post(
        f"/courses/{course.id}/certificate", json={"full_name": "Ana Souza"}, headers=headers
    )
    assert resp.status_code == 201
    assert resp.json()["status"] == "pending"
    assert "certificate_requested" in notifier.kinds()

    resp = await client.post(
        f"/courses/{course.id}/certificate", json={"full_name": "Ana Souza"}, headers=headers
    )
    assert resp.status_code == 409

    resp = await client.get("/certificates", headers=headers)
    assert [c["course_id"] for c in resp.json()] == [str(course.id)]


@pytest.mark.asyncio
async def test_blank_full_name(client: AsyncClient, db_session: AsyncSession):
    headers = await register_and_login(client)
    course = await seed_demo_course(db_session)

    resp = await client.post(
        f"/courses/{course.id}/certificate", json={"full_name": ""}, headers=headers
    )
    assert resp.status_code == 422

    resp = await client.post(
        f"/courses/{course.id}/certificate", json={"full_name": "   "}, headers=headers
    )
    assert resp.status_code == 400
