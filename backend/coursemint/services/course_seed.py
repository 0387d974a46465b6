"""Seed data: a published demo course with two modules (2 + 1 lessons)."""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.models.course import Course, CourseStatus, Lesson, Module

DEMO_COURSE = {
    "title": "Digital Marketing Fundamentals",
    "description_short": "Build an audience and a content plan from scratch.",
    "category": "marketing",
    "level": "beginner",
    "price": Decimal("197.00"),
    "modules": [
        {
            "title": "Introduction to Digital Marketing",
            "lessons": [
                {
                    "title": "What is Digital Marketing",
                    "duration": "12:30",
                    "video_url": "https://videos.example.com/dm-101.mp4",
                },
                {
                    "title": "Channels and Audiences",
                    "duration": "15:45",
                    "video_url": "https://videos.example.com/dm-102.mp4",
                },
            ],
        },
        {
            "title": "Content Strategies",
            "lessons": [
                {
                    "title": "Planning an Editorial Calendar",
                    "duration": "18:20",
                    "video_url": "https://videos.example.com/dm-201.mp4",
                },
            ],
        },
    ],
}


async def seed_demo_course(db: AsyncSession) -> Course:
    """Create the demo course if missing. Idempotent by title."""
    result = await db.execute(select(Course).where(Course.title == DEMO_COURSE["title"]))
    existing = result.scalar_one_or_none()
    if existing is not None:
        return existing

    course = Course(
        title=DEMO_COURSE["title"],
        description_short=DEMO_COURSE["description_short"],
        category=DEMO_COURSE["category"],
        level=DEMO_COURSE["level"],
        price=DEMO_COURSE["price"],
        status=CourseStatus.published,
        modules=[
            Module(
                title=module_data["title"],
                order_index=m_idx,
                lessons=[
                    Lesson(order_index=l_idx, **lesson_data)
                    for l_idx, lesson_data in enumerate(module_data["lessons"])
                ],
            )
            for m_idx, module_data in enumerate(DEMO_COURSE["modules"])
        ],
    )
    db.add(course)
    await db.flush()
    return course
