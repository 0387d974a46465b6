"""Certificate service: one completion certificate request per learner and course.

Eligibility is checked before anything is written; the unique constraint on
(user_id, course_id) catches double submissions that race past the check.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.core.notifier import Notifier
from coursemint.models.certificate import CertificateRequest
from coursemint.services import audit_service, course_service, progress_service
from coursemint.services.completion import can_request_certificate, compute_course_completion


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class CertificateNotEligibleError(ValueError):
    pass


class CertificateAlreadyRequestedError(ValueError):
    pass


async def count_requests(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    course_id: uuid.UUID,
) -> int:
    result = await db.execute(
        select(func.count(CertificateRequest.id)).where(
            CertificateRequest.user_id == user_id,
            CertificateRequest.course_id == course_id,
        )
    )
    return result.scalar_one()


async def get_request(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    course_id: uuid.UUID,
) -> CertificateRequest | None:
    result = await db.execute(
        select(CertificateRequest).where(
            CertificateRequest.user_id == user_id,
            CertificateRequest.course_id == course_id,
        )
    )
    return result.scalar_one_or_none()


async def get_user_requests(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
) -> list[CertificateRequest]:
    result = await db.execute(
        select(CertificateRequest)
        .where(CertificateRequest.user_id == user_id)
        .order_by(CertificateRequest.requested_at.desc())
    )
    return list(result.scalars().all())


async def request_certificate(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    course_id: uuid.UUID,
    full_name: str,
    ip_address: str | None = None,
    notifier: Notifier | None = None,
) -> CertificateRequest:
    """Create the learner's certificate request for a fully completed course.

    Raises NoResultFound for an unknown course, ValueError for a blank name,
    CertificateNotEligibleError if the course is not fully completed and
    CertificateAlreadyRequestedError if a request already exists.
    """
    full_name = full_name.strip()
    if not full_name:
        raise ValueError("Full name is required")

    course = await course_service.get_course(db, course_id=course_id)
    modules = await course_service.get_modules_with_lessons(db, course_id=course_id)
    records = await progress_service.get_course_progress(
        db, user_id=user_id, course_id=course_id
    )
    existing = await count_requests(db, user_id=user_id, course_id=course_id)
    if existing > 0:
        raise CertificateAlreadyRequestedError("Certificate already requested for this course")

    summary = compute_course_completion(modules, records)
    if summary.total_count == 0 or not can_request_certificate(modules, records, existing):
        raise CertificateNotEligibleError(
            f"Course not completed ({summary.completed_count}/{summary.total_count} lessons)"
        )

    completion_dates = [
        _as_utc(r.completed_at) for r in records if r.completed and r.completed_at
    ]
    request = CertificateRequest(
        user_id=user_id,
        course_id=course_id,
        full_name=full_name,
        completion_date=max(completion_dates) if completion_dates else datetime.now(timezone.utc),
    )
    try:
        async with db.begin_nested():
            db.add(request)
            await db.flush()
    except IntegrityError:
        raise CertificateAlreadyRequestedError(
            "Certificate already requested for this course"
        ) from None

    await audit_service.log_event(
        db,
        user_id=user_id,
        event_type="certificate.requested",
        entity_type="CertificateRequest",
        entity_id=request.id,
        action="request",
        detail={"course_id": str(course_id), "course_title": course.title},
        ip_address=ip_address,
    )
    if notifier is not None:
        notifier.notify(
            user_id, "certificate_requested", f"Certificate requested for {course.title}"
        )

    return request
