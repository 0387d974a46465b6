"""Progress routes: learner's watch progress and lesson completion."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.core.auth import get_current_user
from coursemint.core.notifier import Notifier, get_notifier
from coursemint.dependencies import get_db
from coursemint.models.user import User
from coursemint.routers.courses import parse_uuid
from coursemint.schemas.progress import LessonProgressRead, UpsertProgressRequest
from coursemint.services import progress_service

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("", response_model=list[LessonProgressRead])
async def list_progress(
    course_id: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The current learner's progress records, optionally for one course."""
    if course_id is None:
        records = await progress_service.get_user_progress(db, user_id=current_user.id)
    else:
        records = await progress_service.get_course_progress(
            db, user_id=current_user.id, course_id=parse_uuid(course_id, "course_id")
        )
    return [LessonProgressRead.model_validate(r) for r in records]


@router.post("", response_model=LessonProgressRead)
async def upsert_progress(
    body: UpsertProgressRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
):
    """Record a watch event. A completed lesson stays completed."""
    ip = request.client.host if request.client else None
    lid = parse_uuid(body.lesson_id, "lesson_id")
    try:
        progress = await progress_service.upsert_progress(
            db,
            user_id=current_user.id,
            lesson_id=lid,
            watch_percentage=body.watch_percentage,
            completed=body.completed,
            ip_address=ip,
            notifier=notifier,
        )
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Lesson not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        notifier.notify(
            current_user.id, "error", "Your progress could not be saved. Please try again."
        )
        raise
    return LessonProgressRead.model_validate(progress)
