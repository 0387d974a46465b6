"""Certificate routes: request a completion certificate, list requests."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.core.auth import get_current_user
from coursemint.core.notifier import Notifier, get_notifier
from coursemint.dependencies import get_db
from coursemint.models.user import User
from coursemint.routers.courses import parse_uuid
from coursemint.schemas.certificate import CertificateRequestCreate, CertificateRequestRead
from coursemint.services import certificate_service
from coursemint.services.certificate_service import (
    CertificateAlreadyRequestedError,
    CertificateNotEligibleError,
)

router = APIRouter(tags=["certificates"])


@router.get("/certificates", response_model=list[CertificateRequestRead])
async def list_certificate_requests(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    requests = await certificate_service.get_user_requests(db, user_id=current_user.id)
    return [CertificateRequestRead.model_validate(r) for r in requests]


@router.post(
    "/courses/{course_id}/certificate",
    response_model=CertificateRequestRead,
    status_code=201,
)
async def request_certificate(
    course_id: str,
    body: CertificateRequestCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
):
    """Request the course certificate. Only once, and only at 100% completion."""
    ip = request.client.host if request.client else None
    cid = parse_uuid(course_id, "course_id")
    try:
        certificate = await certificate_service.request_certificate(
            db,
            user_id=current_user.id,
            course_id=cid,
            full_name=body.full_name,
            ip_address=ip,
            notifier=notifier,
        )
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Course not found")
    except CertificateAlreadyRequestedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CertificateNotEligibleError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CertificateRequestRead.model_validate(certificate)
