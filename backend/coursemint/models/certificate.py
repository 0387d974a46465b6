import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from coursemint.models.base import Base, generate_uuid, utcnow


class CertificateStatus(str, enum.Enum):
    pending = "pending"
    issued = "issued"
    rejected = "rejected"


class CertificateRequest(Base):
    """A learner's one-time request for a course completion certificate."""

    __tablename__ = "certificate_requests"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_certificate_request_user_course"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    course_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("courses.id"), nullable=False, index=True
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    completion_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[CertificateStatus] = mapped_column(
        Enum(CertificateStatus, native_enum=False),
        default=CertificateStatus.pending,
        nullable=False,
    )
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
