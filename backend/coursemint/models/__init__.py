# Import all models so Base.metadata is populated for create_all / Alembic.
from coursemint.models.user import Session, User  # noqa: F401
from coursemint.models.audit import AuditLogEvent  # noqa: F401
from coursemint.models.course import Course, Lesson, Module  # noqa: F401
from coursemint.models.progress import LessonProgress  # noqa: F401
from coursemint.models.certificate import CertificateRequest  # noqa: F401
