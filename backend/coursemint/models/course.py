"""Catalogue models: courses, their modules and lessons.

A course owns an ordered list of modules; a module owns an ordered list of
lessons. Both orders come from ``order_index`` and the relationships are
loaded eagerly (``selectin``) so the whole tree is available after a single
query without lazy loads in async code.
"""

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursemint.models.base import Base, TimestampMixin, generate_uuid


class ProductType(str, enum.Enum):
    course = "course"
    ebook = "ebook"


class CourseStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class Course(TimestampMixin, Base):
    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    creator_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description_short: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    product_type: Mapped[ProductType] = mapped_column(
        Enum(ProductType, native_enum=False), default=ProductType.course, nullable=False
    )
    status: Mapped[CourseStatus] = mapped_column(
        Enum(CourseStatus, native_enum=False), default=CourseStatus.draft, nullable=False
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="BRL")
    level: Mapped[str] = mapped_column(String(50), nullable=False, default="beginner")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="general")
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="pt-BR")

    modules: Mapped[list["Module"]] = relationship(
        back_populates="course",
        order_by="Module.order_index",
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class Module(Base):
    __tablename__ = "modules"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    course_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("courses.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    course: Mapped[Course] = relationship(back_populates="modules")
    lessons: Mapped[list["Lesson"]] = relationship(
        back_populates="module",
        order_by="Lesson.order_index",
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class Lesson(Base):
    __tablename__ = "lessons"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    module_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("modules.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    duration: Mapped[str | None] = mapped_column(String(20), nullable=True)
    video_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    module: Mapped[Module] = relationship(back_populates="lessons")
