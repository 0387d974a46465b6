"""Completion calculator: course/module completion and certificate eligibility.

Pure functions over a module tree and a learner's progress records. Records
are anything with ``lesson_id`` and ``completed``; records for lessons
outside the given modules are ignored, and several records for one lesson
count once.
"""

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from coursemint.models.course import Module
from coursemint.models.progress import LessonProgress
from coursemint.services.lesson_tree import lesson_ids, total_lesson_count


@dataclass(frozen=True)
class CompletionSummary:
    completed_count: int
    total_count: int
    percentage: int

    @property
    def is_complete(self) -> bool:
        return self.total_count > 0 and self.completed_count == self.total_count


def completed_lesson_ids(records: Iterable[LessonProgress]) -> set[uuid.UUID]:
    return {r.lesson_id for r in records if r.completed}


def completion_percentage(completed: int, total: int) -> int:
    """Integer percentage rounded half up; 0 for an empty course."""
    if total <= 0:
        return 0
    return (completed * 200 + total) // (total * 2)


def _summarize(
    ids: set[uuid.UUID],
    total: int,
    completed: set[uuid.UUID],
) -> CompletionSummary:
    done = len(ids & completed)
    return CompletionSummary(
        completed_count=done,
        total_count=total,
        percentage=completion_percentage(done, total),
    )


def compute_course_completion(
    modules: Sequence[Module],
    records: Iterable[LessonProgress],
) -> CompletionSummary:
    """Completed/total lesson counts and percentage for a whole course."""
    return _summarize(
        lesson_ids(modules), total_lesson_count(modules), completed_lesson_ids(records)
    )


def module_completion(
    module: Module,
    records: Iterable[LessonProgress],
) -> CompletionSummary:
    return _summarize(
        {lesson.id for lesson in module.lessons},
        len(module.lessons),
        completed_lesson_ids(records),
    )


def is_module_completed(module: Module, records: Iterable[LessonProgress]) -> bool:
    """True iff every lesson has a completed record. Empty modules are complete."""
    completed = completed_lesson_ids(records)
    return all(lesson.id in completed for lesson in module.lessons)


def can_request_certificate(
    modules: Sequence[Module],
    records: Iterable[LessonProgress],
    existing_request_count: int,
) -> bool:
    """Every module completed and no certificate requested yet."""
    if existing_request_count > 0:
        return False
    records = list(records)
    return all(is_module_completed(m, records) for m in modules)
