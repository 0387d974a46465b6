"""Read-only helpers over a course's module/lesson tree.

Traversal order is always module ``order_index`` then lesson
``order_index``; equal indexes keep their list order. Nothing here touches
the database, so the functions work on ORM objects and plain stand-ins
alike.
"""

import uuid
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from coursemint.models.course import Lesson, Module


@dataclass(frozen=True)
class LessonPosition:
    """Where a lesson sits in the ordered tree."""
    module_index: int
    lesson_index: int
    lesson: Lesson


def ordered_modules(modules: Iterable[Module]) -> list[Module]:
    return sorted(modules, key=lambda m: m.order_index)


def ordered_lessons(module: Module) -> list[Lesson]:
    return sorted(module.lessons, key=lambda lesson: lesson.order_index)


def ordered_tree(modules: Iterable[Module]) -> list[list[Lesson]]:
    """Lessons grouped per module, both levels in traversal order."""
    return [ordered_lessons(m) for m in ordered_modules(modules)]


def iter_lessons(modules: Iterable[Module]) -> Iterator[Lesson]:
    for lessons in ordered_tree(modules):
        yield from lessons


def lesson_ids(modules: Iterable[Module]) -> set[uuid.UUID]:
    return {lesson.id for lesson in iter_lessons(modules)}


def total_lesson_count(modules: Iterable[Module]) -> int:
    return sum(len(m.lessons) for m in modules)


def locate_lesson(
    modules: Sequence[Module],
    lesson_id: uuid.UUID | None,
) -> LessonPosition | None:
    """Position of ``lesson_id`` in the tree, or None if absent."""
    if lesson_id is None:
        return None
    for module_index, lessons in enumerate(ordered_tree(modules)):
        for lesson_index, lesson in enumerate(lessons):
            if lesson.id == lesson_id:
                return LessonPosition(module_index, lesson_index, lesson)
    return None


def find_lesson(modules: Sequence[Module], lesson_id: uuid.UUID | None) -> Lesson | None:
    position = locate_lesson(modules, lesson_id)
    return position.lesson if position else None


def first_lesson(modules: Sequence[Module]) -> Lesson | None:
    """First lesson of the first non-empty module."""
    return next(iter_lessons(modules), None)


def last_lesson(modules: Sequence[Module]) -> Lesson | None:
    """Last lesson of the last non-empty module."""
    for lessons in reversed(ordered_tree(modules)):
        if lessons:
            return lessons[-1]
    return None
