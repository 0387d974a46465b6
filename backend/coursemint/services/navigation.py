"""Lesson navigator: next/previous lesson across module boundaries.

The functions take the module tree and the current lesson id and never
raise: an id that is None or not part of the tree gives None/False from
every operation. Empty modules are skipped in both directions.

``LessonNavigator`` keeps the current lesson id between calls, for callers
that walk a course step by step.
"""

import uuid
from collections.abc import Sequence

from coursemint.models.course import Lesson, Module
from coursemint.services.lesson_tree import (
    find_lesson,
    first_lesson,
    locate_lesson,
    ordered_tree,
)


def next_lesson(modules: Sequence[Module], current_lesson_id: uuid.UUID | None) -> Lesson | None:
    """Lesson after the current one, or None at the end of the course."""
    position = locate_lesson(modules, current_lesson_id)
    if position is None:
        return None

    tree = ordered_tree(modules)
    lessons = tree[position.module_index]
    if position.lesson_index + 1 < len(lessons):
        return lessons[position.lesson_index + 1]

    for later in tree[position.module_index + 1:]:
        if later:
            return later[0]
    return None


def previous_lesson(
    modules: Sequence[Module],
    current_lesson_id: uuid.UUID | None,
) -> Lesson | None:
    """Lesson before the current one, or None at the start of the course."""
    position = locate_lesson(modules, current_lesson_id)
    if position is None:
        return None

    tree = ordered_tree(modules)
    if position.lesson_index > 0:
        return tree[position.module_index][position.lesson_index - 1]

    for earlier in reversed(tree[:position.module_index]):
        if earlier:
            return earlier[-1]
    return None


def go_to_lesson(modules: Sequence[Module], lesson_id: uuid.UUID | None) -> Lesson | None:
    return find_lesson(modules, lesson_id)


def has_next_lesson(modules: Sequence[Module], current_lesson_id: uuid.UUID | None) -> bool:
    return next_lesson(modules, current_lesson_id) is not None


def has_previous_lesson(modules: Sequence[Module], current_lesson_id: uuid.UUID | None) -> bool:
    return previous_lesson(modules, current_lesson_id) is not None


class LessonNavigator:
    """Stateful walk over one course's lessons.

    Moves that find nothing (end of course, unknown id) return None and
    leave the current lesson unchanged.
    """

    def __init__(self, modules: Sequence[Module], current_lesson_id: uuid.UUID | None = None):
        self.modules = list(modules)
        self.current_lesson_id = None
        if current_lesson_id is not None:
            self.go_to(current_lesson_id)

    @property
    def current_lesson(self) -> Lesson | None:
        return find_lesson(self.modules, self.current_lesson_id)

    def _move(self, lesson: Lesson | None) -> Lesson | None:
        if lesson is not None:
            self.current_lesson_id = lesson.id
        return lesson

    def start(self) -> Lesson | None:
        """Jump to the first lesson of the first non-empty module."""
        return self._move(first_lesson(self.modules))

    def next(self) -> Lesson | None:
        return self._move(next_lesson(self.modules, self.current_lesson_id))

    def previous(self) -> Lesson | None:
        return self._move(previous_lesson(self.modules, self.current_lesson_id))

    def go_to(self, lesson_id: uuid.UUID) -> Lesson | None:
        return self._move(go_to_lesson(self.modules, lesson_id))

    def has_next(self) -> bool:
        return has_next_lesson(self.modules, self.current_lesson_id)

    def has_previous(self) -> bool:
        return has_previous_lesson(self.modules, self.current_lesson_id)

    def position(self) -> tuple[int, int]:
        """(1-based index of the current lesson, total lessons); index 0 if none."""
        ids = [lesson.id for lessons in ordered_tree(self.modules) for lesson in lessons]
        if self.current_lesson_id not in ids:
            return (0, len(ids))
        return (ids.index(self.current_lesson_id) + 1, len(ids))
