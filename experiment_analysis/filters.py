"""Active class filter for the instructor dashboard.

The filter is process-local UI state with a single writer. Selecting a class
code that no ClassRecord knows about is allowed and simply filters everything
out, because class lists and submissions change independently while a lesson
is running.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .records import SubmissionRecord

ALL = "ALL"


@dataclass(frozen=True, slots=True)
class ClassFilter:
    """Either every class (`class_code is None`) or one class code."""

    class_code: str | None = None

    @property
    def is_all(self) -> bool:
        return self.class_code is None

    @property
    def label(self) -> str:
        return ALL if self.class_code is None else self.class_code

    def matches(self, record: SubmissionRecord) -> bool:
        return self.class_code is None or record.class_code == self.class_code


ALL_CLASSES = ClassFilter()


def filter_records(
    records: Iterable[SubmissionRecord], active: ClassFilter
) -> tuple[SubmissionRecord, ...]:
    """Return the records visible under `active`, preserving source order."""

    return tuple(record for record in records if active.matches(record))


class FilterController:
    """Holds the active ClassFilter and notifies listeners when it changes."""

    def __init__(self, initial: ClassFilter = ALL_CLASSES) -> None:
        self._active = initial
        self._listeners: list[Callable[[ClassFilter], None]] = []

    @property
    def active(self) -> ClassFilter:
        return self._active

    def select(self, class_code: str | None) -> ClassFilter:
        """Select a class code (`None` or `"ALL"` selects every class)."""

        if class_code is None or class_code == ALL:
            selected = ALL_CLASSES
        else:
            selected = ClassFilter(class_code=class_code)
        if selected != self._active:
            self._active = selected
            for listener in list(self._listeners):
                listener(selected)
        return self._active

    def select_all(self) -> ClassFilter:
        return self.select(None)

    def add_listener(self, listener: Callable[[ClassFilter], None]) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""

        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove
