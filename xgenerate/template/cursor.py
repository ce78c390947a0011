"""Forward cursor over an annotation stream with a single step of pushback."""

from __future__ import annotations

from collections.abc import Iterable

from xgenerate.exceptions import CursorMisuseError
from xgenerate.template.annotations import TemplateAnnotation


class AnnotationCursor:
    """Sequential reader over annotations ordered by begin offset.

    A section that closes before the next annotation hands that annotation
    back to its parent with ``pushback()``. Only the annotation returned by
    the latest ``next()`` can be pushed back, and only once.

    Example usage:
        cursor = AnnotationCursor(annotations)
        annotation = cursor.next()
        if closes_before(annotation):
            cursor.pushback()
    """

    def __init__(self, annotations: Iterable[TemplateAnnotation]):
        self._annotations: list[TemplateAnnotation] = list(annotations)
        self._position = 0
        self._can_push_back = False

    def __len__(self) -> int:
        return len(self._annotations)

    @property
    def position(self) -> int:
        """Index of the annotation the next call to ``next()`` returns."""
        return self._position

    def has_next(self) -> bool:
        return self._position < len(self._annotations)

    def next(self) -> TemplateAnnotation | None:
        """Advance and return the next annotation, or None when exhausted."""
        if not self.has_next():
            self._can_push_back = False
            return None
        annotation = self._annotations[self._position]
        self._position += 1
        self._can_push_back = True
        return annotation

    def pushback(self) -> None:
        """Step back over the annotation returned by the last ``next()``.

        Raises:
            CursorMisuseError: If there is no annotation to step back over,
                either because ``next()`` wasn't called (or returned None) or
                because it was already pushed back.
        """
        if not self._can_push_back:
            raise CursorMisuseError(
                "pushback() is only allowed once, directly after next() returned an annotation",
                {"position": self._position},
            )
        self._position -= 1
        self._can_push_back = False
