"""Linear narration sequence."""
from __future__ import annotations

from dataclasses import dataclass

from isles.data.repositories import INTRO_NARRATION_ID, NarrationRepository
from isles.domain.defs import NarrationDef


@dataclass(slots=True)
class NarrationView:
    """Data returned to the presentation layer for rendering."""

    sequence_id: str
    index: int
    total: int
    text: str

    @property
    def is_last(self) -> bool:
        return self.index >= self.total - 1


class NarrationService:
    """Application service that steps through one narration sequence."""

    def __init__(self, narration_repo: NarrationRepository, *, sequence_id: str = INTRO_NARRATION_ID) -> None:
        self._narration_repo = narration_repo
        self._sequence_id = sequence_id

    def _sequence(self) -> NarrationDef:
        return self._narration_repo.get(self._sequence_id)

    def line_count(self) -> int:
        return len(self._sequence().lines)

    def get_view(self, index: int) -> NarrationView:
        """Return the view model for the line at ``index``."""
        sequence = self._sequence()
        if not 0 <= index < len(sequence.lines):
            raise IndexError(f"Narration index {index} is invalid for '{sequence.id}'.")
        return NarrationView(
            sequence_id=sequence.id,
            index=index,
            total=len(sequence.lines),
            text=sequence.lines[index],
        )

    def advance(self, index: int) -> int | None:
        """Return the next line index, or None once the sequence is complete."""
        next_index = index + 1
        if next_index >= self.line_count():
            return None
        return next_index
