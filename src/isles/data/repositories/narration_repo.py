"""Repository for narration sequences."""
from __future__ import annotations

from typing import Dict

from isles.data.errors import DataValidationError
from isles.data.repositories.base import RepositoryBase
from isles.domain.defs import NarrationDef

INTRO_NARRATION_ID = "intro"


class NarrationRepository(RepositoryBase[NarrationDef]):
    """Loads narration sequences and validates their lines."""

    def __init__(self, base_path=None) -> None:
        super().__init__("narration.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, NarrationDef]:
        sequences: Dict[str, NarrationDef] = {}
        for sequence_id, payload in raw.items():
            data = self._require_mapping(payload, f"narration '{sequence_id}'")
            raw_lines = data.get("lines")
            if not isinstance(raw_lines, list) or not raw_lines:
                raise DataValidationError(f"narration '{sequence_id}' lines must be a non-empty list.")
            lines = tuple(
                self._require_str(line, f"narration '{sequence_id}' lines[{index}]")
                for index, line in enumerate(raw_lines)
            )
            sequences[sequence_id] = NarrationDef(id=sequence_id, lines=lines)
        return sequences
