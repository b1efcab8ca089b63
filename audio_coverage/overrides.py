from typing import Dict, Mapping, Optional

from .utils import get_logger

logger = get_logger("Overrides")


class OverrideStore:
    """
    Manual coverage decisions, keyed by character id.

    An override applies to the character in every chapter, not just the
    chapter it was toggled from.
    """

    def __init__(self, overrides: Optional[Mapping[str, bool]] = None):
        self._overrides: Dict[str, bool] = dict(overrides or {})

    def __contains__(self, character_id: str) -> bool:
        return character_id in self._overrides

    def __getitem__(self, character_id: str) -> bool:
        return self._overrides[character_id]

    def __iter__(self):
        return iter(self._overrides)

    def __len__(self) -> int:
        return len(self._overrides)

    def get(self, character_id: str, default=None):
        return self._overrides.get(character_id, default)

    def toggle(self, character_id: str, current_status: Optional[Mapping[str, bool]]) -> bool:
        """
        Stores the negation of the character's live status. A character
        missing from current_status is treated as uncovered, so it flips to True.
        """
        current = (current_status or {}).get(character_id, False)
        self._overrides[character_id] = not current
        logger.debug(f"Override for {character_id} set to {not current}")
        return self._overrides[character_id]

    def clear(self):
        self._overrides.clear()

    def as_dict(self) -> Dict[str, bool]:
        return dict(self._overrides)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, bool]]) -> "OverrideStore":
        return cls({k: bool(v) for k, v in (data or {}).items()})
