from dataclasses import dataclass, field
from typing import Iterable, List, Mapping

from .chapter_number import get_chapter_number
from .matching import CoverageIndex, is_character_covered
from .models import Chapter, Character, Project
from .utils import get_logger

logger = get_logger("FindMissing")


@dataclass
class ChapterGap:
    position: int                       # 1-based position in the project
    chapter: Chapter
    ordinal: int                        # Chapter number used for audio lookup
    missing: List[Character] = field(default_factory=list)

    def __repr__(self):
        names = ", ".join(c.name for c in self.missing)
        return f"<ChapterGap {self.position}: '{self.chapter.title}' Missing=[{names}]>"


def find_missing_characters(
    project: Project,
    characters: Iterable[Character],
    coverage_index: CoverageIndex,
    overrides: Mapping[str, bool],
) -> List[ChapterGap]:
    """
    Lists every chapter that is not covered, with the characters lacking audio.
    Follows the same rules as compute_status, so a chapter appears here
    exactly when its status is False.
    """
    characters_by_id = {c.id: c for c in characters}
    gaps = []

    for position, chapter in enumerate(project.chapters, start=1):
        ordinal = get_chapter_number(chapter.title)
        if ordinal is None:
            continue

        files = coverage_index.get(ordinal, [])
        missing = [
            characters_by_id[char_id]
            for char_id in chapter.character_ids()
            if char_id in characters_by_id
            and not is_character_covered(characters_by_id[char_id], files, overrides)
        ]
        if missing:
            gaps.append(ChapterGap(position=position, chapter=chapter, ordinal=ordinal, missing=missing))

    logger.info(f"{len(gaps)}/{len(project.chapters)} chapters have missing audio.")
    return gaps
