from typing import Dict, Iterable, List, Mapping, Optional

from .chapter_number import get_chapter_number
from .models import Chapter, ChapterRange, Character, MatchStatus, ParsedFileInfo

RANGE_SIZE = 100

CoverageIndex = Dict[int, List[ParsedFileInfo]]


def build_coverage_index(files: Iterable[ParsedFileInfo]) -> CoverageIndex:
    """Maps each chapter ordinal to every parsed file that touches it."""
    index: CoverageIndex = {}
    for info in files:
        for number in info.chapters:
            index.setdefault(number, []).append(info)
    return index


def compute_chapter_ranges(chapter_count: int, range_size: int = RANGE_SIZE) -> List[ChapterRange]:
    """
    Splits chapter positions into fixed windows.
    Labels are 1-indexed ("1-100"), start/end are 0-indexed and inclusive.
    """
    ranges = []
    current_start = 1
    while current_start <= chapter_count:
        end = min(current_start + range_size - 1, chapter_count)
        ranges.append(ChapterRange(
            label=f"{current_start}-{end}",
            start=current_start - 1,
            end=end - 1,
        ))
        current_start += range_size
    return ranges


def file_matches_character(info: ParsedFileInfo, character: Character) -> bool:
    if info.character_name and info.character_name in (character.name, character.cv_name):
        return True
    return bool(info.cv_name) and info.cv_name == character.cv_name


def is_character_covered(
    character: Character,
    files: Iterable[ParsedFileInfo],
    overrides: Mapping[str, bool],
) -> bool:
    """A manual override wins, otherwise any matching file in the bucket counts."""
    if character.id in overrides:
        return overrides[character.id]
    return any(file_matches_character(info, character) for info in files)


def compute_status(
    coverage_index: Mapping[int, List[ParsedFileInfo]],
    chapters: List[Chapter],
    characters: Iterable[Character],
    overrides: Mapping[str, bool],
    selected_chapter_id: Optional[str] = None,
    range_size: int = RANGE_SIZE,
) -> MatchStatus:
    """
    Builds a fresh MatchStatus from the scan, the script and the overrides.

    Chapters whose title has no usable ordinal, or that have no attributed
    lines, count as covered. Character ids that no longer resolve to a
    character are skipped.
    """
    status = MatchStatus()
    characters_by_id = {c.id: c for c in characters}

    for chapter in chapters:
        chapter_num = get_chapter_number(chapter.title)
        if chapter_num is None:
            status.chapters[chapter.id] = True
            continue

        files = coverage_index.get(chapter_num, [])
        status.chapters[chapter.id] = all(
            is_character_covered(characters_by_id[char_id], files, overrides)
            for char_id in chapter.character_ids()
            if char_id in characters_by_id
        )

    for chapter_range in compute_chapter_ranges(len(chapters), range_size):
        members = chapters[chapter_range.start:chapter_range.end + 1]
        status.ranges[chapter_range.label] = all(status.chapters[ch.id] for ch in members)

    if selected_chapter_id is not None:
        chapter = next((c for c in chapters if c.id == selected_chapter_id), None)
        chapter_num = get_chapter_number(chapter.title) if chapter else None
        if chapter_num is not None:
            files = coverage_index.get(chapter_num, [])
            for char_id in chapter.character_ids():
                character = characters_by_id.get(char_id)
                if character is None:
                    continue
                status.characters[char_id] = is_character_covered(character, files, overrides)

    return status
