import re
from typing import Iterable, List, Optional

from .models import Character, ParsedFileInfo
from .utils import get_logger

logger = get_logger("FilenameParser")

AUDIO_EXTENSIONS = (".mp3", ".wav")

# Narrator tracks are recorded as "<chapter>_pb.<ext>"
NARRATOR_ALIAS = "pb"
NARRATOR_NAME = "Narrator"

ORDINAL_PATTERN = re.compile(r"^[0-9]+$")


def collect_cv_names(characters: Iterable[Character]) -> List[str]:
    """Sorted, distinct performer aliases across the given characters."""
    return sorted({c.cv_name for c in characters if c.cv_name})


def strip_audio_extension(filename: str) -> Optional[str]:
    lowered = filename.lower()
    for ext in AUDIO_EXTENSIONS:
        if lowered.endswith(ext):
            return filename[:-len(ext)]
    return None


def parse_chapter_spec(spec: str) -> List[int]:
    """
    Parses "12" or "12-15" into the list of ordinals it covers.
    Returns an empty list when the spec is not usable.
    """
    if "-" in spec:
        start_str, end_str = spec.split("-", 1)
        if not (ORDINAL_PATTERN.match(start_str) and ORDINAL_PATTERN.match(end_str)):
            return []
        start, end = int(start_str), int(end_str)
        if start < 1:
            return []
        return list(range(start, end + 1))

    if not ORDINAL_PATTERN.match(spec):
        return []
    number = int(spec)
    return [number] if number >= 1 else []


def parse_filename(filename: str, cv_names: Iterable[str]) -> Optional[ParsedFileInfo]:
    """
    Turns "<chapters>[_<identifier>].<ext>" into a ParsedFileInfo.
    The identifier is treated as a performer alias when it is one of
    cv_names, otherwise as a character name. Returns None if rejected.
    """
    base = strip_audio_extension(filename)
    if base is None:
        return None

    parts = base.split("_")
    chapters = parse_chapter_spec(parts[0])
    if not chapters:
        logger.debug(f"Rejected '{filename}': unusable chapter spec '{parts[0]}'")
        return None

    character_name = None
    cv_name = None
    if len(parts) > 1:
        identifier = "_".join(parts[1:])
        if identifier in cv_names:
            cv_name = identifier
        else:
            character_name = identifier

    if character_name == NARRATOR_ALIAS or cv_name == NARRATOR_ALIAS:
        cv_name = NARRATOR_ALIAS
        character_name = NARRATOR_NAME

    return ParsedFileInfo(chapters=chapters, character_name=character_name, cv_name=cv_name)
