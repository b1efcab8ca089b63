import pathlib
from dataclasses import dataclass, field
from typing import Iterable, List

from .filename_parser import AUDIO_EXTENSIONS, parse_filename
from .models import ParsedFileInfo
from .utils import get_logger

logger = get_logger("Scanner")


class ScanError(Exception):
    """Raised when an audio directory cannot be enumerated."""

    def __init__(self, path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


@dataclass
class ScanResult:
    directory_name: str
    directory_path: str
    files: List[ParsedFileInfo] = field(default_factory=list)


def iter_audio_filenames(directory: pathlib.Path) -> List[str]:
    """
    Recursively collects audio filenames below directory.
    Entries are visited in sorted order so repeated scans agree.
    """
    names = []
    for entry in sorted(directory.iterdir()):
        if entry.is_symlink() and entry.is_dir():
            # Linked folders can point back up the tree
            continue
        if entry.is_dir():
            names.extend(iter_audio_filenames(entry))
        elif entry.is_file() and entry.name.endswith(AUDIO_EXTENSIONS):
            names.append(entry.name)
    return names


def parse_filenames(filenames: Iterable[str], cv_names: Iterable[str]) -> List[ParsedFileInfo]:
    cv_names = list(cv_names)
    parsed = []
    for name in filenames:
        info = parse_filename(name, cv_names)
        if info is not None:
            parsed.append(info)
    return parsed


def scan_directory(path, cv_names: Iterable[str]) -> ScanResult:
    """
    Enumerates the whole directory before returning.
    Raises ScanError on permission or I/O failures; nothing partial is returned.
    """
    directory = pathlib.Path(path).expanduser()
    if not directory.is_dir():
        raise ScanError(directory, "Audio directory not found")

    logger.info(f"Scanning audio directory: {directory}")
    try:
        filenames = iter_audio_filenames(directory)
    except PermissionError as e:
        raise ScanError(directory, f"Permission denied ({e})") from e
    except OSError as e:
        raise ScanError(directory, f"Failed to read directory ({e})") from e

    files = parse_filenames(filenames, cv_names)
    logger.info(f"Found {len(filenames)} audio files, {len(files)} with a usable chapter number.")

    return ScanResult(
        directory_name=directory.name,
        directory_path=str(directory.resolve()),
        files=files,
    )
