import pathlib
from typing import List, Optional

from .filename_parser import collect_cv_names
from .matching import CoverageIndex, build_coverage_index, compute_chapter_ranges, compute_status
from .models import AssistantState, Chapter, ChapterRange, Character, MatchStatus, ParsedFileInfo, Project
from .overrides import OverrideStore
from .repo_manager import REPO_ROOT, load_state, save_state
from .scanner import ScanError, scan_directory
from .script_loader import project_characters
from .utils import get_logger

logger = get_logger("Assistant")


class AlignmentAssistant:
    """
    Session state for checking one project's recorded audio against its script.

    Holds the last scan, the manual overrides and the current selection.
    The match status is recomputed from scratch whenever it is read.
    """

    def __init__(self, project: Project, base_repo=REPO_ROOT, persist: bool = True):
        self.project = project
        self.base_repo = base_repo
        self.persist = persist

        self.characters: List[Character] = project_characters(project)
        self.cv_names: List[str] = collect_cv_names(self.characters)

        self.directory_name: Optional[str] = None
        self.directory_path: Optional[str] = None
        self.scanned_files: List[ParsedFileInfo] = []
        self.overrides = OverrideStore()

        self.selected_range_index: Optional[int] = None
        self.selected_chapter_id: Optional[str] = None

    # --- Persistence ---

    def load(self) -> bool:
        """
        Restores the last session. If the saved audio folder is still there it
        is rescanned, otherwise the saved files and overrides are used as-is.
        Returns True if any state was restored.
        """
        state = load_state(self.project, self.base_repo)
        if state is None:
            return False

        if state.directory_path and pathlib.Path(state.directory_path).is_dir():
            try:
                self._scan(state.directory_path, reset=True)
                return True
            except ScanError as e:
                logger.warning(f"Could not rescan saved folder, using saved results instead. ({e})")

        self.directory_name = state.directory_name
        self.directory_path = state.directory_path
        self.scanned_files = list(state.scanned_files)
        self.overrides = OverrideStore.from_dict(state.manual_overrides)
        logger.info(f"Restored {len(self.scanned_files)} scanned files from saved state.")
        return True

    def to_state(self) -> AssistantState:
        return AssistantState(
            project_id=self.project.id,
            directory_name=self.directory_name,
            directory_path=self.directory_path,
            scanned_files=list(self.scanned_files),
            manual_overrides=self.overrides.as_dict(),
        )

    def save(self, force: bool = False):
        if not self.persist:
            return
        if not (force or self.directory_name or self.scanned_files):
            return
        try:
            save_state(self.project, self.to_state(), self.base_repo)
        except OSError as e:
            logger.error(f"Failed to save assistant state: {e}")

    # --- Scanning ---

    def _scan(self, path, reset: bool):
        result = scan_directory(path, self.cv_names)

        # Only a completed scan replaces earlier results
        self.directory_name = result.directory_name
        self.directory_path = result.directory_path
        self.scanned_files = result.files
        if reset:
            self.overrides.clear()
        self.save()

    def select_directory(self, path):
        """Scans a newly chosen audio folder. Raises ScanError on failure."""
        self._scan(path, reset=True)

    def rescan(self, reset: bool = True) -> bool:
        """Scans the current audio folder again. Raises ScanError on failure."""
        if not self.directory_path:
            logger.warning("No audio folder selected, nothing to rescan.")
            return False
        self._scan(self.directory_path, reset=reset)
        return True

    def reset(self):
        """Forgets the scan results and every manual override."""
        self.directory_name = None
        self.directory_path = None
        self.scanned_files = []
        self.overrides.clear()
        self.selected_chapter_id = None
        self.selected_range_index = None
        self.save(force=True)

    # --- Selection & overrides ---

    def select_range(self, index: Optional[int]):
        if index is not None and not 0 <= index < len(self.chapter_ranges):
            raise IndexError(f"No chapter range at index {index}")
        self.selected_range_index = index

    def select_chapter(self, chapter_id: Optional[str]):
        if chapter_id is not None and self.find_chapter(chapter_id) is None:
            raise KeyError(f"Unknown chapter: {chapter_id}")
        self.selected_chapter_id = chapter_id

    def toggle_character(self, character_id: str) -> bool:
        status = self.status
        value = self.overrides.toggle(character_id, status.characters if status else None)
        self.save()
        return value

    # --- Derived views ---

    def find_chapter(self, chapter_id: str) -> Optional[Chapter]:
        return next((c for c in self.project.chapters if c.id == chapter_id), None)

    @property
    def coverage_index(self) -> CoverageIndex:
        return build_coverage_index(self.scanned_files)

    @property
    def chapter_ranges(self) -> List[ChapterRange]:
        return compute_chapter_ranges(len(self.project.chapters))

    @property
    def status(self) -> Optional[MatchStatus]:
        """None until a scan has produced at least one usable file."""
        if not self.scanned_files:
            return None
        return compute_status(
            self.coverage_index,
            self.project.chapters,
            self.characters,
            self.overrides,
            self.selected_chapter_id,
        )

    @property
    def chapters_in_selected_range(self) -> List[Chapter]:
        if self.selected_range_index is None:
            return []
        chapter_range = self.chapter_ranges[self.selected_range_index]
        return self.project.chapters[chapter_range.start:chapter_range.end + 1]

    @property
    def characters_in_selected_chapter(self) -> List[Character]:
        if not self.selected_chapter_id:
            return []
        chapter = self.find_chapter(self.selected_chapter_id)
        if chapter is None:
            return []
        char_ids = set(chapter.character_ids())
        return sorted((c for c in self.characters if c.id in char_ids), key=lambda c: c.name)
