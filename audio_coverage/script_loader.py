import json
import pathlib
from typing import List

from .models import Chapter, Character, Project, ScriptLine
from .utils import get_logger

logger = get_logger(__name__)


class ProjectLoadError(Exception):
    pass


def _pick(data: dict, *keys, default=None):
    # Project exports use camelCase, hand-written files often snake_case
    for key in keys:
        if key in data:
            return data[key]
    return default


def project_characters(project: Project) -> List[Character]:
    """Characters usable for matching: scoped to the project (or shared) and not merged."""
    return [
        c for c in project.characters
        if (c.project_id == project.id or not c.project_id) and c.status != "merged"
    ]


class ProjectLoader:
    def __init__(self, project_path):
        self.project_path = pathlib.Path(project_path)
        self.data = None

    def load(self) -> Project:
        """Reads the project JSON and builds the script structure."""
        logger.info(f"Loading project: {self.project_path}")
        try:
            with open(self.project_path, "r", encoding="utf-8") as f:
                self.data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load project: {e}")
            raise ProjectLoadError(f"Cannot read project file {self.project_path}: {e}") from e

        return self.parse(self.data)

    def parse(self, data: dict) -> Project:
        if not isinstance(data, dict):
            raise ProjectLoadError("Project file must contain a JSON object")

        try:
            project = Project(
                id=str(data["id"]),
                name=data.get("name", "Untitled"),
                chapters=[self._parse_chapter(c) for c in data.get("chapters", [])],
                characters=[self._parse_character(c) for c in data.get("characters", [])],
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ProjectLoadError(f"Malformed project data: {e!r}") from e

        logger.info(
            f"Loaded '{project.name}': {len(project.chapters)} chapters, "
            f"{len(project.characters)} characters."
        )
        return project

    def _parse_chapter(self, data: dict) -> Chapter:
        lines = _pick(data, "scriptLines", "script_lines", default=[])
        return Chapter(
            id=str(data["id"]),
            title=data.get("title", ""),
            script_lines=[self._parse_line(line, i) for i, line in enumerate(lines)],
        )

    def _parse_line(self, data: dict, position: int) -> ScriptLine:
        return ScriptLine(
            id=str(data.get("id", position)),
            text=data.get("text", ""),
            character_id=_pick(data, "characterId", "character_id"),
        )

    def _parse_character(self, data: dict) -> Character:
        return Character(
            id=str(data["id"]),
            name=data["name"],
            cv_name=_pick(data, "cvName", "cv_name"),
            status=data.get("status") or "active",
            project_id=_pick(data, "projectId", "project_id"),
        )
