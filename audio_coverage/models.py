from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ParsedFileInfo:
    """
    Metadata recovered from a single audio filename.
    e.g. "12-14_Alice.mp3" -> chapters [12, 13, 14], character_name "Alice"
    """
    chapters: List[int]                 # Chapter ordinals covered by the file
    character_name: Optional[str] = None  # In-story character identifier
    cv_name: Optional[str] = None         # Voice performer identifier

    def to_dict(self) -> dict:
        return {
            "chapters": list(self.chapters),
            "characterName": self.character_name,
            "cvName": self.cv_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedFileInfo":
        return cls(
            chapters=[int(n) for n in data.get("chapters", [])],
            character_name=data.get("characterName"),
            cv_name=data.get("cvName"),
        )


@dataclass
class Character:
    id: str
    name: str
    cv_name: Optional[str] = None
    status: str = "active"              # active, merged
    project_id: Optional[str] = None    # None = shared across projects

    def __repr__(self):
        return f"<Character {self.id}: '{self.name}' CV={self.cv_name} Status={self.status}>"


@dataclass
class ScriptLine:
    id: str
    text: str = ""
    character_id: Optional[str] = None


@dataclass
class Chapter:
    """
    A chapter of the script. Its position in Project.chapters drives display
    numbering, the ordinal parsed from the title drives audio lookup.
    """
    id: str
    title: str
    script_lines: List[ScriptLine] = field(default_factory=list)

    def character_ids(self) -> List[str]:
        """Distinct attributed character ids, in order of first appearance."""
        seen = []
        for line in self.script_lines:
            if line.character_id and line.character_id not in seen:
                seen.append(line.character_id)
        return seen

    def __repr__(self):
        return f"<Chapter {self.id}: '{self.title}' Lines={len(self.script_lines)}>"


@dataclass
class Project:
    id: str
    name: str
    chapters: List[Chapter] = field(default_factory=list)
    characters: List[Character] = field(default_factory=list)


@dataclass
class ChapterRange:
    label: str      # Display label, 1-indexed ("1-100")
    start: int      # 0-indexed, inclusive
    end: int        # 0-indexed, inclusive


@dataclass
class MatchStatus:
    chapters: Dict[str, bool] = field(default_factory=dict)
    ranges: Dict[str, bool] = field(default_factory=dict)
    characters: Dict[str, bool] = field(default_factory=dict)


@dataclass
class AssistantState:
    """Persisted snapshot of one project's last scan."""
    project_id: str
    directory_name: Optional[str] = None
    directory_path: Optional[str] = None
    scanned_files: List[ParsedFileInfo] = field(default_factory=list)
    manual_overrides: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "projectId": self.project_id,
            "directoryName": self.directory_name,
            "directoryPath": self.directory_path,
            "scannedFiles": [f.to_dict() for f in self.scanned_files],
            "manualOverrides": dict(self.manual_overrides),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AssistantState":
        return cls(
            project_id=data["projectId"],
            directory_name=data.get("directoryName"),
            directory_path=data.get("directoryPath"),
            scanned_files=[ParsedFileInfo.from_dict(f) for f in data.get("scannedFiles", [])],
            manual_overrides={k: bool(v) for k, v in data.get("manualOverrides", {}).items()},
        )
