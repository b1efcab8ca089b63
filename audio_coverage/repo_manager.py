import json
import pathlib
from typing import Optional

from .models import AssistantState, Project
from .utils import get_logger, sanitize

logger = get_logger("RepoManager")

REPO_ROOT = "repo"
STATE_FILENAME = "assistant_state.json"


def get_project_dir(project: Project, base_repo=REPO_ROOT) -> pathlib.Path:
    """
    Returns the Path object for the project's state directory.
    Format: repo/{Project Name} [{ProjectID}]
    """
    return pathlib.Path(base_repo) / f"{sanitize(project.name)} [{project.id}]"


def find_project_by_id(project_id: str, base_repo=REPO_ROOT) -> Optional[pathlib.Path]:
    """
    Scans repo/ for a directory matching the project id.
    Returns the Path object if found, else None.
    """
    base_repo = pathlib.Path(base_repo)
    if not base_repo.exists():
        return None

    # Glob treats [] as a character class, so match the suffix by hand
    candidates = []
    for project_dir in sorted(base_repo.iterdir()):
        if not project_dir.is_dir() or project_dir.name.startswith('.'):
            continue
        if project_dir.name.endswith(f"[{project_id}]"):
            candidates.append(project_dir)

    if not candidates:
        return None

    if len(candidates) > 1:
        logger.warning(f"Multiple state folders found for project {project_id}. Using the first one.")

    return candidates[0]


def load_state(project: Project, base_repo=REPO_ROOT) -> Optional[AssistantState]:
    """
    Loads the last saved scan for a project.
    Returns None if nothing was saved or the file is unreadable.
    """
    project_dir = find_project_by_id(project.id, base_repo) or get_project_dir(project, base_repo)
    state_path = project_dir / STATE_FILENAME
    if not state_path.exists():
        return None

    try:
        with open(state_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return AssistantState.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Failed to load assistant state from {state_path}: {e}")
        return None


def save_state(project: Project, state: AssistantState, base_repo=REPO_ROOT) -> pathlib.Path:
    project_dir = find_project_by_id(project.id, base_repo) or get_project_dir(project, base_repo)
    project_dir.mkdir(parents=True, exist_ok=True)

    state_path = project_dir / STATE_FILENAME
    with open(state_path, "w", encoding="utf-8") as f:
        json.dump(state.to_dict(), f, indent=4, ensure_ascii=False)

    logger.debug(f"Saved assistant state to {state_path}")
    return state_path
