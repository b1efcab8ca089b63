import json
from typing import List, Optional

from .chapter_number import get_chapter_number
from .find_missing import ChapterGap
from .matching import compute_chapter_ranges
from .models import MatchStatus, Project
from .repo_manager import REPO_ROOT, find_project_by_id, get_project_dir
from .utils import get_logger, status_icon

logger = get_logger("OutputManager")


def build_range_rows(project: Project, status: Optional[MatchStatus]) -> List[dict]:
    rows = []
    for chapter_range in compute_chapter_ranges(len(project.chapters)):
        rows.append({
            "range": chapter_range.label,
            "covered": status.ranges.get(chapter_range.label) if status else None,
        })
    return rows


def build_chapter_rows(project: Project, status: Optional[MatchStatus], chapters=None) -> List[dict]:
    """
    One row per chapter: display position, title, parsed ordinal and coverage.
    Pass chapters to restrict the rows to a subset (e.g. the selected range).
    """
    positions = {c.id: i for i, c in enumerate(project.chapters, start=1)}
    rows = []
    for chapter in (project.chapters if chapters is None else chapters):
        rows.append({
            "position": positions.get(chapter.id),
            "id": chapter.id,
            "title": chapter.title,
            "ordinal": get_chapter_number(chapter.title),
            "covered": status.chapters.get(chapter.id) if status else None,
        })
    return rows


def save_report(project: Project, status: Optional[MatchStatus], gaps: List[ChapterGap], base_repo=REPO_ROOT):
    """
    Writes coverage_report.json and coverage_report.md to the project's folder.
    Returns (json_path, md_path).
    """
    range_rows = build_range_rows(project, status)
    chapter_rows = build_chapter_rows(project, status)

    report = {
        "project": {"id": project.id, "name": project.name},
        "ranges": range_rows,
        "chapters": chapter_rows,
        "missing": [
            {
                "position": gap.position,
                "title": gap.chapter.title,
                "ordinal": gap.ordinal,
                "characters": [c.name for c in gap.missing],
            }
            for gap in gaps
        ],
    }

    output_dir = find_project_by_id(project.id, base_repo) or get_project_dir(project, base_repo)
    output_dir.mkdir(parents=True, exist_ok=True)

    # 1. JSON
    json_path = output_dir / "coverage_report.json"
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=4, ensure_ascii=False)

    # 2. Markdown Tables
    md_path = output_dir / "coverage_report.md"
    with open(md_path, "w", encoding="utf-8") as f:
        f.write("# Audio Coverage Report\n")
        f.write(f"**Project:** {project.name}\n")
        f.write(f"**Project ID:** {project.id}\n\n")

        f.write("## Ranges\n\n")
        f.write("| Range | Status |\n")
        f.write("| :--- | :--- |\n")
        for row in range_rows:
            f.write(f"| {row['range']} | {status_icon(row['covered'])} |\n")

        f.write("\n## Chapters\n\n")
        f.write("| # | Chapter | Number | Status |\n")
        f.write("| :--- | :--- | :--- | :--- |\n")
        for row in chapter_rows:
            ordinal = "" if row["ordinal"] is None else row["ordinal"]
            f.write(f"| {row['position']} | {row['title']} | {ordinal} | {status_icon(row['covered'])} |\n")

        if gaps:
            f.write("\n## Missing Audio\n\n")
            f.write("| # | Chapter | Characters |\n")
            f.write("| :--- | :--- | :--- |\n")
            for gap in gaps:
                names = ", ".join(c.name for c in gap.missing)
                f.write(f"| {gap.position} | {gap.chapter.title} | {names} |\n")

    logger.info(f"Report saved to:\n  - {json_path}\n  - {md_path}")
    return json_path, md_path
