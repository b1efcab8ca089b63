import argparse
import logging
import sys

from .assistant import AlignmentAssistant
from .find_missing import find_missing_characters
from .output_manager import build_chapter_rows, build_range_rows, save_report
from .repo_manager import REPO_ROOT
from .scanner import ScanError
from .script_loader import ProjectLoadError, ProjectLoader
from .user_interaction import review_chapter
from .utils import get_logger, setup_logging, status_icon

logger = get_logger("Main")


def print_summary(assistant: AlignmentAssistant):
    status = assistant.status
    project = assistant.project

    print("\n" + "=" * 60)
    print(f"AUDIO COVERAGE: {project.name}")
    print(f"Folder: {assistant.directory_name or '(none)'} | Files: {len(assistant.scanned_files)}")
    print("=" * 60)

    for row in build_range_rows(project, status):
        print(f"{row['range']:<12} {status_icon(row['covered'])}")

    print("-" * 60)
    incomplete = [r for r in build_chapter_rows(project, status) if r["covered"] is False]
    print(f"{len(incomplete)} chapters with missing audio.")


def print_missing(assistant: AlignmentAssistant):
    gaps = find_missing_characters(
        assistant.project, assistant.characters, assistant.coverage_index, assistant.overrides
    )
    if not gaps:
        print("No missing audio found.")
        return gaps

    print(f"{'#':<6} | {'CHAPTER':<40} | MISSING")
    print("-" * 80)
    for gap in gaps:
        names = ", ".join(c.name for c in gap.missing)
        print(f"{gap.position:<6} | {gap.chapter.title[:38]:<40} | {names}")
    return gaps


def main():
    parser = argparse.ArgumentParser(description="Audio Coverage Assistant")
    parser.add_argument("project", help="Path to the project JSON (chapters, script lines, characters)")
    parser.add_argument("audio", nargs="?", help="Folder with recorded .mp3/.wav files (defaults to the last one used)")
    parser.add_argument("--chapter", help="Select a chapter by id")
    parser.add_argument("--missing", action="store_true", help="List chapters with missing audio")
    parser.add_argument("--review", action="store_true", help="Interactively toggle characters of the selected chapter")
    parser.add_argument("--reset", action="store_true", help="Forget the previous scan and all manual overrides")
    parser.add_argument("--report", action="store_true", help="Write coverage_report.json/.md")
    parser.add_argument("--repo", default=REPO_ROOT, help="Folder where state and reports are kept")
    parser.add_argument("--no-save", action="store_true", help="Do not persist the scan or overrides")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        project = ProjectLoader(args.project).load()
    except ProjectLoadError as e:
        logger.error(str(e))
        sys.exit(1)

    assistant = AlignmentAssistant(project, base_repo=args.repo, persist=not args.no_save)

    if args.reset:
        logger.info("Resetting saved scan results and overrides.")
        assistant.reset()
    else:
        assistant.load()

    try:
        if args.audio:
            assistant.select_directory(args.audio)
        elif args.reset:
            logger.info("State cleared. Pass an audio folder to scan again.")
            return
    except ScanError as e:
        logger.error(f"Scan failed: {e}")
        sys.exit(1)

    if not assistant.scanned_files:
        logger.warning("No usable audio files found. Nothing to compare.")

    if args.chapter:
        try:
            assistant.select_chapter(args.chapter)
        except KeyError as e:
            logger.error(str(e))
            sys.exit(1)

    if args.review:
        if not args.chapter:
            logger.error("--review needs --chapter.")
            sys.exit(1)
        review_chapter(assistant)

    print_summary(assistant)

    gaps = print_missing(assistant) if args.missing else None

    if args.report:
        if gaps is None:
            gaps = find_missing_characters(
                project, assistant.characters, assistant.coverage_index, assistant.overrides
            )
        save_report(project, assistant.status, gaps, base_repo=args.repo)


if __name__ == "__main__":
    main()
