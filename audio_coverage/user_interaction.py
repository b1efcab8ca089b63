from typing import Set

from .utils import get_logger, status_icon

logger = get_logger("UserInteraction")


def parse_selection(user_input: str) -> Set[int]:
    """
    Parses "1, 3, 5-7" into {1, 3, 5, 6, 7}.
    Raises ValueError on anything that is not a number or range.
    """
    selected = set()
    parts = [p.strip() for p in user_input.split(",") if p.strip()]

    for part in parts:
        if "-" in part:
            start_str, end_str = part.split("-", 1)
            start, end = int(start_str.strip()), int(end_str.strip())
            if start > end:
                # Swap if user did 10-1
                start, end = end, start
            selected.update(range(start, end + 1))
        else:
            selected.add(int(part))

    return selected


def review_chapter(assistant) -> int:
    """
    Shows the characters of the selected chapter with their audio status
    and lets the user flip any of them by row number.
    Returns the number of characters toggled.
    """
    chapter = assistant.find_chapter(assistant.selected_chapter_id) if assistant.selected_chapter_id else None
    if chapter is None:
        logger.error("No chapter selected.")
        return 0

    characters = assistant.characters_in_selected_chapter
    status = assistant.status
    statuses = status.characters if status else {}

    print("\n" + "=" * 60)
    print(f"CHAPTER: {chapter.title}")
    print("=" * 60)
    print(f"{'#':<5} | {'CHARACTER':<30} | {'CV':<20} | STATUS")
    print("-" * 70)

    for row, character in enumerate(characters, start=1):
        icon = status_icon(statuses.get(character.id))
        print(f"{row:<5} | {character.name[:28]:<30} | {(character.cv_name or '')[:18]:<20} | {icon}")

    print("-" * 70)
    print("\nEnter the rows to TOGGLE (e.g., '1, 3-4').")
    print("Press ENTER to keep everything as it is.")

    user_input = input("> ").strip()

    if not user_input:
        logger.info("No characters toggled.")
        return 0

    try:
        rows = parse_selection(user_input)
    except ValueError:
        logger.error("Invalid input. Please enter numbers or ranges (e.g. '1-3') only.")
        return review_chapter(assistant)  # Recursive retry

    toggled = 0
    for row in sorted(rows):
        if 1 <= row <= len(characters):
            character = characters[row - 1]
            value = assistant.toggle_character(character.id)
            logger.info(f"{character.name}: marked as {'recorded' if value else 'missing'}.")
            toggled += 1
        else:
            logger.warning(f"Ignoring unknown row {row}.")

    return toggled
