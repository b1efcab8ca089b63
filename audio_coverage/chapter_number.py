import re
from typing import Optional

# Only single characters, "十X" and "X十" are understood. Hundreds,
# thousands and longer compounds ("一百", "二十五") are not supported.
CHINESE_DIGITS = {
    "零": 0, "一": 1, "二": 2, "三": 3, "四": 4,
    "五": 5, "六": 6, "七": 7, "八": 8, "九": 9,
    "十": 10, "百": 100, "千": 1000,
}

CHAPTER_PATTERN = re.compile(r"(?:Chapter|第)\s*([0-9零一二三四五六七八九十百千万]+)", re.IGNORECASE)
DIGITS_PATTERN = re.compile(r"^[0-9]+$")


def chinese_to_arabic(num_str: str) -> Optional[int]:
    if DIGITS_PATTERN.match(num_str):
        return int(num_str)
    if num_str in CHINESE_DIGITS:
        return CHINESE_DIGITS[num_str]
    if len(num_str) == 2:
        first, second = num_str
        if first == "十" and CHINESE_DIGITS.get(second, 10) < 10:
            return 10 + CHINESE_DIGITS[second]
        if second == "十" and CHINESE_DIGITS.get(first, 10) < 10:
            return CHINESE_DIGITS[first] * 10
    return None


def get_chapter_number(title: str) -> Optional[int]:
    """
    Extracts the chapter ordinal from a title such as "Chapter 7",
    "第十一章" or a bare "12". Returns None if nothing usable is found.
    """
    if not title:
        return None

    match = CHAPTER_PATTERN.search(title)
    if match:
        num_part = match.group(1)
        if DIGITS_PATTERN.match(num_part):
            return int(num_part)
        return chinese_to_arabic(num_part)

    stripped = title.strip()
    if DIGITS_PATTERN.match(stripped):
        return int(stripped)
    return None
