import unittest

from audio_coverage.chapter_number import chinese_to_arabic, get_chapter_number


class TestGetChapterNumber(unittest.TestCase):

    def test_english_titles(self):
        self.assertEqual(get_chapter_number("Chapter 7"), 7)
        self.assertEqual(get_chapter_number("chapter12: The Storm"), 12)
        self.assertEqual(get_chapter_number("CHAPTER 003"), 3)

    def test_chinese_titles(self):
        self.assertEqual(get_chapter_number("第十一章"), 11)
        self.assertEqual(get_chapter_number("第二十章 风起"), 20)
        self.assertEqual(get_chapter_number("第 5 章"), 5)
        self.assertEqual(get_chapter_number("第三章"), 3)
        self.assertEqual(get_chapter_number("第十章"), 10)

    def test_unsupported_compounds(self):
        self.assertIsNone(get_chapter_number("第一百章"))
        self.assertIsNone(get_chapter_number("第二十五章"))
        self.assertIsNone(get_chapter_number("第一千零一章"))

    def test_bare_number_title(self):
        self.assertEqual(get_chapter_number("  42 "), 42)

    def test_no_number(self):
        self.assertIsNone(get_chapter_number("Prologue"))
        self.assertIsNone(get_chapter_number(""))
        self.assertIsNone(get_chapter_number("Part 3"))
        # Bare Chinese numerals are only read after "第"
        self.assertIsNone(get_chapter_number("二十"))


class TestChineseToArabic(unittest.TestCase):

    def test_single_characters(self):
        self.assertEqual(chinese_to_arabic("零"), 0)
        self.assertEqual(chinese_to_arabic("九"), 9)
        self.assertEqual(chinese_to_arabic("十"), 10)
        self.assertEqual(chinese_to_arabic("百"), 100)
        self.assertEqual(chinese_to_arabic("千"), 1000)

    def test_two_character_tens(self):
        self.assertEqual(chinese_to_arabic("十一"), 11)
        self.assertEqual(chinese_to_arabic("十九"), 19)
        self.assertEqual(chinese_to_arabic("二十"), 20)
        self.assertEqual(chinese_to_arabic("九十"), 90)

    def test_digits(self):
        self.assertEqual(chinese_to_arabic("15"), 15)

    def test_unsupported(self):
        self.assertIsNone(chinese_to_arabic("一百"))
        self.assertIsNone(chinese_to_arabic("二十一"))
        self.assertIsNone(chinese_to_arabic("万"))
        self.assertIsNone(chinese_to_arabic("十百"))


if __name__ == '__main__':
    unittest.main()
