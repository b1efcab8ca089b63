import pathlib
import tempfile
import unittest
from unittest.mock import patch

from audio_coverage.assistant import AlignmentAssistant
from audio_coverage.models import AssistantState, Chapter, Character, ParsedFileInfo, Project, ScriptLine
from audio_coverage.repo_manager import load_state, save_state
from audio_coverage.scanner import ScanError


def make_project(chapter_count=3):
    chapters = []
    for i in range(1, chapter_count + 1):
        chapters.append(Chapter(id=f"c{i}", title=f"Chapter {i}", script_lines=[
            ScriptLine(id=f"c{i}-1", character_id="alice"),
            ScriptLine(id=f"c{i}-2", character_id="bob"),
        ]))
    return Project(id="p1", name="Night", chapters=chapters, characters=[
        Character(id="bob", name="Bob"),
        Character(id="alice", name="Alice", cv_name="Luna"),
        Character(id="old", name="Old", cv_name="Gone", status="merged"),
    ])


class TestAlignmentAssistant(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        base = pathlib.Path(self._tmp.name)
        self.repo = base / "repo"
        self.audio = base / "audio"
        self.audio.mkdir()
        for name in ["1_Luna.mp3", "1_Bob.mp3", "2_Luna.mp3"]:
            (self.audio / name).write_bytes(b"")
        self.project = make_project()
        self.assistant = AlignmentAssistant(self.project, base_repo=self.repo)

    def tearDown(self):
        self._tmp.cleanup()

    def test_cv_names_exclude_merged(self):
        self.assertEqual(self.assistant.cv_names, ["Luna"])
        self.assertEqual([c.id for c in self.assistant.characters], ["bob", "alice"])

    def test_status_is_none_before_scan(self):
        self.assertIsNone(self.assistant.status)

    def test_select_directory_computes_status(self):
        self.assistant.select_directory(self.audio)

        status = self.assistant.status
        self.assertEqual(self.assistant.directory_name, "audio")
        self.assertEqual(status.chapters, {"c1": True, "c2": False, "c3": False})
        self.assertEqual(status.ranges, {"1-3": False})

    def test_scan_persists_state(self):
        self.assistant.select_directory(self.audio)
        state = load_state(self.project, self.repo)
        self.assertEqual(state.directory_name, "audio")
        self.assertEqual(len(state.scanned_files), 3)

    def test_no_persist(self):
        assistant = AlignmentAssistant(self.project, base_repo=self.repo, persist=False)
        assistant.select_directory(self.audio)
        self.assertFalse(self.repo.exists())

    def test_select_chapter_and_characters(self):
        self.assistant.select_directory(self.audio)
        self.assistant.select_chapter("c2")

        self.assertEqual(self.assistant.status.characters, {"alice": True, "bob": False})
        self.assertEqual([c.name for c in self.assistant.characters_in_selected_chapter], ["Alice", "Bob"])

        with self.assertRaises(KeyError):
            self.assistant.select_chapter("missing")

    def test_select_range(self):
        assistant = AlignmentAssistant(make_project(150), persist=False)
        self.assertEqual([r.label for r in assistant.chapter_ranges], ["1-100", "101-150"])
        self.assertEqual(assistant.chapters_in_selected_range, [])

        assistant.select_range(1)
        chapters = assistant.chapters_in_selected_range
        self.assertEqual((chapters[0].id, chapters[-1].id, len(chapters)), ("c101", "c150", 50))

        with self.assertRaises(IndexError):
            assistant.select_range(2)

    def test_toggle_character_overrides_globally(self):
        self.assistant.select_directory(self.audio)
        self.assistant.select_chapter("c2")

        self.assertTrue(self.assistant.toggle_character("bob"))
        status = self.assistant.status
        self.assertTrue(status.characters["bob"])
        self.assertTrue(status.chapters["c2"])
        # c3 still lacks Alice, but Bob is now covered there too
        self.assertFalse(status.chapters["c3"])

        # Second toggle negates the live status
        self.assertFalse(self.assistant.toggle_character("bob"))
        self.assertFalse(self.assistant.status.chapters["c1"])

        self.assertEqual(load_state(self.project, self.repo).manual_overrides, {"bob": False})

    def test_toggle_without_scan_marks_true(self):
        self.assertTrue(self.assistant.toggle_character("alice"))

    def test_rescan_resets_overrides_only_when_asked(self):
        self.assistant.select_directory(self.audio)
        self.assistant.toggle_character("bob")

        self.assistant.rescan(reset=False)
        self.assertIn("bob", self.assistant.overrides)

        self.assistant.rescan()
        self.assertNotIn("bob", self.assistant.overrides)

    def test_rescan_without_directory(self):
        self.assertFalse(self.assistant.rescan())

    def test_failed_scan_keeps_previous_state(self):
        self.assistant.select_directory(self.audio)
        self.assistant.toggle_character("bob")
        before = self.assistant.to_state()

        with patch("audio_coverage.assistant.scan_directory", side_effect=ScanError("x", "Permission denied")):
            with self.assertRaises(ScanError):
                self.assistant.rescan()

        self.assertEqual(self.assistant.to_state(), before)

    def test_reset_clears_everything(self):
        self.assistant.select_directory(self.audio)
        self.assistant.toggle_character("bob")
        self.assistant.reset()

        self.assertIsNone(self.assistant.status)
        self.assertEqual(len(self.assistant.overrides), 0)
        state = load_state(self.project, self.repo)
        self.assertEqual(state.scanned_files, [])
        self.assertEqual(state.manual_overrides, {})

    def test_load_rescans_existing_directory(self):
        save_state(self.project, AssistantState(
            project_id="p1",
            directory_name="audio",
            directory_path=str(self.audio),
            scanned_files=[ParsedFileInfo(chapters=[9], character_name="Bob")],
            manual_overrides={"alice": False},
        ), self.repo)

        self.assertTrue(self.assistant.load())
        self.assertEqual(len(self.assistant.scanned_files), 3)
        self.assertEqual(len(self.assistant.overrides), 0)

    def test_load_restores_saved_files_when_directory_is_gone(self):
        save_state(self.project, AssistantState(
            project_id="p1",
            directory_name="audio",
            directory_path=str(self.audio / "moved"),
            scanned_files=[ParsedFileInfo(chapters=[3], character_name="Bob")],
            manual_overrides={"alice": True},
        ), self.repo)

        self.assertTrue(self.assistant.load())
        self.assertEqual(self.assistant.scanned_files, [ParsedFileInfo(chapters=[3], character_name="Bob")])
        self.assertTrue(self.assistant.status.chapters["c3"])

    def test_load_nothing_saved(self):
        self.assertFalse(self.assistant.load())
        self.assertIsNone(self.assistant.directory_name)


if __name__ == '__main__':
    unittest.main()
