"""Unit tests for settings persistence."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from iscroll import settings_persistence
from iscroll.settings_persistence import SettingsKeys, SettingsPersistence, get_persistence


class TestSettingsPersistence(unittest.TestCase):
    """Test settings persistence functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.persistence = SettingsPersistence(config_dir=Path(self.temp_dir) / "config")
        self.test_doc_path = os.path.join(self.temp_dir, "test_document.txt")

    def tearDown(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_save_and_load_settings(self):
        """Test saving and loading settings for a document."""
        settings = {
            SettingsKeys.SMOOTH_SCROLL: False,
            SettingsKeys.WINDOW_START_LINE: 12,
            SettingsKeys.VSCROLL: 48,
        }

        success = self.persistence.save_settings(self.test_doc_path, settings)
        self.assertTrue(success)

        loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, settings)

    def test_load_nonexistent_document(self):
        """Test loading settings for a document with no saved settings."""
        loaded = self.persistence.load_settings("/nonexistent/document.txt")
        self.assertEqual(loaded, {})

    def test_save_with_none_document_path(self):
        """Test that saving with None document path returns False."""
        success = self.persistence.save_settings(None, {SettingsKeys.SMOOTH_SCROLL: True})
        self.assertFalse(success)

    def test_load_with_none_document_path(self):
        """Test that loading with None document path returns empty dict."""
        self.assertEqual(self.persistence.load_settings(None), {})

    def test_update_settings(self):
        """Saving again replaces the document's settings."""
        self.persistence.save_settings(self.test_doc_path, {SettingsKeys.WINDOW_START_LINE: 3})
        self.persistence.save_settings(self.test_doc_path, {SettingsKeys.WINDOW_START_LINE: 7})

        loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, {SettingsKeys.WINDOW_START_LINE: 7})

    def test_multiple_documents(self):
        """Test that settings for different documents are kept apart."""
        other_doc = os.path.join(self.temp_dir, "other.txt")
        self.persistence.save_settings(self.test_doc_path, {SettingsKeys.WINDOW_START_LINE: 1})
        self.persistence.save_settings(other_doc, {SettingsKeys.WINDOW_START_LINE: 2})

        self.assertEqual(self.persistence.load_settings(self.test_doc_path)[SettingsKeys.WINDOW_START_LINE], 1)
        self.assertEqual(self.persistence.load_settings(other_doc)[SettingsKeys.WINDOW_START_LINE], 2)

    def test_relative_and_absolute_paths_match(self):
        """Documents are keyed by absolute path."""
        cwd = os.getcwd()
        try:
            os.chdir(self.temp_dir)
            self.persistence.save_settings("test_document.txt", {SettingsKeys.VSCROLL: 16})
        finally:
            os.chdir(cwd)

        loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, {SettingsKeys.VSCROLL: 16})

    def test_invalid_values_are_dropped(self):
        """Wrongly typed or negative values are ignored on load."""
        self.persistence.save_settings(self.test_doc_path, {
            SettingsKeys.SMOOTH_SCROLL: "yes",
            SettingsKeys.WINDOW_START_LINE: -1,
            SettingsKeys.VSCROLL: True,
        })

        with self.assertLogs("iscroll.settings_persistence", level="WARNING"):
            loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, {})

    def test_validate_setting(self):
        validate = self.persistence.validate_setting
        self.assertTrue(validate(SettingsKeys.SMOOTH_SCROLL, True))
        self.assertFalse(validate(SettingsKeys.SMOOTH_SCROLL, 1))
        self.assertTrue(validate(SettingsKeys.WINDOW_START_LINE, 0))
        self.assertFalse(validate(SettingsKeys.WINDOW_START_LINE, 2.5))
        self.assertFalse(validate(SettingsKeys.VSCROLL, False))
        self.assertTrue(validate("future_setting", "anything"))

    def test_corrupted_settings_file(self):
        """A corrupt settings file reads as empty."""
        settings_file = Path(self.temp_dir) / "config" / "settings.json"
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text("{ invalid json", encoding='utf-8')

        with self.assertLogs("iscroll.settings_persistence", level="WARNING"):
            loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, {})

    def test_non_dict_settings_file(self):
        settings_file = Path(self.temp_dir) / "config" / "settings.json"
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text("[1, 2, 3]", encoding='utf-8')

        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {})

    def test_atomic_save_leaves_no_temp_file(self):
        self.persistence.save_settings(self.test_doc_path, {SettingsKeys.VSCROLL: 0})

        config_dir = Path(self.temp_dir) / "config"
        self.assertTrue((config_dir / "settings.json").exists())
        self.assertFalse((config_dir / "settings.tmp").exists())
        with open(config_dir / "settings.json", encoding='utf-8') as f:
            data = json.load(f)
        self.assertIn(os.path.abspath(self.test_doc_path), data)

    def test_cache_cleared_rereads_disk(self):
        self.persistence.save_settings(self.test_doc_path, {SettingsKeys.WINDOW_START_LINE: 4})

        other = SettingsPersistence(config_dir=Path(self.temp_dir) / "config")
        other.save_settings(self.test_doc_path, {SettingsKeys.WINDOW_START_LINE: 9})

        self.assertEqual(self.persistence.load_settings(self.test_doc_path)[SettingsKeys.WINDOW_START_LINE], 4)
        self.persistence.clear_cache()
        self.assertEqual(self.persistence.load_settings(self.test_doc_path)[SettingsKeys.WINDOW_START_LINE], 9)


class TestGlobalPersistence(unittest.TestCase):

    def setUp(self):
        self._saved = settings_persistence._persistence
        settings_persistence._persistence = None

    def tearDown(self):
        settings_persistence._persistence = self._saved

    def test_get_persistence_is_shared(self):
        self.assertIs(get_persistence(), get_persistence())


if __name__ == '__main__':
    unittest.main()
