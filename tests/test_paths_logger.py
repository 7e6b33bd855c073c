from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PySide6.QtCore import qWarning

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from traineer.logger import setup_logger
from traineer.paths import get_base_dir, get_log_dir, get_user_data_dir, resolve_catalog_path


class PathsLoggerTest(unittest.TestCase):
    def test_paths_exist(self) -> None:
        base = get_base_dir()
        self.assertTrue((base / "config" / "config.json").exists())
        self.assertTrue(get_user_data_dir().exists())
        self.assertTrue(get_log_dir().exists())

    def test_catalog_path_resolution(self) -> None:
        config_path = Path(tempfile.gettempdir()) / "cfg" / "config.json"
        self.assertEqual(resolve_catalog_path(config_path, "content.yaml"), config_path.parent / "content.yaml")
        absolute = Path(tempfile.gettempdir()).resolve() / "content.yaml"
        self.assertEqual(resolve_catalog_path(config_path, str(absolute)), absolute)
        self.assertEqual(resolve_catalog_path(config_path, ""), get_base_dir() / "config" / "catalog.yaml")

    def test_logger_writes_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_dir = Path(tmp)
            logger = setup_logger(log_dir, debug=True)
            logger.info("trainer logger test")
            for handler in logger.handlers:
                handler.flush()
            log_file = log_dir / "app.log"
            self.assertTrue(log_file.exists())
            content = log_file.read_text(encoding="utf-8")
            self.assertIn("trainer logger test", content)
            # Release file handle on Windows.
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def test_qt_warnings_reach_logger(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            logger = setup_logger(Path(tmp), debug=False)
            with self.assertLogs("Traineer", level="WARNING") as captured:
                qWarning("scheduler timer stalled")
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
        self.assertTrue(any("scheduler timer stalled" in line for line in captured.output))
        self.assertTrue(any("[Qt" in line for line in captured.output))

    def test_windows_user_data_dir_is_stable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            local_appdata = Path(tmp)
            qt_path = str(local_appdata / "SomeQtDerivedPath")
            with patch("traineer.paths.sys.platform", "win32"), patch.dict(
                "traineer.paths.os.environ",
                {"LOCALAPPDATA": str(local_appdata)},
                clear=False,
            ), patch("traineer.paths.QStandardPaths.writableLocation", return_value=qt_path):
                user_dir = get_user_data_dir()

            self.assertEqual(user_dir, local_appdata / "SomeQtDerivedPath" / "Traineer")
            self.assertTrue(user_dir.exists())


if __name__ == "__main__":
    unittest.main()
