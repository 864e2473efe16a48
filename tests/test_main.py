import io
import json
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import Mock, patch

# The panel window needs a display; everything else in main runs headless
with patch.dict(sys.modules, {'ui.panel_window': Mock()}):
    import main


class AppLogicTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.zone = os.path.join(self.tmpdir.name, 'temp')
        self.config_path = os.path.join(self.tmpdir.name, 'settings.json')
        with open(self.config_path, 'w') as f:
            json.dump({"active_plugins": [], "thermal_zone_path": self.zone}, f)

    def _write_zone(self, content):
        with open(self.zone, 'w') as f:
            f.write(content)


class TestRefreshTimer(AppLogicTestCase):
    def setUp(self):
        super().setUp()
        self.app = main.AppLogic(self.config_path)
        self.app.main_window = Mock()

    def test_refresh_updates_window(self):
        self._write_zone("52000\n")
        self.app._on_timer()
        self.app.main_window.update_temp_reading.assert_called_once_with(52.0)
        self.app.main_window.after.assert_called_once_with(2000, self.app._on_timer)

    def test_reschedules_when_refresh_raises(self):
        self.app.monitor.sample = Mock(side_effect=RuntimeError("sensor plugin crashed"))
        with self.assertRaises(RuntimeError):
            self.app._on_timer()
        self.app.main_window.after.assert_called_once_with(2000, self.app._on_timer)


class TestTrayRequests(AppLogicTestCase):
    def setUp(self):
        super().setUp()
        self.app = main.AppLogic(self.config_path)
        self.app.main_window = Mock()

    def test_show_request_runs_on_ui_loop(self):
        self.app.tray_requests.put("show")
        self.app._process_tray_requests()
        self.app.main_window.deiconify.assert_called_once_with()
        self.app.main_window.after.assert_called_once_with(main.TRAY_POLL_MS, self.app._process_tray_requests)

    def test_quit_request_stops_polling(self):
        self.app.system_tray = Mock()
        self.app._refresh_job = 'after#1'
        self.app.tray_requests.put("quit")
        self.app._process_tray_requests()

        self.app.main_window.after_cancel.assert_called_once_with('after#1')
        self.app.system_tray.stop.assert_called_once_with()
        self.app.main_window.quit.assert_called_once_with()
        self.app.main_window.after.assert_not_called()


class TestOnceMode(AppLogicTestCase):
    def _run_once(self):
        argv = ['cputemp-applet', '--once', '--config', self.config_path]
        out = io.StringIO()
        with patch.object(main, 'setup_logger'), patch.object(sys, 'argv', argv), redirect_stdout(out):
            with self.assertRaises(SystemExit) as cm:
                main.main()
        return out.getvalue().strip(), cm.exception.code

    def test_prints_reading(self):
        self._write_zone("52000\n")
        self.assertEqual(self._run_once(), ("52°C", 0))

    def test_no_source_answers(self):
        self.assertEqual(self._run_once(), ("0°C", 1))


if __name__ == '__main__':
    unittest.main()
