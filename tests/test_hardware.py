import json
import os
import subprocess
import sys
import tempfile
import unittest
from unittest.mock import patch

from hardware import (FileUnparseable, FileUnreadable, SensorError, ThermalZoneSensor,
                      ToolOutputMalformed, ToolUnavailable, read_thermal_zone, run_sensors_tool)

COMMAND = ["sensors", "-j"]


def completed(stdout: bytes, returncode: int = 0):
    return subprocess.CompletedProcess(COMMAND, returncode, stdout=stdout, stderr=b"")


class TestRunSensorsTool(unittest.TestCase):
    @patch('hardware.subprocess.run')
    def test_parses_chip_tree(self, mock_run):
        tree = {"coretemp-isa-0000": {"Package id 0": {"temp1_input": 55.0}}}
        mock_run.return_value = completed(json.dumps(tree).encode('utf-8'))

        self.assertEqual(run_sensors_tool(COMMAND, timeout=3.0), tree)
        mock_run.assert_called_once_with(COMMAND, capture_output=True, timeout=3.0, check=False)

    @patch('hardware.subprocess.run', side_effect=FileNotFoundError(2, "No such file or directory"))
    def test_missing_tool(self, mock_run):
        with self.assertRaises(ToolUnavailable):
            run_sensors_tool(COMMAND)

    @patch('hardware.subprocess.run', side_effect=subprocess.TimeoutExpired(COMMAND, 5.0))
    def test_hung_tool(self, mock_run):
        with self.assertRaises(ToolUnavailable):
            run_sensors_tool(COMMAND, timeout=5.0)

    @patch('hardware.subprocess.run')
    def test_nonzero_exit(self, mock_run):
        mock_run.return_value = completed(b'{}', returncode=1)
        with self.assertRaises(ToolUnavailable):
            run_sensors_tool(COMMAND)

    @patch('hardware.subprocess.run')
    def test_malformed_outputs(self, mock_run):
        for stdout in (b'', b'No sensors found!\n', b'\xff\xfe{}', b'[1, 2]', b'"text"'):
            mock_run.return_value = completed(stdout)
            with self.assertRaises(ToolOutputMalformed, msg=f"stdout={stdout!r}"):
                run_sensors_tool(COMMAND)

    @patch('hardware.subprocess.run')
    def test_pathological_json(self, mock_run):
        """Inputs json.loads rejects with something other than JSONDecodeError"""
        huge_int = b'{"coretemp-isa-0000": {"Core 0": {"temp1_input": ' + b'9' * 5000 + b'}}}'
        deep = b'[' * 100000
        cases = [deep]
        # Integer string length limit exists from 3.11 on
        if hasattr(sys, 'get_int_max_str_digits'):
            cases.append(huge_int)
        for stdout in cases:
            mock_run.return_value = completed(stdout)
            with self.assertRaises(ToolOutputMalformed):
                run_sensors_tool(COMMAND)

    def test_errors_are_recoverable(self):
        """All acquisition errors share one base so callers can fall through"""
        for error in (ToolUnavailable, ToolOutputMalformed, FileUnreadable, FileUnparseable):
            self.assertTrue(issubclass(error, SensorError))


class TestThermalZone(unittest.TestCase):
    def setUp(self):
        fd, self.path = tempfile.mkstemp(suffix='_temp')
        os.close(fd)

    def tearDown(self):
        if os.path.exists(self.path):
            os.unlink(self.path)

    def _write(self, content):
        with open(self.path, 'w') as f:
            f.write(content)

    def test_reads_millidegrees(self):
        self._write("45230\n")
        self.assertAlmostEqual(read_thermal_zone(self.path), 45.23)

    def test_unparseable(self):
        self._write("abc")
        with self.assertRaises(FileUnparseable):
            read_thermal_zone(self.path)

    def test_missing_file(self):
        os.unlink(self.path)
        with self.assertRaises(FileUnreadable):
            read_thermal_zone(self.path)

    def test_sensor_returns_none_on_failure(self):
        sensor = ThermalZoneSensor(self.path)
        self._write("abc")
        self.assertIsNone(sensor.get_temperature())

        self._write("52000\n")
        self.assertEqual(sensor.get_temperature(), 52.0)

        os.unlink(self.path)
        self.assertIsNone(sensor.get_temperature())


if __name__ == '__main__':
    unittest.main()
