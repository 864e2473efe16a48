import json
import subprocess
from typing import Any, Dict, Optional, Sequence
from logger import get_logger
from utils import parse_millidegrees


class SensorError(Exception):
    """Base class for recoverable acquisition failures."""


class ToolUnavailable(SensorError):
    pass


class ToolOutputMalformed(SensorError):
    pass


class NoMatchingSensor(SensorError):
    pass


class RegistryEmpty(SensorError):
    pass


class FileUnreadable(SensorError):
    pass


class FileUnparseable(SensorError):
    pass


def run_sensors_tool(command: Sequence[str], timeout: Optional[float] = None) -> Dict[str, Any]:
    """
    Run the hardware monitoring tool and parse its JSON output.

    Returns the top-level chip mapping. Raises ToolUnavailable when the
    process cannot be run or exits non-zero, ToolOutputMalformed when
    stdout is not UTF-8 JSON describing an object.
    """
    try:
        result = subprocess.run(list(command), capture_output=True, timeout=timeout, check=False)
    except (OSError, ValueError) as e:
        raise ToolUnavailable(f"{command[0] if command else '<empty>'}: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise ToolUnavailable(f"{command[0]} timed out after {timeout}s") from e

    if result.returncode != 0:
        raise ToolUnavailable(f"{command[0]} exited with code {result.returncode}")

    try:
        tree = json.loads(result.stdout.decode('utf-8'))
    except UnicodeDecodeError as e:
        raise ToolOutputMalformed(f"output is not UTF-8: {e}") from e
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, over-long integers and runaway nesting
        raise ToolOutputMalformed(f"output is not JSON: {e}") from e

    if not isinstance(tree, dict):
        raise ToolOutputMalformed(f"expected a chip mapping, got {type(tree).__name__}")
    return tree


def read_thermal_zone(path: str) -> float:
    """Read a thermal-zone file and return degrees Celsius."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileUnreadable(f"{path}: {e}") from e

    value = parse_millidegrees(content)
    if value is None:
        raise FileUnparseable(f"{path}: not a number: {content.strip()[:32]!r}")
    return value


class ThermalZoneSensor:
    """Last-resort source: the kernel thermal zone pseudo-file."""

    name = 'thermal_zone'

    def __init__(self, path: str) -> None:
        self.logger = get_logger('ThermalZone')
        self.path = path

    def get_temperature(self) -> Optional[float]:
        try:
            return read_thermal_zone(self.path)
        except SensorError as e:
            self.logger.debug(f"No reading from thermal zone: {e}")
            return None

    def shutdown(self) -> None:
        pass
