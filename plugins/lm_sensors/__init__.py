"""
lm-sensors Sensor Plugin
Runs `sensors -j` on every refresh and walks the JSON chip tree for the CPU.
"""
import logging
import shutil
from typing import Optional, Sequence

from hardware import NoMatchingSensor, SensorError, run_sensors_tool
from utils import SensorKeywords, extract_cpu_temperature

logger = logging.getLogger('CpuTemp.LmSensors')


class LmSensorsSensor:
    name = 'lm_sensors'

    def __init__(self, command: Sequence[str] = ("sensors", "-j"),
                 keywords: Optional[SensorKeywords] = None,
                 timeout: Optional[float] = None):
        if not command:
            raise ValueError("sensors_command must not be empty")
        self.logger = logging.getLogger('CpuTemp.LmSensors')
        self.command = list(command)
        self.keywords = keywords or SensorKeywords()
        self.timeout = timeout

        if shutil.which(self.command[0]) is None:
            # Not fatal: the tool may be installed while we are running
            self.logger.warning(f"'{self.command[0]}' not found in PATH, lm-sensors readings will fall through")

    def _read(self) -> float:
        tree = run_sensors_tool(self.command, timeout=self.timeout)
        temperature = extract_cpu_temperature(tree, self.keywords)
        if temperature is None:
            raise NoMatchingSensor(f"no CPU chip among {len(tree)} chip(s)")
        return temperature

    def get_temperature(self) -> Optional[float]:
        try:
            return self._read()
        except SensorError as e:
            self.logger.debug(f"No reading from lm-sensors: {type(e).__name__}: {e}")
            return None

    def shutdown(self):
        pass


def register(app_logic):
    config = app_logic.config
    try:
        sensor = LmSensorsSensor(
            command=config.get("sensors_command"),
            keywords=SensorKeywords.from_config(config),
            timeout=config.get("sensors_timeout_secs"),
        )
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to initialize lm-sensors plugin: {e}", exc_info=True)
        return None
    app_logic.register_sensor(sensor)
    return sensor
