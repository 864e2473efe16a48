"""
psutil Sensor Plugin
Keeps one sensor registry for the whole session and re-populates it on every read.
"""
import logging
from typing import Callable, Dict, Iterator, List, Optional

import psutil

from hardware import NoMatchingSensor, RegistryEmpty, SensorError
from utils import NO_READING, SensorKeywords, SensorReading, select_registry_temperature

logger = logging.getLogger('CpuTemp.Psutil')

# sensors_temperatures() only exists on Linux and FreeBSD
HAS_SENSORS = hasattr(psutil, "sensors_temperatures")


class SensorRegistry:
    """Flat, refreshable list of temperature readings from the platform."""

    def __init__(self, source: Optional[Callable[[], Dict[str, list]]] = None):
        self._source = source or psutil.sensors_temperatures
        self.readings: List[SensorReading] = []

    def refresh(self) -> None:
        entries = self._source()
        self.readings.clear()
        for chip_name, chip_entries in entries.items():
            for entry in chip_entries:
                # Unlabelled entries (e.g. acpitz) are named after their chip
                self.readings.append(SensorReading(entry.label or chip_name, float(entry.current)))

    def __iter__(self) -> Iterator[SensorReading]:
        return iter(self.readings)

    def __len__(self) -> int:
        return len(self.readings)


class PsutilSensor:
    name = 'psutil'

    def __init__(self, keywords: Optional[SensorKeywords] = None,
                 registry: Optional[SensorRegistry] = None):
        if registry is None and not HAS_SENSORS:
            raise ImportError("psutil.sensors_temperatures is not available on this platform")
        self.logger = logging.getLogger('CpuTemp.Psutil')
        self.keywords = keywords or SensorKeywords()
        self.registry = registry if registry is not None else SensorRegistry()

    def _read(self) -> float:
        try:
            self.registry.refresh()
        except OSError as e:
            raise RegistryEmpty(f"refresh failed: {e}") from e

        if not len(self.registry):
            raise RegistryEmpty("no temperature sensors reported")

        temperature = select_registry_temperature(list(self.registry), self.keywords)
        if temperature == NO_READING:
            raise NoMatchingSensor(f"no positive reading among {len(self.registry)} sensor(s)")
        return temperature

    def get_temperature(self) -> Optional[float]:
        try:
            return self._read()
        except SensorError as e:
            self.logger.debug(f"No reading from sensor registry: {type(e).__name__}: {e}")
            return None

    def shutdown(self):
        self.registry.readings.clear()


def register(app_logic):
    if not HAS_SENSORS:
        logger.info("psutil sensor registry not supported on this platform")
        return None
    sensor = PsutilSensor(keywords=SensorKeywords.from_config(app_logic.config))
    app_logic.register_sensor(sensor)
    return sensor
