import time
from typing import Any, List, Optional
from logger import get_logger
from utils import NO_READING
from advanced_logging import get_detailed_logger


class TemperatureMonitor:
    """
    Owns the refresh cycle and the last observed CPU temperature.

    Sensors are tried in registration order, the fallback sensor last.
    The first one to return a value wins. If every source fails the
    previous temperature is kept as-is, so a transient failure never
    flickers the display to 0°C. Before any successful read the value
    is NO_READING.

    Not thread-safe: sample() is meant to be called from a single timer.
    """

    def __init__(self, fallback: Optional[Any] = None) -> None:
        self.logger = get_logger('TemperatureMonitor')
        self.sensors: List[Any] = []
        self.fallback = fallback
        self._temperature: float = NO_READING
        self.last_source: Optional[str] = None
        self.failed_cycles: int = 0

    @property
    def temperature(self) -> float:
        return self._temperature

    @property
    def has_reading(self) -> bool:
        """True once any source has produced a value."""
        return self.last_source is not None

    def add_sensor(self, sensor: Any) -> None:
        self.sensors.append(sensor)
        self.logger.info(f"Sensor added: {getattr(sensor, 'name', sensor)} (position {len(self.sensors)})")

    def _strategies(self) -> List[Any]:
        if self.fallback is None:
            return list(self.sensors)
        return self.sensors + [self.fallback]

    def sample(self) -> float:
        start = time.perf_counter()
        detailed_logger = get_detailed_logger()
        tried = 0
        result: Optional[float] = None
        source: Optional[str] = None

        for sensor in self._strategies():
            tried += 1
            name = getattr(sensor, 'name', type(sensor).__name__)
            result = sensor.get_temperature()
            if detailed_logger:
                detailed_logger.log_sensor_read(source=name, temperature=result, success=result is not None)
            if result is not None:
                source = name
                break

        if result is not None:
            if self.failed_cycles:
                self.logger.info(f"Temperature readings recovered via {source} after {self.failed_cycles} failed cycle(s)")
            elif source != self.last_source:
                self.logger.info(f"Reading CPU temperature from {source}")
            self._temperature = float(result)
            self.last_source = source
            self.failed_cycles = 0
        else:
            self.failed_cycles += 1
            if self.failed_cycles == 1:
                self.logger.warning(
                    f"No temperature source produced a reading ({tried} tried), "
                    f"keeping {self._temperature:.1f}°C"
                )

        if detailed_logger:
            detailed_logger.log_cycle(sources_tried=tried, temperature=self._temperature, success=result is not None)
            detailed_logger.log_performance('sample', (time.perf_counter() - start) * 1000)

        return self._temperature
