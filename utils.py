import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Tuple

# 0.0 doubles as "no reading yet"; a genuine 0°C is indistinguishable
NO_READING = 0.0


class SensorReading(NamedTuple):
    label: str
    value: float


@dataclass(frozen=True)
class SensorKeywords:
    """Vendor-specific matching data. Loaded from config, never hard-wired in the walkers."""
    preferred_sensor_path: Tuple[str, ...] = ("k10temp-pci-00c3", "Tctl", "temp1_input")
    chip_keywords: Tuple[str, ...] = ("cpu", "k10", "coretemp")
    metric_keys: Tuple[str, ...] = ("temp1_input", "input")
    priority_labels: Tuple[str, ...] = ("package id 0", "tctl")
    cpu_label_keywords: Tuple[str, ...] = ("cpu", "core")

    @classmethod
    def from_config(cls, config) -> 'SensorKeywords':
        return cls(
            preferred_sensor_path=tuple(config.get("preferred_sensor_path")),
            chip_keywords=tuple(config.get("chip_keywords")),
            metric_keys=tuple(config.get("metric_keys")),
            priority_labels=tuple(config.get("priority_labels")),
            cpu_label_keywords=tuple(config.get("cpu_label_keywords")),
        )

    def is_priority_label(self, label: str) -> bool:
        lowered = label.lower()
        return any(lowered == p.lower() for p in self.priority_labels)

    def is_cpu_label(self, label: str) -> bool:
        lowered = label.lower()
        return any(k.lower() in lowered for k in self.cpu_label_keywords)

    def is_cpu_chip(self, chip_name: str) -> bool:
        # Chip names are matched case-sensitively
        return any(k in chip_name for k in self.chip_keywords)


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _lookup_path(tree: Mapping[str, Any], path: Iterable[str]) -> Any:
    node: Any = tree
    for key in path:
        if not isinstance(node, Mapping) or key not in node:
            return None
        node = node[key]
    return node


def extract_cpu_temperature(tree: Any, keywords: SensorKeywords) -> Optional[float]:
    """
    Find the CPU temperature in a chip -> sensor -> metric tree.

    The preferred fixed path wins outright. Otherwise the first numeric
    metric under the first CPU-looking chip is returned, in the tree's
    iteration order. That order comes from the tool's output and is not
    guaranteed, so with several matching chips any of them may win.
    Returns None when nothing matches.
    """
    if not isinstance(tree, Mapping):
        return None

    preferred = _as_number(_lookup_path(tree, keywords.preferred_sensor_path))
    if preferred is not None:
        return preferred

    for chip_name, chip in tree.items():
        if not isinstance(chip, Mapping) or not keywords.is_cpu_chip(str(chip_name)):
            continue
        for entry in chip.values():
            # Non-sensor fields such as "Adapter" are plain strings
            if not isinstance(entry, Mapping):
                continue
            for metric in keywords.metric_keys:
                value = _as_number(entry.get(metric))
                if value is not None:
                    return value
    return None


def select_registry_temperature(readings: List[SensorReading], keywords: SensorKeywords) -> float:
    """
    Pick the CPU temperature from a flat list of labelled readings.

    A priority label (package / Tctl) short-circuits. Otherwise the hottest
    CPU- or core-labelled reading is used, and failing that the first
    positive reading of any kind. Returns NO_READING if none qualifies.
    """
    temperature = NO_READING
    for reading in readings:
        if keywords.is_priority_label(reading.label):
            temperature = reading.value
            break
        if keywords.is_cpu_label(reading.label) and reading.value > temperature:
            temperature = reading.value

    if temperature == NO_READING and readings:
        for reading in readings:
            if reading.value > 0:
                temperature = reading.value
                break

    return temperature


def parse_millidegrees(text: str) -> Optional[float]:
    """Convert thermal-zone file contents (millidegrees) to °C, None if not numeric."""
    try:
        raw = float(text.strip())
    except (ValueError, AttributeError):
        return None
    if not math.isfinite(raw):
        return None
    return raw / 1000.0


def format_label(temperature: float) -> str:
    return f"{temperature:.0f}°C"


def format_tooltip(temperature: float) -> str:
    return f"CPU Temperature: {temperature:.1f}°C"
